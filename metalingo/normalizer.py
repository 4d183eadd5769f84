# metalingo/normalizer.py
"""从抓取到的元数据快照构建确定性的、可哈希的翻译内容。"""

from urllib.parse import urlparse

from metalingo.core.types import (
    UNKNOWN_HOST,
    MetadataSnapshot,
    MetaSection,
    SocialSection,
    TranslationContent,
)


def extract_source_host(snapshot: MetadataSnapshot) -> str:
    """
    推导来源主机名。

    优先使用显式的 source_host，其次依次尝试 url / canonical / domain。
    完整 URL 取其 hostname，否则去掉路径部分原样使用。
    """
    if snapshot.source_host:
        return snapshot.source_host

    raw = snapshot.url or snapshot.canonical or snapshot.domain or ""
    if not raw:
        return UNKNOWN_HOST

    parsed = urlparse(raw)
    if parsed.scheme and parsed.hostname:
        return parsed.hostname
    return raw.split("/")[0] or UNKNOWN_HOST


def resolve_source_lang(snapshot: MetadataSnapshot, default: str = "en") -> str:
    """返回快照声明的源语言，缺失时使用默认值。"""
    return (snapshot.source_language or "").strip() or default


def build_translation_content(snapshot: MetadataSnapshot) -> TranslationContent:
    """
    只挑选 SEO 元数据字段进行翻译，网页正文永远不会被翻译。

    缺失字段降级为空字符串而不是报错；社交卡片字段缺失时回退到
    普通的 title / description。
    """
    title = snapshot.title or ""
    description = snapshot.description or ""

    return TranslationContent(
        meta=MetaSection(
            title=title,
            description=description,
            keywords=snapshot.keywords or "",
            h1=snapshot.h1 or "",
        ),
        og=SocialSection(
            title=snapshot.og_title or title,
            description=snapshot.og_description or description,
        ),
        twitter=SocialSection(
            title=snapshot.twitter_title or title,
            description=snapshot.twitter_description or description,
        ),
        source_host=extract_source_host(snapshot),
    )
