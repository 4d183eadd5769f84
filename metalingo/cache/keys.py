# metalingo/cache/keys.py
"""内容寻址的缓存键生成。"""

import hashlib
from collections.abc import Iterable

from metalingo.core.types import TranslationContent


def generate_cache_key(
    content: TranslationContent, source_lang: str, target_langs: Iterable[str]
) -> str:
    """
    为 (源语言, 排序后的目标语言集合, 规范化内容) 生成确定性的 SHA-256 键。

    目标语言在组合前排序并去重，因此顺序不同的相同集合得到相同的键。
    碰撞在实践中视为不会发生（摘要空间远大于请求量），这是一个已知并接受的风险。
    """
    sorted_targets = ",".join(sorted(set(target_langs)))
    cache_string = f"{source_lang}:{sorted_targets}:{content.canonical_json()}"
    return hashlib.sha256(cache_string.encode("utf-8")).hexdigest()
