# metalingo/resolver.py
"""
部分匹配解析器。

对请求的目标语言集合 T，先查找完整键 K(T)；未命中时枚举 T 的所有
非空真子集 S，探测 K(S) 并合并找到的语言，以避免重复翻译已知语言。
"""

from collections.abc import Iterator
from itertools import combinations

import structlog

from metalingo.cache.keys import generate_cache_key
from metalingo.cache.store import CacheStore
from metalingo.core.types import (
    LanguageSet,
    Resolution,
    TranslationContent,
    TranslationResult,
    is_error_marker,
)
from metalingo.exceptions import TooManyLanguagesError

logger = structlog.get_logger(__name__)

# 子集数量为 2^n - 2，n 受支持语言数量约束（通常不超过 20）。
MAX_SUBSET_LANGUAGES = 20


def language_subsets(languages: LanguageSet) -> Iterator[LanguageSet]:
    """
    按子集大小从大到小，产出 `languages` 的所有非空真子集。

    n 个语言共有 2^n - 2 个子集，n < 2 时没有任何子集。成本随 n 指数增长，
    因此 n 超过 MAX_SUBSET_LANGUAGES 时直接拒绝。
    """
    codes = languages.codes
    if len(codes) > MAX_SUBSET_LANGUAGES:
        raise TooManyLanguagesError(
            f"目标语言数量 {len(codes)} 超过子集枚举上限 {MAX_SUBSET_LANGUAGES}"
        )
    for size in range(len(codes) - 1, 0, -1):
        for combo in combinations(codes, size):
            yield LanguageSet(combo)


class PartialMatchResolver:
    """在缓存中以语言子集为粒度复用已有的翻译结果。"""

    def __init__(self, store: CacheStore):
        self.store = store

    async def resolve(
        self,
        content: TranslationContent,
        source_lang: str,
        targets: LanguageSet,
    ) -> Resolution:
        full_key = generate_cache_key(content, source_lang, targets)
        entry = await self.store.get(full_key)
        if entry is not None:
            logger.info(
                "缓存命中（完整键）",
                source_host=content.source_host,
                key=full_key[:12],
                languages=len(entry.result),
            )
            return Resolution(accumulator=dict(entry.result), missing=LanguageSet(), full_hit=True)

        logger.info(
            "缓存未命中，开始查找部分匹配",
            source_host=content.source_host,
            key=full_key[:12],
            targets=list(targets),
        )

        accumulator: TranslationResult = {}
        subset_hits = 0
        for subset in language_subsets(targets):
            if subset.issubset(accumulator):
                continue
            subset_entry = await self.store.get(
                generate_cache_key(content, source_lang, subset)
            )
            if subset_entry is None:
                continue
            subset_hits += 1
            for lang, payload in subset_entry.result.items():
                # 先找到的优先：同一语言的任何有效子集条目都同样有效
                if lang in targets and lang not in accumulator and not is_error_marker(payload):
                    accumulator[lang] = payload
            logger.debug("找到部分缓存", subset=list(subset))

        missing = targets - accumulator.keys()
        logger.info(
            "部分匹配解析完成",
            reused=sorted(accumulator),
            missing=list(missing),
            subset_hits=subset_hits,
        )
        return Resolution(accumulator=accumulator, missing=missing, subset_hits=subset_hits)
