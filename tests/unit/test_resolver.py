# tests/unit/test_resolver.py
"""
PartialMatchResolver 的单元测试。

覆盖子集枚举的数量与顺序、完整键命中、部分复用，以及错误标记永不复用。
"""

import pytest

from metalingo.cache.keys import generate_cache_key
from metalingo.cache.store import CacheStore
from metalingo.core.types import CacheEntry, LanguageSet, MetadataSnapshot
from metalingo.exceptions import TooManyLanguagesError
from metalingo.normalizer import build_translation_content
from metalingo.resolver import MAX_SUBSET_LANGUAGES, PartialMatchResolver, language_subsets


@pytest.fixture
def content():
    return build_translation_content(
        MetadataSnapshot(title="Hello", description="World", source_host="example.com")
    )


@pytest.fixture
def resolver(store: CacheStore) -> PartialMatchResolver:
    return PartialMatchResolver(store)


async def _put(store: CacheStore, content, result: dict, clock) -> None:
    key = generate_cache_key(content, "en", result.keys())
    await store.set(key, CacheEntry(result=result, language_set=list(result), created_at=clock()))


class TestLanguageSubsets:
    @pytest.mark.parametrize("n", [2, 3, 4, 6])
    def test_subset_count_is_two_pow_n_minus_two(self, n: int) -> None:
        codes = ["de", "es", "fr", "it", "ja", "pt"][:n]
        subsets = list(language_subsets(LanguageSet(codes)))
        assert len(subsets) == 2**n - 2
        assert len(set(subsets)) == len(subsets)

    def test_single_language_has_no_subsets(self) -> None:
        assert list(language_subsets(LanguageSet(["es"]))) == []

    def test_larger_subsets_come_first(self) -> None:
        sizes = [len(s) for s in language_subsets(LanguageSet(["de", "es", "fr", "it"]))]
        assert sizes == sorted(sizes, reverse=True)

    def test_too_many_languages_is_rejected(self) -> None:
        codes = [f"l{i:02d}" for i in range(MAX_SUBSET_LANGUAGES + 1)]
        with pytest.raises(TooManyLanguagesError, match="上限"):
            next(language_subsets(LanguageSet(codes)))


class TestPartialMatchResolver:
    @pytest.mark.asyncio
    async def test_cold_cache_reports_everything_missing(self, resolver, content) -> None:
        resolution = await resolver.resolve(content, "en", LanguageSet(["es", "fr"]))
        assert resolution.accumulator == {}
        assert resolution.missing == LanguageSet(["es", "fr"])
        assert not resolution.full_hit

    @pytest.mark.asyncio
    async def test_full_key_hit(self, resolver, store, content, clock) -> None:
        result = {"es": {"meta": {"title": "Hola"}}, "fr": {"meta": {"title": "Bonjour"}}}
        await _put(store, content, result, clock)

        resolution = await resolver.resolve(content, "en", LanguageSet(["fr", "es"]))

        assert resolution.full_hit
        assert resolution.accumulator == result
        assert not resolution.missing

    @pytest.mark.asyncio
    async def test_partial_reuse_reports_only_missing(self, resolver, store, content, clock) -> None:
        await _put(store, content, {"es": {"v": "es"}, "fr": {"v": "fr"}}, clock)

        resolution = await resolver.resolve(content, "en", LanguageSet(["es", "fr", "de"]))

        assert resolution.accumulator == {"es": {"v": "es"}, "fr": {"v": "fr"}}
        assert resolution.missing == LanguageSet(["de"])
        assert resolution.subset_hits == 1

    @pytest.mark.asyncio
    async def test_first_found_wins_with_larger_subset_first(
        self, resolver, store, content, clock
    ) -> None:
        await _put(store, content, {"es": {"v": "pair"}, "fr": {"v": "pair"}}, clock)
        await _put(store, content, {"es": {"v": "single"}}, clock)

        resolution = await resolver.resolve(content, "en", LanguageSet(["es", "fr", "de"]))

        assert resolution.accumulator["es"] == {"v": "pair"}
        # 已被覆盖的子集不再探测
        assert resolution.subset_hits == 1

    @pytest.mark.asyncio
    async def test_error_markers_are_never_reused(self, resolver, store, content, clock) -> None:
        await _put(
            store,
            content,
            {"es": {"v": "es"}, "fr": {"v": "fr", "_error": "翻译失败: boom"}},
            clock,
        )

        resolution = await resolver.resolve(content, "en", LanguageSet(["es", "fr", "de"]))

        assert "fr" not in resolution.accumulator
        assert resolution.missing == LanguageSet(["de", "fr"])

    @pytest.mark.asyncio
    async def test_different_source_language_does_not_match(
        self, resolver, store, content, clock
    ) -> None:
        await _put(store, content, {"es": {"v": "es"}}, clock)
        resolution = await resolver.resolve(content, "de", LanguageSet(["es", "fr"]))
        assert resolution.accumulator == {}
