# metalingo/coordinator.py
"""本模块包含 Metalingo 的主协调器：翻译记忆化与增量扇出的唯一入口。"""

import asyncio
import copy
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from metalingo.cache.keys import generate_cache_key
from metalingo.cache.store import CacheStore
from metalingo.config import MetalingoConfig
from metalingo.core.types import (
    CacheEntry,
    CacheStats,
    LanguageSet,
    MetadataSnapshot,
    TranslationContent,
    TranslationResult,
    make_error_marker,
)
from metalingo.engines.base import BaseTranslatorEngine
from metalingo.exceptions import EngineInvocationError, TranslationEngineError
from metalingo.executor import BatchTranslationExecutor
from metalingo.normalizer import build_translation_content, resolve_source_lang
from metalingo.resolver import PartialMatchResolver
from metalingo.utils import normalize_target_languages

logger = structlog.get_logger(__name__)


class TranslationCoordinator:
    """
    异步主协调器。

    单个请求内的步骤严格顺序执行：完整键查找 -> 部分匹配 -> 批量翻译 ->
    合并与发布。跨请求没有顺序保证；对同一个键的并发请求会合并为一次
    共享的执行，避免对冷键的“惊群”。
    """

    def __init__(
        self,
        config: MetalingoConfig,
        store: CacheStore,
        engine: BaseTranslatorEngine[Any],
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.store = store
        self.engine = engine
        self.resolver = PartialMatchResolver(store)
        self.executor = BatchTranslationExecutor(engine)
        self.initialized = False
        self._clock = clock
        self._inflight: dict[str, asyncio.Task[TranslationResult]] = {}

    async def initialize(self) -> None:
        """初始化缓存存储与翻译引擎。"""
        if self.initialized:
            return
        await self.store.initialize()
        if not self.engine.initialized:
            await self.engine.initialize()
        self.initialized = True
        logger.info(
            "协调器初始化完成。",
            cache_backend=self.store.backend_kind,
            engine=self.engine.name(),
        )

    async def close(self) -> None:
        """等待仍在进行的翻译结束，然后释放资源。"""
        if not self.initialized:
            return
        if self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)
        await self.engine.close()
        await self.store.close()
        self.initialized = False
        logger.info("协调器已关闭。")

    async def translate(
        self,
        metadata: MetadataSnapshot | Mapping[str, Any],
        target_languages: Iterable[str],
        *,
        timeout: float | None = None,
    ) -> TranslationResult:
        """
        翻译元数据快照到请求的目标语言。

        与源语言相同的目标会被直接剔除；若没有剩余目标则返回空结果。
        `timeout` 只作用于外部引擎调用，未提供时使用配置中的 engine_timeout。

        Raises:
            InvalidLanguageCodeError: 目标语言代码格式无效。
            AuthenticationError / QuotaExceededError / NetworkError:
                批量级失败；异常的 `partial_result` 携带已解析的语言与错误标记。
        """
        snapshot = (
            metadata
            if isinstance(metadata, MetadataSnapshot)
            else MetadataSnapshot.model_validate(dict(metadata))
        )
        source_lang = resolve_source_lang(snapshot, self.config.default_source_lang)
        targets = LanguageSet(normalize_target_languages(target_languages, source_lang))
        if not targets:
            logger.info("无需翻译（所有目标语言均与源语言相同）", source_lang=source_lang)
            return {}

        content = build_translation_content(snapshot)
        full_key = generate_cache_key(content, source_lang, targets)
        effective_timeout = timeout if timeout is not None else self.config.engine_timeout

        task = self._inflight.get(full_key)
        if task is None:
            task = asyncio.ensure_future(
                self._resolve_and_translate(
                    content, source_lang, targets, full_key, effective_timeout
                )
            )
            self._inflight[full_key] = task
            task.add_done_callback(lambda t: self._forget(full_key, t))
        else:
            logger.info("合并到进行中的相同请求", key=full_key[:12])

        # shield: 单个等待者被取消不会取消共享的执行，工作区总能被清理
        result = await asyncio.shield(task)
        # 每个等待者得到独立的副本，修改返回值不会影响缓存条目或其他等待者
        return copy.deepcopy(result)

    def _forget(self, key: str, task: "asyncio.Task[TranslationResult]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # 所有等待者都已离开时，避免 “exception was never retrieved”
            task.exception()

    async def _resolve_and_translate(
        self,
        content: TranslationContent,
        source_lang: str,
        targets: LanguageSet,
        full_key: str,
        timeout: float | None,
    ) -> TranslationResult:
        resolution = await self.resolver.resolve(content, source_lang, targets)
        if resolution.full_hit:
            return self._ordered(resolution.accumulator, targets)

        accumulator = resolution.accumulator
        missing = resolution.missing
        if not missing:
            logger.info("所有语言均已在缓存中找到", languages=list(targets))
            await self._publish(full_key, accumulator, targets)
            return self._ordered(accumulator, targets)

        logger.info(
            "需要翻译部分语言",
            missing=list(missing),
            total=len(targets),
            cached=len(accumulator),
        )
        try:
            outcome = await self.executor.execute(content, source_lang, missing, timeout)
        except TranslationEngineError as e:
            marker = make_error_marker(content, f"翻译失败: {e.message}")
            partial = dict(accumulator)
            for lang in missing:
                partial[lang] = dict(marker)
            e.missing = list(missing)
            e.partial_result = self._ordered(partial, targets)
            logger.error(
                "翻译引擎调用失败，结果不会被缓存",
                kind=e.kind.value,
                error=e.message,
                missing=list(missing),
            )
            if isinstance(e, EngineInvocationError):
                # 未分类失败不抛出：返回已缓存语言与错误标记
                return e.partial_result
            raise

        merged: TranslationResult = dict(accumulator)
        for lang, payload in outcome.translations.items():
            # 已缓存的语言永远不会被同一请求中的新结果覆盖
            merged.setdefault(lang, payload)

        if outcome.errors:
            # 只发布成功的语言，失败的语言下次请求时会重新翻译
            succeeded = LanguageSet(merged)
            if succeeded:
                await self._publish(
                    generate_cache_key(content, source_lang, succeeded), merged, succeeded
                )
            for lang, reason in outcome.errors.items():
                merged[lang] = make_error_marker(content, f"翻译失败: {reason}")
        else:
            await self._publish(full_key, merged, targets)

        logger.info(
            "所有翻译已完成",
            new=len(outcome.translations),
            cached=len(accumulator),
            failed=len(outcome.errors),
        )
        return self._ordered(merged, targets)

    async def _publish(
        self, key: str, result: TranslationResult, languages: LanguageSet
    ) -> None:
        entry = CacheEntry(
            result=result, language_set=list(languages), created_at=self._clock()
        )
        await self.store.set(key, entry, self.store.ttl)
        logger.info("已写入缓存", key=key[:12], languages=list(languages))

    @staticmethod
    def _ordered(result: TranslationResult, targets: LanguageSet) -> TranslationResult:
        return {lang: result[lang] for lang in targets if lang in result}

    async def cache_stats(self) -> CacheStats:
        return await self.store.stats()

    async def clear_cache(self) -> int:
        return await self.store.clear()
