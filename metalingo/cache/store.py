# metalingo/cache/store.py
"""
缓存存储：在一个接口后面组合 Redis 后端与进程内后端。

策略是“降级而不失败”：Redis 在启动时或任一调用中不可达，
都会让本实例在剩余生命周期内切换到内存后端，并且只记录一次该转换。
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from metalingo.cache.memory import MemoryCacheBackend
from metalingo.cache.redis import RedisCacheBackend, create_redis_client
from metalingo.config import CacheSettings
from metalingo.core.interfaces import CacheBackend
from metalingo.core.types import CacheEntry, CacheStats
from metalingo.exceptions import StoreUnavailableError

logger = structlog.get_logger(__name__)

_T = TypeVar("_T")


class CacheStore:
    """一个显式构造、可注入的缓存存储，拥有明确的初始化与关闭流程。"""

    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        redis_url: str | None = None,
        primary: CacheBackend | None = None,
        fallback: MemoryCacheBackend | None = None,
    ):
        self.settings = settings or CacheSettings()
        self._redis_url = redis_url
        self._fallback = fallback or MemoryCacheBackend(
            key_prefix=self.settings.key_prefix, maxsize=self.settings.maxsize
        )
        self._primary = primary
        self._backend: CacheBackend = primary or self._fallback
        self._degraded = False
        self.initialized = primary is not None or redis_url is None

    @property
    def backend_kind(self) -> str:
        return self._backend.kind

    @property
    def degraded(self) -> bool:
        """是否已经从持久化后端降级到内存后端。"""
        return self._degraded

    @property
    def ttl(self) -> int:
        return self.settings.ttl

    async def initialize(self) -> None:
        """在配置了 Redis URL 时尝试连接；失败则降级。"""
        if self.initialized:
            return
        assert self._redis_url is not None
        try:
            client = await create_redis_client(self._redis_url)
        except StoreUnavailableError as e:
            self._degrade(e, operation="initialize")
        else:
            self._primary = RedisCacheBackend(client, key_prefix=self.settings.key_prefix)
            self._backend = self._primary
            logger.info("缓存后端已就绪。", backend="redis")
        self.initialized = True

    async def close(self) -> None:
        # 降级后 Redis 客户端仍然持有连接池，同样需要关闭
        if isinstance(self._primary, RedisCacheBackend):
            await self._primary.close()
        if self._redis_url is not None:
            self._primary = None
            self._backend = self._fallback
            self._degraded = False
        self.initialized = self._redis_url is None

    def _degrade(self, error: Exception, operation: str) -> None:
        """切换到内存后端。此后的所有条目仅在当前进程内有效。"""
        if self._degraded:
            return
        self._degraded = True
        self._backend = self._fallback
        logger.warning(
            "持久化缓存不可用，已降级为进程内缓存。",
            operation=operation,
            error=str(error),
            fallback="memory",
        )

    async def _call(
        self, operation: str, action: Callable[[CacheBackend], Awaitable[_T]]
    ) -> _T:
        try:
            return await action(self._backend)
        except StoreUnavailableError as e:
            if self._backend is self._fallback:
                raise
            self._degrade(e, operation=operation)
            return await action(self._backend)

    async def get(self, key: str) -> CacheEntry | None:
        return await self._call("get", lambda backend: backend.get(key))

    async def set(self, key: str, entry: CacheEntry, ttl: int | None = None) -> None:
        effective_ttl = self.settings.ttl if ttl is None else ttl
        await self._call("set", lambda backend: backend.set(key, entry, effective_ttl))

    async def clear(self) -> int:
        removed = await self._call("clear", lambda backend: backend.clear())
        logger.info("缓存已清空。", removed=removed, backend=self.backend_kind)
        return removed

    async def stats(self) -> CacheStats:
        count = await self._call("stats", lambda backend: backend.count())
        return CacheStats(count=count, backend_kind=self._backend.kind)
