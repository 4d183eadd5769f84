# metalingo/cache/memory.py
"""
进程内缓存实现，用于测试环境或当 Redis 不可用时的备用方案。
"""

import time
from collections.abc import Callable
from typing import Literal, NamedTuple

from cachetools import TLRUCache

from metalingo.core.types import CacheEntry


class _Slot(NamedTuple):
    entry: CacheEntry
    ttl: float


def _time_to_use(_key: str, slot: _Slot, _now: float) -> float:
    return slot.entry.created_at + slot.ttl


class MemoryCacheBackend:
    """
    基于 `cachetools.TLRUCache` 的内存缓存，每个条目拥有独立的 TTL。

    没有原生过期机制可依赖时，`get` 还会根据 `created_at` 自行检查陈旧度。
    """

    kind: Literal["memory"] = "memory"

    def __init__(
        self,
        key_prefix: str = "metalingo:translations:",
        maxsize: int = 1000,
        clock: Callable[[], float] = time.time,
    ):
        self._prefix = key_prefix
        self._clock = clock
        self._cache: TLRUCache[str, _Slot] = TLRUCache(
            maxsize=maxsize, ttu=_time_to_use, timer=clock
        )

    def _make_key(self, key: str) -> str:
        """生成带前缀的缓存键。"""
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> CacheEntry | None:
        full_key = self._make_key(key)
        slot = self._cache.get(full_key)
        if slot is None:
            return None
        if slot.entry.is_expired(slot.ttl, self._clock()):
            self._cache.pop(full_key, None)
            return None
        # 与 Redis 一致：调用方拿到的是副本，存储的条目永远不会被原地修改
        return slot.entry.model_copy(deep=True)

    async def set(self, key: str, entry: CacheEntry, ttl: int) -> None:
        self._cache[self._make_key(key)] = _Slot(entry=entry, ttl=ttl)

    async def clear(self) -> int:
        owned = [k for k in list(self._cache.keys()) if k.startswith(self._prefix)]
        for full_key in owned:
            self._cache.pop(full_key, None)
        return len(owned)

    async def count(self) -> int:
        self._cache.expire()
        return sum(1 for k in list(self._cache.keys()) if k.startswith(self._prefix))
