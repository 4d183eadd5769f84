# metalingo/cache/redis.py
"""
使用 Redis 实现持久化、可共享的缓存后端。

Redis 原生的 EX 过期承担 TTL 契约；任何连接或操作错误都会被
转换为 `StoreUnavailableError`，由 CacheStore 决定是否降级。
"""

from typing import Literal

import redis.asyncio as aioredis
import structlog
from pydantic import ValidationError

from metalingo.core.types import CacheEntry
from metalingo.exceptions import StoreUnavailableError

logger = structlog.get_logger(__name__)


async def create_redis_client(url: str) -> aioredis.Redis:
    """创建一个 Redis 异步客户端，并确认连接可用。"""
    try:
        client = aioredis.from_url(url, decode_responses=True)
        await client.ping()
    except (aioredis.RedisError, OSError) as e:
        raise StoreUnavailableError(f"无法连接到 Redis 服务器 {url}: {e}") from e
    return client


class RedisCacheBackend:
    """基于 Redis 的分布式缓存实现。"""

    kind: Literal["redis"] = "redis"

    def __init__(
        self,
        client: aioredis.Redis,
        key_prefix: str = "metalingo:translations:",
        scan_batch_size: int = 500,
    ):
        self._client = client
        self._prefix = key_prefix
        self._scan_batch_size = scan_batch_size

    async def get(self, key: str) -> CacheEntry | None:
        """从 Redis 获取缓存值并反序列化。"""
        try:
            raw_value = await self._client.get(self._prefix + key)
        except (aioredis.RedisError, OSError) as e:
            raise StoreUnavailableError(f"Redis 读取失败: {e}") from e
        if raw_value is None:
            return None
        try:
            return CacheEntry.model_validate_json(raw_value)
        except ValidationError as e:
            # 损坏的条目视为缺失，后续写入会整体替换它
            logger.warning("缓存值反序列化失败", key=key, error=str(e))
            return None

    async def set(self, key: str, entry: CacheEntry, ttl: int) -> None:
        """序列化条目并写入 Redis，使用原生过期。"""
        try:
            await self._client.set(
                self._prefix + key, entry.model_dump_json(), ex=int(ttl)
            )
        except (aioredis.RedisError, OSError) as e:
            raise StoreUnavailableError(f"Redis 写入失败: {e}") from e

    async def _scan_namespace(self) -> list[str]:
        keys: list[str] = []
        async for key in self._client.scan_iter(
            match=f"{self._prefix}*", count=self._scan_batch_size
        ):
            keys.append(key)
        return keys

    async def clear(self) -> int:
        """只删除本命名空间下的键，不会触碰共享同一实例的其他数据。"""
        try:
            keys = await self._scan_namespace()
            for start in range(0, len(keys), self._scan_batch_size):
                await self._client.delete(*keys[start : start + self._scan_batch_size])
        except (aioredis.RedisError, OSError) as e:
            raise StoreUnavailableError(f"Redis 清理失败: {e}") from e
        return len(keys)

    async def count(self) -> int:
        try:
            return len(await self._scan_namespace())
        except (aioredis.RedisError, OSError) as e:
            raise StoreUnavailableError(f"Redis 统计失败: {e}") from e

    async def close(self) -> None:
        """关闭底层 Redis 客户端连接。"""
        await self._client.aclose()
