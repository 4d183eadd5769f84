# metalingo/cache/__init__.py
"""缓存层：键生成、内存后端、Redis 后端以及带降级策略的存储。"""

from .keys import generate_cache_key
from .memory import MemoryCacheBackend
from .redis import RedisCacheBackend
from .store import CacheStore

__all__ = [
    "CacheStore",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "generate_cache_key",
]
