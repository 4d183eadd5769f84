# metalingo/__init__.py
"""Metalingo: 网页元数据的翻译记忆化与增量多语言扇出引擎。

对给定的内容快照与目标语言集合，决定哪些语言必须真正发送给外部
翻译引擎，以语言子集为粒度复用已有结果，并以内容寻址的键缓存结果。
"""

__version__ = "1.0.0"

from .bootstrap import create_coordinator
from .cache import CacheStore
from .config import MetalingoConfig
from .coordinator import TranslationCoordinator
from .core.types import CacheStats, MetadataSnapshot, TranslationResult
from .exceptions import (
    AuthenticationError,
    MetalingoError,
    NetworkError,
    QuotaExceededError,
    TooManyLanguagesError,
    TranslationEngineError,
)

__all__ = [
    "__version__",
    "AuthenticationError",
    "CacheStats",
    "CacheStore",
    "MetadataSnapshot",
    "MetalingoConfig",
    "MetalingoError",
    "NetworkError",
    "QuotaExceededError",
    "TooManyLanguagesError",
    "TranslationCoordinator",
    "TranslationEngineError",
    "TranslationResult",
    "create_coordinator",
]
