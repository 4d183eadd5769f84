# metalingo/core/__init__.py
"""
本核心包定义了 Metalingo 系统中最基础、最稳定的构建块：
核心数据类型与接口协议。本包不依赖项目中的任何其他模块。
"""

from .interfaces import CacheBackend, TranslatorPort
from .types import (
    ERROR_MARKER_FIELD,
    SOURCE_HOST_FIELD,
    UNKNOWN_HOST,
    BatchOutcome,
    CacheEntry,
    CacheStats,
    LanguageSet,
    MetadataSnapshot,
    MetaSection,
    Resolution,
    SocialSection,
    TranslationContent,
    TranslationResult,
    is_error_marker,
    make_error_marker,
)

__all__ = [
    # from interfaces.py
    "CacheBackend",
    "TranslatorPort",
    # from types.py
    "ERROR_MARKER_FIELD",
    "SOURCE_HOST_FIELD",
    "UNKNOWN_HOST",
    "BatchOutcome",
    "CacheEntry",
    "CacheStats",
    "LanguageSet",
    "MetadataSnapshot",
    "MetaSection",
    "Resolution",
    "SocialSection",
    "TranslationContent",
    "TranslationResult",
    "is_error_marker",
    "make_error_marker",
]
