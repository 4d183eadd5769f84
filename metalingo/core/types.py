# metalingo/core/types.py
"""
本模块定义了 Metalingo 系统的核心数据类型。

`TranslationContent` 的规范化序列化是内容寻址缓存键的基础：
相同的元数据字段必须总是产生逐字节相同的序列化结果。
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

ERROR_MARKER_FIELD = "_error"
SOURCE_HOST_FIELD = "_sourceHost"
UNKNOWN_HOST = "unknown-host"

# 语言代码 -> 译文载荷（或带 `_error` 的错误标记）
TranslationResult = dict[str, dict[str, Any]]


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class MetadataSnapshot(BaseModel):
    """抓取协作者提供的扁平元数据记录。对本系统只读。"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    keywords: str | None = None
    h1: str | None = None
    og_title: str | None = Field(default=None, validation_alias=_alias("ogTitle", "og_title"))
    og_description: str | None = Field(
        default=None, validation_alias=_alias("ogDescription", "og_description")
    )
    twitter_title: str | None = Field(
        default=None, validation_alias=_alias("twitterTitle", "twitter_title")
    )
    twitter_description: str | None = Field(
        default=None,
        validation_alias=_alias("twitterDescription", "twitter_description"),
    )
    source_language: str | None = Field(
        default=None,
        validation_alias=_alias("sourceLanguage", "source_language", "lang"),
    )
    source_host: str | None = Field(
        default=None, validation_alias=_alias("sourceHost", "source_host")
    )
    # 抓取器原样输出的定位字段，仅用于推导 source_host
    url: str | None = None
    canonical: str | None = None
    domain: str | None = None

    @field_validator("keywords", mode="before")
    @classmethod
    def _join_keyword_list(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return ", ".join(str(item) for item in v)
        return v


class MetaSection(BaseModel):
    """主元数据区块。"""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    keywords: str = ""
    h1: str = ""


class SocialSection(BaseModel):
    """社交分享卡片区块（Open Graph / Twitter Card）。"""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""


class TranslationContent(BaseModel):
    """实际需要翻译的、规范化后的元数据子集。"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    meta: MetaSection = Field(default_factory=MetaSection)
    og: SocialSection = Field(default_factory=SocialSection)
    twitter: SocialSection = Field(default_factory=SocialSection)
    source_host: str = Field(default=UNKNOWN_HOST, alias=SOURCE_HOST_FIELD)

    def to_payload(self) -> dict[str, Any]:
        """引擎输入文件与错误标记所使用的 JSON 载荷。"""
        return self.model_dump(by_alias=True)

    def canonical_json(self) -> str:
        """稳定键序、紧凑分隔符的规范化序列化，用于哈希。"""
        return json.dumps(
            self.to_payload(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )


class LanguageSet:
    """不可变、与顺序无关的语言代码集合，始终以排序后的顺序迭代。"""

    __slots__ = ("_codes",)

    def __init__(self, codes: Iterable[str] = ()):
        self._codes: tuple[str, ...] = tuple(sorted(set(codes)))

    @property
    def codes(self) -> tuple[str, ...]:
        return self._codes

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __bool__(self) -> bool:
        return bool(self._codes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LanguageSet):
            return NotImplemented
        return self._codes == other._codes

    def __hash__(self) -> int:
        return hash(self._codes)

    def __sub__(self, other: Iterable[str]) -> LanguageSet:
        excluded = set(other)
        return LanguageSet(code for code in self._codes if code not in excluded)

    def issubset(self, other: Iterable[str]) -> bool:
        return set(self._codes).issubset(other)

    def __repr__(self) -> str:
        return f"LanguageSet({list(self._codes)!r})"


class CacheEntry(BaseModel):
    """缓存条目。从不原地修改，总是整体替换。"""

    model_config = ConfigDict(frozen=True)

    result: TranslationResult
    language_set: list[str]
    created_at: float

    @field_validator("language_set")
    @classmethod
    def _sort_languages(cls, v: list[str]) -> list[str]:
        return sorted(set(v))

    def is_expired(self, ttl: float, now: float) -> bool:
        """`now - created_at` 超过 TTL 的条目对调用方而言等同于不存在。"""
        return now - self.created_at > ttl


class CacheStats(BaseModel):
    """缓存统计信息。"""

    count: int
    backend_kind: Literal["redis", "memory"]


@dataclass(frozen=True)
class Resolution:
    """部分匹配解析的结果：已复用的语言与仍需翻译的语言。"""

    accumulator: TranslationResult
    missing: LanguageSet
    full_hit: bool = False
    subset_hits: int = 0


@dataclass
class BatchOutcome:
    """一次批量调用的产出：成功的译文与逐语言的错误。"""

    translations: TranslationResult = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


def make_error_marker(content: TranslationContent, reason: str) -> dict[str, Any]:
    """构造单语言错误标记：回退为源语言内容，并附加 `_error` 说明。"""
    payload = content.to_payload()
    payload[ERROR_MARKER_FIELD] = reason
    return payload


def is_error_marker(payload: Any) -> bool:
    return isinstance(payload, dict) and ERROR_MARKER_FIELD in payload
