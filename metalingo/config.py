# metalingo/config.py
"""
Metalingo 配置（Pydantic v2）。

所有设置都可以通过 `METALINGO_` 前缀的环境变量或 `.env` 文件覆盖，
嵌套字段使用双下划线分隔，例如 `METALINGO_CACHE__TTL=600`。
"""

from __future__ import annotations

from typing import Literal, Optional

import langcodes
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ===================== 子模型 =====================


class CacheSettings(BaseModel):
    ttl: int = Field(default=24 * 60 * 60, ge=1, description="缓存条目存活时间（秒）")
    maxsize: int = Field(default=1000, ge=1, description="进程内后端的最大条目数")
    key_prefix: str = Field(default="metalingo:translations:")


class RedisSettings(BaseModel):
    url: Optional[str] = Field(default=None, description="未配置时直接使用进程内缓存")


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["console", "json"] = Field(default="console")


class LingoEngineSettings(BaseModel):
    api_key: Optional[str] = Field(default=None)
    api_key_env: str = Field(default="LINGODOTDEV_API_KEY")
    command: list[str] = Field(default_factory=lambda: ["npx", "lingo.dev", "run"])
    schema_url: str = Field(default="https://lingo.dev/schema/i18n.json")
    config_version: str = Field(default="1.10")


class DebugEngineSettings(BaseModel):
    mode: Literal["SUCCESS", "FAIL"] = Field(default="SUCCESS")
    fail_message: str = Field(default="DebugEngine is in FAIL mode.")
    fail_exit_code: int = Field(default=1)
    missing_langs: list[str] = Field(default_factory=list)
    corrupt_langs: list[str] = Field(default_factory=list)


# ===================== 顶层配置 =====================
class MetalingoConfig(BaseSettings):
    """Metalingo 核心配置模型。"""

    default_source_lang: str = "en"
    active_engine: Literal["lingo", "debug"] = "lingo"
    engine_timeout: Optional[float] = Field(
        default=None, gt=0, description="单次引擎调用的超时（秒），由调用方决定"
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    lingo: LingoEngineSettings = Field(default_factory=LingoEngineSettings)
    debug_engine: DebugEngineSettings = Field(default_factory=DebugEngineSettings)

    @field_validator("default_source_lang")
    @classmethod
    def _validate_lang(cls, v: str) -> str:
        if not langcodes.tag_is_valid(v):
            raise ValueError(f"非法语言代码: {v}")
        return v

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="METALINGO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_file_encoding="utf-8",
    )
