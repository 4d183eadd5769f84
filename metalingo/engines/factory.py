# metalingo/engines/factory.py
"""
翻译引擎工厂

根据应用配置实例化具体的翻译引擎，使具体引擎可替换、可在测试中模拟。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from metalingo.engines.base import BaseTranslatorEngine
from metalingo.engines.debug import DebugEngine
from metalingo.engines.lingo import LingoEngine
from metalingo.exceptions import ConfigurationError, EngineNotFoundError

if TYPE_CHECKING:
    from metalingo.config import MetalingoConfig

logger = structlog.get_logger(__name__)

ENGINE_REGISTRY: dict[str, type[BaseTranslatorEngine[Any]]] = {
    LingoEngine.name(): LingoEngine,
    DebugEngine.name(): DebugEngine,
}

# 引擎名 -> 主配置中对应的属性名
_CONFIG_ATTRS = {"lingo": "lingo", "debug": "debug_engine"}


def create_engine(
    config: MetalingoConfig, engine_name: str | None = None
) -> BaseTranslatorEngine[Any]:
    """
    根据给定的引擎名称，创建并返回一个翻译引擎实例。

    Raises:
        EngineNotFoundError: 如果请求的引擎未注册。
        ConfigurationError: 如果引擎所需的配置无效。
    """
    name = engine_name or config.active_engine
    engine_class = ENGINE_REGISTRY.get(name)
    if engine_class is None:
        raise EngineNotFoundError(
            f"引擎 '{name}' 未找到。已注册的引擎: {sorted(ENGINE_REGISTRY)}"
        )

    engine_settings = getattr(config, _CONFIG_ATTRS[name])
    try:
        engine_config = engine_class.CONFIG_MODEL.model_validate(
            engine_settings.model_dump()
        )
    except ValidationError as e:
        raise ConfigurationError(
            f"创建引擎 '{name}' 实例时配置验证失败: {e}"
        ) from e

    logger.info("翻译引擎已创建", engine=name, version=engine_class.VERSION)
    return engine_class(engine_config)
