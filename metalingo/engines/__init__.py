# metalingo/engines/__init__.py
"""翻译端口的具体实现：Lingo.dev CLI 引擎与调试引擎。"""

from .base import BaseEngineConfig, BaseTranslatorEngine, classify_failure
from .debug import DebugEngine, DebugEngineConfig
from .factory import ENGINE_REGISTRY, create_engine
from .lingo import LingoEngine, LingoEngineConfig
from .workspace import Workspace

__all__ = [
    "ENGINE_REGISTRY",
    "BaseEngineConfig",
    "BaseTranslatorEngine",
    "DebugEngine",
    "DebugEngineConfig",
    "LingoEngine",
    "LingoEngineConfig",
    "Workspace",
    "classify_failure",
    "create_engine",
]
