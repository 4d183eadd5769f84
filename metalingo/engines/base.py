# metalingo/engines/base.py
"""
本模块定义了所有翻译引擎插件必须继承的抽象基类（ABC），
以及进程级失败的分类规则。
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from metalingo.engines.workspace import Workspace
from metalingo.exceptions import (
    AuthenticationError,
    EngineInvocationError,
    NetworkError,
    QuotaExceededError,
    TranslationEngineError,
)

_ConfigType = TypeVar("_ConfigType", bound="BaseEngineConfig")

# 按顺序匹配：认证 > 配额 > 网络，其余为未分类
_FAILURE_PATTERNS: list[tuple[type[TranslationEngineError], re.Pattern[str]]] = [
    (
        AuthenticationError,
        re.compile(
            r"authentication failed|unauthori[sz]ed|invalid api[ _-]?key|\b401\b|forbidden",
            re.IGNORECASE,
        ),
    ),
    (
        QuotaExceededError,
        re.compile(
            r"quota|rate[ -]?limit|too many requests|\b429\b|limit (exceeded|reached)",
            re.IGNORECASE,
        ),
    ),
    (
        NetworkError,
        re.compile(
            r"network|timed? ?out|timeout|ECONNREFUSED|ECONNRESET|ENOTFOUND|EAI_AGAIN|getaddrinfo|socket hang up",
            re.IGNORECASE,
        ),
    ),
]


def classify_failure(output: str, exit_code: int | None = None) -> TranslationEngineError:
    """根据退出状态与输出文本，将进程级失败归类为具体的异常。"""
    detail = output.strip()
    for error_cls, pattern in _FAILURE_PATTERNS:
        if pattern.search(detail):
            return error_cls(detail=detail)
    summary = detail.splitlines()[-1] if detail else "无输出"
    return EngineInvocationError(
        f"翻译引擎执行失败 (exit={exit_code}): {summary}", detail=detail
    )


class BaseEngineConfig(BaseModel):
    """所有引擎配置模型的基类。"""

    pass


class BaseTranslatorEngine(ABC, Generic[_ConfigType]):
    """翻译端口的纯异步抽象基类：每个工作区恰好调用一次。"""

    CONFIG_MODEL: type[_ConfigType]
    VERSION: str = "1.0.0"

    def __init__(self, config: _ConfigType):
        self.config = config
        self.initialized = False

    @classmethod
    def name(cls) -> str:
        """从类名自动推断引擎的名称。"""
        return cls.__name__.removesuffix("Engine").lower()

    async def initialize(self) -> None:
        """引擎的异步初始化钩子。"""
        self.initialized = True

    async def close(self) -> None:
        """引擎的异步关闭钩子，用于安全释放资源。"""
        self.initialized = False

    def build_config(self, source_lang: str, target_langs: list[str]) -> dict[str, Any] | None:
        """[可选] 返回写入工作区的引擎配置；返回 None 表示不需要配置文件。"""
        return None

    @abstractmethod
    async def invoke(
        self,
        workspace: Workspace,
        source_lang: str,
        target_langs: list[str],
        timeout: float | None = None,
    ) -> None:
        """[子类实现] 对整个目标语言集合执行一次调用，输出写入工作区。"""
        ...
