# metalingo/exceptions.py
"""
本模块定义了 Metalingo 项目中所有自定义的、语义化的异常类型。

批量级错误（认证、配额、网络、未分类）以异常的形式向上传播，
单语言错误则作为数据（`_error` 标记）嵌入到翻译结果中。
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class MetalingoError(Exception):
    """所有 Metalingo 自定义异常的通用基类。"""

    pass


class ConfigurationError(MetalingoError):
    """表示在加载、解析或验证配置时发生的错误。"""

    pass


class EngineNotFoundError(MetalingoError, KeyError):
    """
    表示尝试访问一个未注册的翻译引擎时引发的错误。
    继承自 KeyError 是为了保持与字典查找行为的一致性。
    """

    pass


class InvalidLanguageCodeError(MetalingoError, ValueError):
    """提供的语言代码不符合 BCP 47 规范。"""

    pass


class TooManyLanguagesError(MetalingoError, ValueError):
    """目标语言数量超过子集枚举的上限。"""

    pass


class StoreUnavailableError(MetalingoError):
    """
    持久化缓存后端（Redis）不可达。

    此异常永远不会离开 CacheStore：它只触发向内存后端的降级。
    """

    pass


class FailureKind(str, Enum):
    """批量调用失败的分类。"""

    AUTHENTICATION = "authentication"
    QUOTA = "quota"
    NETWORK = "network"
    UNCLASSIFIED = "unclassified"


class TranslationEngineError(MetalingoError):
    """
    外部翻译引擎在进程级别失败（在任何单语言输出文件产生之前）。

    协调器会在重新抛出之前填充 `partial_result`，其中包含已从缓存
    解析的语言，以及每个缺失语言对应的同一分类错误标记。
    """

    kind: FailureKind = FailureKind.UNCLASSIFIED
    retryable: bool = False
    default_message: str = "翻译引擎执行失败。"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: str | None = None,
        missing: list[str] | None = None,
        partial_result: dict[str, dict[str, Any]] | None = None,
    ):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.detail = detail
        self.missing = list(missing or [])
        self.partial_result = dict(partial_result or {})

    def to_dict(self) -> dict[str, Any]:
        """结构化的错误对象，同时携带分类和已有的部分结果。"""
        return {
            "error": self.message,
            "kind": self.kind.value,
            "retryable": self.retryable,
            "missing": self.missing,
            "partial_result": self.partial_result,
        }


class AuthenticationError(TranslationEngineError):
    """外部引擎的凭据无效。对所有仍缺失的语言都是致命的。"""

    kind = FailureKind.AUTHENTICATION
    default_message = "Lingo.dev API 密钥无效，请检查后重试。"


class QuotaExceededError(TranslationEngineError):
    """触发了速率或用量限制。已缓存的语言仍会被返回。"""

    kind = FailureKind.QUOTA
    default_message = "Lingo.dev API 配额已用尽，请检查账户限制。"


class NetworkError(TranslationEngineError):
    """暂时性的连接问题，调用方可以重试。"""

    kind = FailureKind.NETWORK
    retryable = True
    default_message = "连接 Lingo.dev 时发生网络错误，请稍后重试。"


class EngineInvocationError(TranslationEngineError):
    """无法归类的进程级失败。"""

    kind = FailureKind.UNCLASSIFIED


class PerLanguageTranslationError(MetalingoError):
    """单个目标语言的输出文件缺失或损坏，只影响该语言本身。"""

    def __init__(self, lang: str, reason: str):
        super().__init__(f"[{lang}] {reason}")
        self.lang = lang
        self.reason = reason
