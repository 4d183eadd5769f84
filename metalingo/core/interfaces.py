# metalingo/core/interfaces.py
"""定义缓存后端与翻译端口的接口协议。"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Protocol

if TYPE_CHECKING:
    from metalingo.core.types import CacheEntry
    from metalingo.engines.workspace import Workspace


class CacheBackend(Protocol):
    """键值存储的纯异步接口，两种后端遵循相同的 TTL 契约。"""

    kind: Literal["redis", "memory"]

    async def get(self, key: str) -> CacheEntry | None:
        """获取一个未过期的条目；过期条目与缺失条目无法区分。"""
        ...

    async def set(self, key: str, entry: CacheEntry, ttl: int) -> None:
        """整体写入一个条目，并设置过期时间（秒）。"""
        ...

    async def clear(self) -> int:
        """只删除属于本命名空间的条目，返回删除数量。"""
        ...

    async def count(self) -> int:
        """当前命名空间中未过期条目的数量。"""
        ...


class TranslatorPort(Protocol):
    """外部翻译引擎的窄接口：每个工作区只调用一次。"""

    def build_config(
        self, source_lang: str, target_langs: list[str]
    ) -> dict[str, Any] | None:
        """写入工作区的引擎配置；返回 None 表示不需要配置文件。"""
        ...

    async def invoke(
        self,
        workspace: Workspace,
        source_lang: str,
        target_langs: list[str],
        timeout: float | None = None,
    ) -> None:
        """
        对整个目标语言集合执行一次调用，输出写入工作区。

        进程级失败以分类后的 `TranslationEngineError` 子类抛出。
        """
        ...
