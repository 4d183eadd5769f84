# metalingo/engines/workspace.py
"""一次引擎调用专属的临时工作区。"""

from __future__ import annotations

import asyncio
import json
import shutil
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import structlog

from metalingo.exceptions import PerLanguageTranslationError

logger = structlog.get_logger(__name__)


class Workspace:
    """
    存放引擎输入与输出文件的临时目录。

    目录布局遵循 Lingo.dev CLI 的约定:
        <root>/i18n.json           引擎配置
        <root>/i18n/<locale>.json  源语言输入与每个目标语言的输出
    """

    CONFIG_FILENAME = "i18n.json"
    LOCALE_DIRNAME = "i18n"

    def __init__(self, root: Path):
        self.root = root

    @classmethod
    @asynccontextmanager
    async def acquire(
        cls, prefix: str = "metalingo-", base_dir: str | None = None
    ) -> AsyncIterator[Workspace]:
        """创建一个唯一命名的工作区，并在任何退出路径上将其删除。"""
        # 同步创建：创建与进入 try 之间不存在可被取消的挂起点
        workspace = cls(Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir)))
        try:
            workspace.locale_dir.mkdir(parents=True, exist_ok=True)
            yield workspace
        finally:
            # 同步删除：即使任务在此处再次被取消，清理也已完成
            workspace.release()

    @property
    def config_path(self) -> Path:
        return self.root / self.CONFIG_FILENAME

    @property
    def locale_dir(self) -> Path:
        return self.root / self.LOCALE_DIRNAME

    def locale_file(self, lang: str) -> Path:
        return self.locale_dir / f"{lang}.json"

    async def write_json(self, path: Path, data: Any) -> None:
        text = json.dumps(data, ensure_ascii=False, indent=2)
        await asyncio.to_thread(path.write_text, text, encoding="utf-8")

    async def write_source(self, source_lang: str, payload: dict[str, Any]) -> None:
        await self.write_json(self.locale_file(source_lang), payload)

    async def write_config(self, config: dict[str, Any]) -> None:
        await self.write_json(self.config_path, config)

    async def read_output(self, lang: str) -> dict[str, Any]:
        """读取某个目标语言的输出；缺失或无法解析时抛出单语言错误。"""
        path = self.locale_file(lang)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise PerLanguageTranslationError(lang, "未找到翻译输出文件") from e
        except OSError as e:
            raise PerLanguageTranslationError(lang, f"读取翻译输出失败: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PerLanguageTranslationError(lang, f"翻译输出解析失败: {e}") from e
        if not isinstance(data, dict):
            raise PerLanguageTranslationError(lang, "翻译输出不是 JSON 对象")
        return data

    def release(self) -> None:
        try:
            shutil.rmtree(self.root)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("清理临时工作区失败", path=str(self.root), error=str(e))
            return
        logger.debug("临时工作区已清理", path=str(self.root))
