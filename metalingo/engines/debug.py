# metalingo/engines/debug.py
"""提供一个用于开发和测试的调试翻译引擎。"""

import asyncio
import json
from typing import Any, Literal

from pydantic import Field

from metalingo.core.types import SOURCE_HOST_FIELD
from metalingo.engines.base import (
    BaseEngineConfig,
    BaseTranslatorEngine,
    classify_failure,
)
from metalingo.engines.workspace import Workspace


class DebugEngineConfig(BaseEngineConfig):
    """Debug 引擎的配置模型。"""

    mode: Literal["SUCCESS", "FAIL"] = Field(default="SUCCESS")
    fail_message: str = Field(default="DebugEngine is in FAIL mode.")
    fail_exit_code: int = Field(default=1)
    missing_langs: list[str] = Field(default_factory=list)
    corrupt_langs: list[str] = Field(default_factory=list)


def _translate_value(value: Any, lang: str) -> Any:
    if isinstance(value, str):
        return f"Translated({value}) to {lang}" if value else value
    if isinstance(value, dict):
        return {
            k: v if k == SOURCE_HOST_FIELD else _translate_value(v, lang)
            for k, v in value.items()
        }
    return value


class DebugEngine(BaseTranslatorEngine[DebugEngineConfig]):
    """一个简单的调试翻译引擎实现，在进程内生成确定性的输出文件。"""

    CONFIG_MODEL = DebugEngineConfig
    VERSION = "1.0.0"

    def __init__(self, config: DebugEngineConfig):
        super().__init__(config)
        self.invocations: list[tuple[str, list[str]]] = []

    async def invoke(
        self,
        workspace: Workspace,
        source_lang: str,
        target_langs: list[str],
        timeout: float | None = None,
    ) -> None:
        self.invocations.append((source_lang, list(target_langs)))
        await asyncio.sleep(0)  # 允许任务切换

        if self.config.mode == "FAIL":
            raise classify_failure(
                self.config.fail_message, exit_code=self.config.fail_exit_code
            )

        source = await asyncio.to_thread(
            workspace.locale_file(source_lang).read_text, encoding="utf-8"
        )
        for lang in target_langs:
            if lang in self.config.missing_langs:
                continue
            path = workspace.locale_file(lang)
            if lang in self.config.corrupt_langs:
                await asyncio.to_thread(path.write_text, "{not json", encoding="utf-8")
                continue
            await workspace.write_json(path, _translate_value(json.loads(source), lang))
