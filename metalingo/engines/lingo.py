# metalingo/engines/lingo.py
"""通过 Lingo.dev CLI 执行批量翻译的引擎。"""

import asyncio
import os
from typing import Any, Optional

import structlog
from pydantic import Field

from metalingo.engines.base import (
    BaseEngineConfig,
    BaseTranslatorEngine,
    classify_failure,
)
from metalingo.engines.workspace import Workspace
from metalingo.exceptions import EngineInvocationError, NetworkError

logger = structlog.get_logger(__name__)


class LingoEngineConfig(BaseEngineConfig):
    """Lingo 引擎的配置。"""

    api_key: Optional[str] = None
    api_key_env: str = "LINGODOTDEV_API_KEY"
    command: list[str] = Field(default_factory=lambda: ["npx", "lingo.dev", "run"])
    schema_url: str = "https://lingo.dev/schema/i18n.json"
    config_version: str = "1.10"


async def _terminate(process: asyncio.subprocess.Process) -> None:
    """杀死仍在运行的子进程并回收它，使调用总能到达终止状态。"""
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


class LingoEngine(BaseTranslatorEngine[LingoEngineConfig]):
    """在工作区中运行 `npx lingo.dev run`，一次覆盖所有缺失语言。"""

    CONFIG_MODEL = LingoEngineConfig
    VERSION = "1.0.0"

    def build_config(self, source_lang: str, target_langs: list[str]) -> dict[str, Any]:
        return {
            "$schema": self.config.schema_url,
            "version": self.config.config_version,
            "locale": {"source": source_lang, "targets": list(target_langs)},
            "buckets": {"json": {"include": [f"{Workspace.LOCALE_DIRNAME}/[locale].json"]}},
        }

    def _child_env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.config.api_key:
            env[self.config.api_key_env] = self.config.api_key
        return env

    async def invoke(
        self,
        workspace: Workspace,
        source_lang: str,
        target_langs: list[str],
        timeout: float | None = None,
    ) -> None:
        logger.info(
            "正在运行 Lingo.dev 翻译（单次调用覆盖全部缺失语言）",
            source_lang=source_lang,
            targets=target_langs,
            timeout=timeout,
        )
        try:
            process = await asyncio.create_subprocess_exec(
                *self.config.command,
                cwd=str(workspace.root),
                env=self._child_env(),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise EngineInvocationError(
                f"找不到翻译引擎可执行文件: {self.config.command[0]}", detail=str(e)
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
        except asyncio.TimeoutError as e:
            await _terminate(process)
            raise NetworkError(
                f"Lingo.dev 调用在 {timeout} 秒后超时。", detail="timeout"
            ) from e
        except asyncio.CancelledError:
            await _terminate(process)
            raise

        if process.returncode != 0:
            output = "\n".join(
                part.decode("utf-8", errors="replace") for part in (stderr, stdout) if part
            )
            error = classify_failure(output, exit_code=process.returncode)
            logger.error(
                "Lingo CLI 执行失败",
                exit_code=process.returncode,
                kind=error.kind.value,
                error=error.message,
            )
            raise error
