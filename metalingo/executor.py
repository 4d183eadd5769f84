# metalingo/executor.py
"""
批量翻译执行器。

仅在存在缺失语言时被调用：准备一个隔离的工作区，对整个缺失集合
只调用一次外部引擎，然后逐语言收集输出。
"""

import structlog

from metalingo.core.interfaces import TranslatorPort
from metalingo.core.types import BatchOutcome, LanguageSet, TranslationContent
from metalingo.engines.workspace import Workspace
from metalingo.exceptions import PerLanguageTranslationError

logger = structlog.get_logger(__name__)


class BatchTranslationExecutor:
    """每次请求至多调用一次翻译端口，调用次数与缺失语言成正比而非与请求数成正比。"""

    def __init__(
        self,
        engine: TranslatorPort,
        workspace_prefix: str = "metalingo-",
        workspace_dir: str | None = None,
    ):
        self.engine = engine
        self._workspace_prefix = workspace_prefix
        self._workspace_dir = workspace_dir

    async def execute(
        self,
        content: TranslationContent,
        source_lang: str,
        missing: LanguageSet,
        timeout: float | None = None,
    ) -> BatchOutcome:
        """
        对 `missing` 执行一次批量翻译。

        进程级失败（认证、配额、网络、未分类）以 `TranslationEngineError`
        抛出；单语言的输出缺失或损坏记录在 `BatchOutcome.errors` 中，
        不会中断其他语言。工作区在返回或抛出之前总是被删除。
        """
        if not missing:
            return BatchOutcome()

        targets = list(missing)
        outcome = BatchOutcome()
        async with Workspace.acquire(
            prefix=self._workspace_prefix, base_dir=self._workspace_dir
        ) as workspace:
            await workspace.write_source(source_lang, content.to_payload())
            engine_config = self.engine.build_config(source_lang, targets)
            if engine_config is not None:
                await workspace.write_config(engine_config)
            logger.debug("已写入源内容与引擎配置", workspace=str(workspace.root))

            await self.engine.invoke(workspace, source_lang, targets, timeout=timeout)

            for lang in targets:
                try:
                    outcome.translations[lang] = await workspace.read_output(lang)
                except PerLanguageTranslationError as e:
                    outcome.errors[lang] = e.reason
                    logger.error("单语言翻译失败", lang=lang, reason=e.reason)
                else:
                    logger.debug("已翻译", lang=lang)

        logger.info(
            "批量翻译完成",
            translated=sorted(outcome.translations),
            failed=sorted(outcome.errors),
        )
        return outcome
