# tests/unit/engines/test_debug_engine.py
"""DebugEngine 的单元测试。"""

from pathlib import Path

import pytest

from metalingo.engines.debug import DebugEngine, DebugEngineConfig
from metalingo.engines.workspace import Workspace
from metalingo.exceptions import AuthenticationError, PerLanguageTranslationError


@pytest.mark.asyncio
async def test_success_mode_translates_strings(tmp_path: Path) -> None:
    engine = DebugEngine(DebugEngineConfig())
    async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
        await workspace.write_source(
            "en", {"meta": {"title": "Hi", "h1": ""}, "_sourceHost": "example.com"}
        )
        await engine.invoke(workspace, "en", ["es"])

        output = await workspace.read_output("es")

    assert output["meta"]["title"] == "Translated(Hi) to es"
    assert output["meta"]["h1"] == ""
    assert output["_sourceHost"] == "example.com"
    assert engine.invocations == [("en", ["es"])]


@pytest.mark.asyncio
async def test_fail_mode_raises_classified_error(tmp_path: Path) -> None:
    engine = DebugEngine(DebugEngineConfig(mode="FAIL", fail_message="authentication failed"))
    async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
        with pytest.raises(AuthenticationError):
            await engine.invoke(workspace, "en", ["es"])


@pytest.mark.asyncio
async def test_missing_and_corrupt_languages(tmp_path: Path) -> None:
    engine = DebugEngine(DebugEngineConfig(missing_langs=["fr"], corrupt_langs=["de"]))
    async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
        await workspace.write_source("en", {"meta": {"title": "Hi"}})
        await engine.invoke(workspace, "en", ["es", "fr", "de"])

        assert (await workspace.read_output("es"))["meta"]["title"].startswith("Translated")
        for lang in ("fr", "de"):
            with pytest.raises(PerLanguageTranslationError):
                await workspace.read_output(lang)
