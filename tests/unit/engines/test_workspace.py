# tests/unit/engines/test_workspace.py
"""临时工作区的单元测试：布局、输出读取与在所有退出路径上的清理。"""

import asyncio
import json
from pathlib import Path

import pytest

from metalingo.engines.workspace import Workspace
from metalingo.exceptions import PerLanguageTranslationError


@pytest.mark.asyncio
async def test_layout_and_cleanup(tmp_path: Path) -> None:
    async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
        root = workspace.root
        assert root.parent == tmp_path
        assert root.name.startswith("metalingo-")
        assert workspace.locale_dir.is_dir()

        await workspace.write_config({"version": "1.10"})
        await workspace.write_source("en", {"meta": {"title": "Hi"}})

        assert json.loads(workspace.config_path.read_text(encoding="utf-8")) == {"version": "1.10"}
        assert workspace.locale_file("en").exists()

    assert not root.exists()


@pytest.mark.asyncio
async def test_workspaces_are_unique(tmp_path: Path) -> None:
    async with Workspace.acquire(base_dir=str(tmp_path)) as first:
        async with Workspace.acquire(base_dir=str(tmp_path)) as second:
            assert first.root != second.root


@pytest.mark.asyncio
async def test_cleanup_on_error(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
            root = workspace.root
            raise RuntimeError("boom")
    assert not root.exists()


@pytest.mark.asyncio
async def test_cleanup_on_cancellation(tmp_path: Path) -> None:
    entered = asyncio.Event()
    roots: list[Path] = []

    async def hold() -> None:
        async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
            roots.append(workspace.root)
            entered.set()
            await asyncio.sleep(3600)

    task = asyncio.create_task(hold())
    await entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert roots and not roots[0].exists()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_cancellation_right_after_start_leaves_nothing(tmp_path: Path) -> None:
    async def hold() -> None:
        async with Workspace.acquire(base_dir=str(tmp_path)):
            await asyncio.sleep(3600)

    task = asyncio.create_task(hold())
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_read_output_success(tmp_path: Path) -> None:
    async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
        await workspace.write_json(workspace.locale_file("es"), {"meta": {"title": "Hola"}})
        assert await workspace.read_output("es") == {"meta": {"title": "Hola"}}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw, reason_fragment",
    [
        (None, "未找到"),
        ("{not json", "解析失败"),
        ("[1, 2]", "不是 JSON 对象"),
    ],
)
async def test_read_output_failures_are_per_language(
    tmp_path: Path, raw: str | None, reason_fragment: str
) -> None:
    async with Workspace.acquire(base_dir=str(tmp_path)) as workspace:
        if raw is not None:
            workspace.locale_file("fr").write_text(raw, encoding="utf-8")
        with pytest.raises(PerLanguageTranslationError) as exc_info:
            await workspace.read_output("fr")

    assert exc_info.value.lang == "fr"
    assert reason_fragment in exc_info.value.reason
