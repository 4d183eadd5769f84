# tests/unit/cli/conftest.py
"""为 CLI 测试提供 Fixtures。"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """提供一个 Typer CliRunner 实例用于模拟命令行调用。"""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cli_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging: None
) -> None:
    """在空目录中运行，避免读取开发者本地的 .env，并使用调试引擎。"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("METALINGO_ACTIVE_ENGINE", "debug")
    monkeypatch.delenv("METALINGO_REDIS__URL", raising=False)


@pytest.fixture
def metadata_file(tmp_path: Path) -> Path:
    path = tmp_path / "metadata.json"
    path.write_text(
        json.dumps(
            {
                "title": "Hello World",
                "description": "A friendly page",
                "sourceLanguage": "en",
                "url": "https://example.com/landing",
            }
        ),
        encoding="utf-8",
    )
    return path
