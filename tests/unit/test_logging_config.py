# tests/unit/test_logging_config.py
"""日志配置的单元测试。"""

import logging

import pytest
import structlog
from rich.console import Console

from metalingo.logging_config import PanelRenderer, setup_logging


def test_panel_renderer_includes_event_and_context() -> None:
    renderer = PanelRenderer(console=Console(width=120))
    output = renderer(
        None,
        "info",
        {"event": "缓存命中", "level": "info", "logger": "metalingo.resolver", "key": "abc123"},
    )

    assert "缓存命中" in output
    assert "INFO" in output
    assert "key" in output and "abc123" in output


def test_panel_renderer_truncates_long_values() -> None:
    renderer = PanelRenderer(console=Console(width=200), kv_truncate_at=10)
    output = renderer(None, "info", {"event": "e", "payload": "x" * 50})
    assert "x" * 50 not in output
    assert "…" in output


def test_panel_renderer_skips_empty_events() -> None:
    assert PanelRenderer()(None, "info", {"event": ""}) == ""


@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_json_sets_levels() -> None:
    setup_logging(log_level="DEBUG", log_format="json")

    assert logging.getLogger("metalingo").level == logging.DEBUG
    assert logging.getLogger().level == logging.WARNING
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_console_uses_panel_renderer() -> None:
    setup_logging(log_level="INFO", log_format="console", show_timestamp=False)
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], PanelRenderer)
