# metalingo/logging_config.py
"""
本模块负责集中配置项目的日志系统。

console 格式使用 Rich 面板渲染，便于开发时阅读缓存命中、子集命中、
引擎调用等带上下文的事件；json 格式面向生产环境的机器读取。
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Literal

import structlog
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from structlog.typing import Processor

_LEVEL_STYLES = {
    "debug": "blue",
    "info": "green",
    "warning": "yellow",
    "error": "bold red",
    "critical": "bold magenta",
}


class PanelRenderer:
    """将一条日志渲染为带键值表格的 Rich 面板。"""

    def __init__(
        self,
        show_timestamp: bool = True,
        kv_truncate_at: int = 120,
        console: Console | None = None,
    ):
        self._console = console or Console()
        self._show_timestamp = show_timestamp
        self._kv_truncate_at = kv_truncate_at

    def _format_value(self, value: Any) -> str:
        text = value if isinstance(value, str) else repr(value)
        if len(text) > self._kv_truncate_at:
            return text[: self._kv_truncate_at - 1] + "…"
        return text

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        if not event:
            return ""
        level = str(event_dict.pop("level", "info")).lower()
        logger_name = event_dict.pop("logger", "metalingo")
        timestamp = event_dict.pop("timestamp", "")
        style = _LEVEL_STYLES.get(level, "default")

        body: list[Any] = [Text(event)]
        if event_dict:
            table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
            table.add_column(style="dim", justify="right")
            table.add_column(overflow="fold")
            for key, value in sorted(event_dict.items()):
                table.add_row(f"{key} :", Text(self._format_value(value)))
            body.append(table)

        panel = Panel(
            Group(*body),
            title=Text.from_markup(f"[{style}]{level.upper()}[/] [cyan dim]({logger_name})[/]"),
            title_align="left",
            subtitle=Text(str(timestamp), style="dim") if self._show_timestamp and timestamp else None,
            subtitle_align="right",
            border_style=style,
            expand=False,
        )
        with self._console.capture() as capture:
            self._console.print(panel)
        return capture.get().rstrip()


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    show_timestamp: bool = True,
) -> None:
    """
    配置全局的 structlog 日志系统，这是整个应用的日志配置入口。

    Args:
        log_level: 本项目记录器的最低日志级别。
        log_format: 'console' 用于开发环境的面板输出，'json' 用于生产环境。
        show_timestamp: console 模式下是否在面板右下角显示时间戳。
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if log_format == "console":
        processors.insert(3, structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"))
        processors.append(PanelRenderer(show_timestamp=show_timestamp))
    else:
        processors.insert(3, structlog.processors.TimeStamper(fmt="iso", utc=True))
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # structlog 已经完成渲染，标准库只负责输出
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)  # 避免第三方库的噪音

    logging.getLogger("metalingo").setLevel(log_level.upper())

    structlog.get_logger("metalingo.logging_config").debug(
        "日志系统已配置完成。", log_format=log_format, app_log_level=log_level.upper()
    )
