# metalingo/cli/main.py
"""Metalingo CLI 的主入口点。"""

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

import metalingo
from metalingo.cli.cache import cache_app
from metalingo.cli.state import State
from metalingo.cli.translate import translate
from metalingo.config import MetalingoConfig
from metalingo.logging_config import setup_logging

app = typer.Typer(
    name="metalingo",
    help="🌐 Metalingo: 带缓存与增量翻译的网页元数据多语言引擎。",
    add_completion=False,
    no_args_is_help=True,
)

app.command("translate")(translate)
app.add_typer(cache_app, name="cache")

console = Console()


def version_callback(value: bool) -> None:
    """处理 --version 选项的回调函数。"""
    if value:
        console.print(f"Metalingo [bold cyan]v{metalingo.__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="显示版本信息并退出。",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """主回调函数，在任何子命令执行前加载配置并配置日志。"""
    try:
        config = MetalingoConfig()
        setup_logging(log_level=config.logging.level, log_format=config.logging.format)
        ctx.obj = State(config=config)
    except ValidationError as e:
        console.print("[bold red]❌ 启动失败：无法加载配置。[/bold red]")
        console.print(f"[dim]{e}[/dim]")
        raise typer.Exit(code=1) from e
