# metalingo/cli/translate.py
"""翻译元数据文件的 CLI 命令。"""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from metalingo.bootstrap import create_coordinator
from metalingo.cli.state import State
from metalingo.core.types import ERROR_MARKER_FIELD, MetadataSnapshot, TranslationResult
from metalingo.exceptions import MetalingoError, TranslationEngineError

console = Console()

DEFAULT_TARGETS = ["es", "fr"]


def load_snapshot(path: Path) -> tuple[dict[str, Any], MetadataSnapshot]:
    """读取抓取结果；兼容 `{"original": {...}}` 包装格式。"""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise TypeError("元数据文件必须是一个 JSON 对象。")
    metadata = raw.get("original", raw)
    if not isinstance(metadata, dict):
        raise TypeError("'original' 字段必须是一个 JSON 对象。")
    return raw, MetadataSnapshot.model_validate(metadata)


def update_i18n_files(translations: TranslationResult, i18n_dir: Path) -> list[Path]:
    """把每个语言的译文合并写入 `<i18n_dir>/<lang>.json` 的 `metadata` 字段。"""
    i18n_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for lang, content in translations.items():
        target = i18n_dir / f"{lang}.json"
        existing: dict[str, Any] = {}
        if target.exists():
            existing = json.loads(target.read_text(encoding="utf-8"))
        existing.update(
            metadata=content, _updated=datetime.now(timezone.utc).isoformat()
        )
        target.write_text(json.dumps(existing, ensure_ascii=False, indent=2), encoding="utf-8")
        written.append(target)
    return written


def _render_table(translations: TranslationResult) -> Table:
    table = Table(title="翻译结果")
    table.add_column("语言", style="cyan")
    table.add_column("标题")
    table.add_column("状态")
    for lang, content in translations.items():
        title = str(content.get("meta", {}).get("title", ""))
        error = content.get(ERROR_MARKER_FIELD)
        status = f"[red]{error}[/red]" if error else "[green]OK[/green]"
        table.add_row(lang, title, status)
    return table


async def _async_translate(
    state: State,
    snapshot: MetadataSnapshot,
    languages: list[str],
    timeout: Optional[float],
) -> TranslationResult:
    coordinator = create_coordinator(state.config)
    try:
        await coordinator.initialize()
        return await coordinator.translate(snapshot, languages, timeout=timeout)
    finally:
        await coordinator.close()


def translate(
    ctx: typer.Context,
    metadata_file: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, help="抓取得到的元数据 JSON 文件。")
    ],
    languages: Annotated[
        Optional[list[str]], typer.Argument(help="目标语言代码，默认为 es fr。")
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", help="引擎调用超时（秒）。")
    ] = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="保存完整结果的 JSON 文件。")
    ] = None,
    i18n_dir: Annotated[
        Optional[Path], typer.Option("--i18n-dir", help="写入 <lang>.json 的目录。")
    ] = None,
) -> None:
    """翻译一个元数据文件到一个或多个目标语言。"""
    state: State = ctx.obj
    targets = languages or DEFAULT_TARGETS

    try:
        raw, snapshot = load_snapshot(metadata_file)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        console.print(f"[bold red]❌ 元数据文件格式错误: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    try:
        translations = asyncio.run(_async_translate(state, snapshot, targets, timeout))
    except TranslationEngineError as e:
        console.print(f"[bold red]❌ {e.message}[/bold red]")
        if e.partial_result:
            console.print(_render_table(e.partial_result))
        raise typer.Exit(code=2) from e
    except MetalingoError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1) from e

    if not translations:
        console.print("[yellow]无需翻译（所有目标语言均与源语言相同）。[/yellow]")
        return
    console.print(_render_table(translations))

    if i18n_dir is not None:
        for path in update_i18n_files(translations, i18n_dir):
            console.print(f"[dim]已更新 {path}[/dim]")

    if output is not None:
        output.write_text(
            json.dumps(
                {
                    "original": raw,
                    "translations": translations,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
                ensure_ascii=False,
                indent=2,
            ),
            encoding="utf-8",
        )
        console.print(f"[bold green]✅ 结果已保存到: {output}[/bold green]")
