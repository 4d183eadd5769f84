# metalingo/cli/cache.py
"""缓存管理相关的 CLI 命令。"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from metalingo.cache.store import CacheStore
from metalingo.cli.state import State
from metalingo.core.types import CacheStats

console = Console()
cache_app = typer.Typer(help="查看和清理翻译缓存")


def _create_store(state: State) -> CacheStore:
    return CacheStore(state.config.cache, redis_url=state.config.redis.url)


async def _async_stats(store: CacheStore) -> CacheStats:
    try:
        await store.initialize()
        return await store.stats()
    finally:
        await store.close()


async def _async_clear(store: CacheStore) -> int:
    try:
        await store.initialize()
        return await store.clear()
    finally:
        await store.close()


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """显示缓存条目数量与当前使用的后端。"""
    state: State = ctx.obj
    stats = asyncio.run(_async_stats(_create_store(state)))

    table = Table(title="缓存统计", show_header=False)
    table.add_row("后端", stats.backend_kind)
    table.add_row("条目数", str(stats.count))
    table.add_row("TTL (秒)", str(state.config.cache.ttl))
    console.print(table)


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="跳过确认提示。"),
) -> None:
    """清空属于 Metalingo 命名空间的所有缓存条目。"""
    state: State = ctx.obj
    if not yes:
        typer.confirm("确定要清空翻译缓存吗？", abort=True)
    removed = asyncio.run(_async_clear(_create_store(state)))
    console.print(f"[bold green]✅ 缓存已清空，共删除 {removed} 个条目。[/bold green]")
