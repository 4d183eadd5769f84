# tests/conftest.py
"""项目全局共享的测试 Fixtures。"""

import logging
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
import pytest_asyncio
import structlog
from pytest_mock import MockerFixture
from rich.console import Console

from metalingo.cache.memory import MemoryCacheBackend
from metalingo.cache.store import CacheStore
from metalingo.config import CacheSettings, MetalingoConfig
from metalingo.coordinator import TranslationCoordinator
from metalingo.engines.debug import DebugEngine, DebugEngineConfig


class FakeClock:
    """可手动推进的时钟，用于确定性的 TTL 测试。"""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """恢复被 `setup_logging` 修改的全局日志状态。"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    app_level = logging.getLogger("metalingo").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("metalingo").setLevel(app_level)
    structlog.reset_defaults()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> MetalingoConfig:
    return MetalingoConfig(
        _env_file=None,
        active_engine="debug",
        cache=CacheSettings(ttl=600),
    )


@pytest.fixture
def memory_backend(clock: FakeClock) -> MemoryCacheBackend:
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
def store(config: MetalingoConfig, memory_backend: MemoryCacheBackend) -> CacheStore:
    return CacheStore(config.cache, fallback=memory_backend)


@pytest.fixture
def debug_engine() -> DebugEngine:
    return DebugEngine(DebugEngineConfig())


@pytest_asyncio.fixture
async def coordinator(
    config: MetalingoConfig,
    store: CacheStore,
    debug_engine: DebugEngine,
    clock: FakeClock,
) -> AsyncGenerator[TranslationCoordinator, None]:
    """创建一个使用内存缓存与调试引擎的协调器，并确保其在测试后关闭。"""
    coord = TranslationCoordinator(config, store, debug_engine, clock=clock)
    await coord.initialize()
    yield coord
    await coord.close()


@pytest.fixture
def sample_metadata() -> dict[str, Any]:
    """一份典型的抓取结果。"""
    return {
        "title": "Hello World",
        "description": "A friendly page",
        "keywords": "hello, world",
        "h1": "Welcome",
        "ogTitle": "Hello World on OG",
        "sourceLanguage": "en",
        "url": "https://example.com/landing",
    }
