# metalingo/bootstrap.py
"""根据配置装配协调器及其依赖。"""

from metalingo.cache.store import CacheStore
from metalingo.config import MetalingoConfig
from metalingo.coordinator import TranslationCoordinator
from metalingo.engines.factory import create_engine


def create_coordinator(config: MetalingoConfig) -> TranslationCoordinator:
    """
    根据配置创建并返回一个未初始化的 TranslationCoordinator 实例。

    每次调用都会构造独立的 CacheStore，不存在模块级的共享缓存状态。
    """
    store = CacheStore(config.cache, redis_url=config.redis.url)
    engine = create_engine(config)
    return TranslationCoordinator(config, store, engine)
