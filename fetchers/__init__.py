"""
Fetchers Module
Remote content fetchers and per-kind fetch strategies
"""
from .base import BaseContentFetcher
from .memory_fetcher import InMemoryContentFetcher
from .http_fetcher import HttpContentFetcher
from .strategies import FetchStrategy, load_complete_exploration, strategy_for

__all__ = [
    "BaseContentFetcher",
    "InMemoryContentFetcher",
    "HttpContentFetcher",
    "FetchStrategy",
    "load_complete_exploration",
    "strategy_for",
]
