"""
Availability checkers

One checker per external source. Each public check method returns a
typed result and never raises.
"""

from .app_store import AppStoreChecker, app_store_search_url
from .domain import DomainChecker, build_candidate_domains, generate_domain_hacks
from .play_store import (
    PlayStoreChecker,
    PlayStoreLibraryChecker,
    get_play_store_checker,
    play_store_search_url,
)
from .trademark import (
    BrowserSessionManager,
    TrademarkCache,
    TrademarkChecker,
    trademark_search_url,
)

__all__ = [
    "AppStoreChecker",
    "DomainChecker",
    "PlayStoreChecker",
    "PlayStoreLibraryChecker",
    "TrademarkChecker",
    "BrowserSessionManager",
    "TrademarkCache",
    "get_play_store_checker",
    "build_candidate_domains",
    "generate_domain_hacks",
    "app_store_search_url",
    "play_store_search_url",
    "trademark_search_url",
]
