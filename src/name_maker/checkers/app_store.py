"""
iOS App Store availability via the public iTunes Search API

Only an exact title match (case and whitespace insensitive) counts as
taken. Similar titles are common and don't block a name.
"""

import logging
import re
from typing import Optional
from urllib.parse import quote

import httpx

from ..config import config
from ..models import AppStoreResult

logger = logging.getLogger(__name__)

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"


def normalize_title(title: str) -> str:
    """Lowercase and drop all whitespace."""
    return re.sub(r"\s+", "", title.lower())


def app_store_search_url(name: str) -> str:
    """App Store web search for manual verification."""
    return f"https://apps.apple.com/us/search?term={quote(name)}"


def find_exact_match(name: str, apps: list[dict]) -> Optional[dict]:
    """First app whose normalized trackName equals the normalized name."""
    target = normalize_title(name)
    for app in apps:
        if not isinstance(app, dict):
            continue
        title = app.get("trackName")
        if isinstance(title, str) and normalize_title(title) == target:
            return app
    return None


class AppStoreChecker:
    """
    Checks the iOS App Store for an app with the same name.

    Never raises: network, HTTP and parse failures all produce
    AppStoreResult(status=UNKNOWN).
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        limit: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Request timeout in seconds
            limit: Number of search results to inspect
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout if timeout is not None else config.timeouts.http_seconds
        self.limit = limit if limit is not None else config.stores.result_limit
        self._transport = transport

    async def _search(self, name: str) -> list[dict]:
        params = {
            "term": name,
            "entity": "software",
            "limit": str(self.limit),
            "country": config.stores.country,
        }
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"User-Agent": config.stores.user_agent},
        ) as client:
            response = await client.get(ITUNES_SEARCH_URL, params=params)
            response.raise_for_status()
            data = response.json()

        results = data.get("results", [])
        if not isinstance(results, list):
            raise ValueError("Unexpected iTunes search payload")
        return [app for app in results[:self.limit] if isinstance(app, dict)]

    async def check(self, name: str) -> AppStoreResult:
        """
        Check whether an iOS app already uses this name.

        Args:
            name: Candidate name

        Returns:
            TAKEN with the matched title and URL, AVAILABLE, or UNKNOWN
        """
        try:
            apps = await self._search(name)
        except Exception as e:
            logger.warning(f"App Store search failed for {name!r}: {e}")
            return AppStoreResult.unknown()

        match = find_exact_match(name, apps)
        if match is None:
            return AppStoreResult.available()

        return AppStoreResult.taken(
            existing_app=match["trackName"],
            store_url=match.get("trackViewUrl"),
        )
