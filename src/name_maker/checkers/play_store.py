"""
Google Play availability

Two backends share one matching policy:
- PlayStoreChecker scrapes the public search page (default; works when
  the structured client is blocked)
- PlayStoreLibraryChecker uses the google-play-scraper client

Matching is looser than on iOS: a title that starts with the name also
counts as taken, because scraped titles often carry a tagline
("Lumina: Photo Editor"). The scrape backend additionally treats a text
node equal to the name anywhere on the page as taken.
"""

import asyncio
import html
import logging
import re
from typing import Optional
from urllib.parse import quote, urljoin

import httpx
from google_play_scraper import search as play_search

from ..config import config
from ..models import AppStoreResult
from .app_store import normalize_title

logger = logging.getLogger(__name__)

PLAY_BASE_URL = "https://play.google.com"
PLAY_SEARCH_URL = f"{PLAY_BASE_URL}/store/search"

TITLE_ATTR_PATTERN = re.compile(r'(?:aria-label|title)="([^"]{1,150})"')
DETAILS_LINK_PATTERN = re.compile(r'href="((?:https://play\.google\.com)?/store/apps/details\?id=[A-Za-z0-9_.]+)')
CARD_MAX_CHARS = 2000


def play_store_search_url(name: str) -> str:
    """Play Store web search for manual verification."""
    return f"{PLAY_SEARCH_URL}?q={quote(name)}&c=apps"


def public_store_url(url: str) -> str:
    """Absolute /store/apps/ URL (search results sometimes link /work/apps/)."""
    return urljoin(PLAY_BASE_URL, url.replace("/work/apps/", "/store/apps/"))


def title_matches(name: str, title: str) -> bool:
    """Exact normalized match, or the title starts with the name."""
    target = normalize_title(name)
    candidate = normalize_title(title)
    if not target or not candidate:
        return False
    return candidate == target or candidate.startswith(target)


def find_title_match(name: str, titles: list[str]) -> Optional[str]:
    """Exact matches win over prefix matches; otherwise first in page order."""
    target = normalize_title(name)
    for title in titles:
        if normalize_title(title) == target:
            return title
    for title in titles:
        if title_matches(name, title):
            return title
    return None


def extract_result_cards(page: str) -> list[tuple[str, str]]:
    """
    (title, details URL) pairs from the app result cards.

    A card runs from the tag holding an app details link up to the next
    such link, capped at CARD_MAX_CHARS. Label attributes outside every
    card (navigation, the search box, footer) are ignored.
    """
    links = list(DETAILS_LINK_PATTERN.finditer(page))
    starts = [max(page.rfind("<", 0, link.start()), 0) for link in links]
    cards = []
    for i, link in enumerate(links):
        end = starts[i + 1] if i + 1 < len(links) else len(page)
        end = min(end, starts[i] + CARD_MAX_CHARS)
        url = public_store_url(link.group(1))
        for match in TITLE_ATTR_PATTERN.finditer(page, starts[i], end):
            title = html.unescape(match.group(1)).strip()
            if title:
                cards.append((title, url))
    return cards


def page_mentions_name(name: str, page: str) -> bool:
    """A text node that is exactly the name (case-insensitive)."""
    pattern = re.compile(r">\s*" + re.escape(name.strip()) + r"\s*<", re.IGNORECASE)
    return bool(pattern.search(page))


def classify_search_page(name: str, page: str) -> AppStoreResult:
    """
    Classify a Play search results page.

    Args:
        name: Candidate name
        page: Raw HTML of the search page

    Returns:
        TAKEN or AVAILABLE (never UNKNOWN; fetch failures are handled by the caller)
    """
    cards = extract_result_cards(page)
    match = find_title_match(name, [title for title, _ in cards])
    if match is not None:
        url = next(url for title, url in cards if title == match)
        return AppStoreResult.taken(existing_app=match, store_url=url)

    if page_mentions_name(name, page):
        return AppStoreResult.taken(existing_app=name.strip(), store_url=play_store_search_url(name))

    return AppStoreResult.available()


class PlayStoreChecker:
    """
    Scrapes the Google Play search page.

    Never raises: any fetch failure produces AppStoreResult(status=UNKNOWN).
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else config.timeouts.http_seconds
        self._transport = transport

    async def _fetch(self, name: str) -> str:
        params = {"q": name, "c": "apps", "hl": "en", "gl": config.stores.country.upper()}
        headers = {
            "User-Agent": config.stores.browser_user_agent,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "en-US,en;q=0.9",
        }
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers=headers,
            follow_redirects=True,
            max_redirects=1,
        ) as client:
            response = await client.get(PLAY_SEARCH_URL, params=params)
            response.raise_for_status()
            return response.text

    async def check(self, name: str) -> AppStoreResult:
        """Check whether an Android app already uses this name."""
        if not normalize_title(name):
            return AppStoreResult.unknown()
        try:
            page = await self._fetch(name)
        except Exception as e:
            logger.warning(f"Play Store search failed for {name!r}: {e}")
            return AppStoreResult.unknown()
        return classify_search_page(name, page)


class PlayStoreLibraryChecker:
    """
    Searches Google Play through google-play-scraper.

    The client is synchronous, so it runs in a worker thread under a
    timeout. Same matching policy as the scrape backend.
    """

    def __init__(self, timeout: Optional[float] = None, limit: Optional[int] = None):
        self.timeout = timeout if timeout is not None else config.timeouts.http_seconds
        self.limit = limit if limit is not None else config.stores.result_limit

    def _search(self, name: str) -> list[dict]:
        return play_search(
            name,
            lang="en",
            country=config.stores.country,
            n_hits=self.limit,
        ) or []

    async def check(self, name: str) -> AppStoreResult:
        """Check whether an Android app already uses this name."""
        if not normalize_title(name):
            return AppStoreResult.unknown()
        try:
            apps = await asyncio.wait_for(asyncio.to_thread(self._search, name), self.timeout)
        except Exception as e:
            logger.warning(f"Play Store search failed for {name!r}: {e}")
            return AppStoreResult.unknown()

        apps = [a for a in apps[:self.limit] if isinstance(a, dict) and isinstance(a.get("title"), str)]
        match = find_title_match(name, [a["title"] for a in apps])
        if match is None:
            return AppStoreResult.available()

        app = next(a for a in apps if a["title"] == match)
        url = app.get("url")
        if not url and app.get("appId"):
            url = f"{PLAY_BASE_URL}/store/apps/details?id={app['appId']}"
        return AppStoreResult.taken(
            existing_app=match,
            store_url=public_store_url(url) if url else play_store_search_url(name),
        )


def get_play_store_checker(backend: Optional[str] = None):
    """Play Store checker for the configured backend ('scrape' or 'library')."""
    backend = backend or config.stores.play_backend
    if backend == "library":
        return PlayStoreLibraryChecker()
    if backend == "scrape":
        return PlayStoreChecker()
    raise ValueError(f"Unknown Play Store backend: {backend}. Valid options: ['scrape', 'library']")
