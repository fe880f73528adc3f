"""
Trademark availability via the USPTO trademark search portal

The portal is a JavaScript app with no public API, so checks drive a
headless Chromium (Playwright) and parse the rendered page text.

HOW IT WORKS:
1. Normalize the name and look it up in the result cache
2. Reuse one browser session per process (created once, on first use)
3. Open a fresh page per check, search, and wait for a result count
4. Untick the "Dead" status filter so only live marks remain
5. Parse up to 10 records out of the page text and classify

Parsing lives in plain functions (parse_result_count,
parse_trademark_records, classify_trademark) that work on captured text,
so markup changes only break them.

Failures never escape check_trademark(): blocked pages, unparseable
results and browser errors all become TrademarkStatus.UNKNOWN, and
UNKNOWN results are never cached.
"""

import asyncio
import logging
import random
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..config import TimeoutConfig, TrademarkConfig, config
from ..models import TrademarkResult, TrademarkStatus

logger = logging.getLogger(__name__)


SEARCH_INPUT_SELECTOR = "#searchbar"
SEARCH_BUTTON_SELECTOR = "button.btn.btn-primary.md-icon"
DEAD_FILTER_SELECTOR = "#statusDead"

RESULT_COUNT_PATTERN = re.compile(r"(\d+(?:,\d+)*)\s+results?\s+for", re.IGNORECASE)
ZERO_RESULTS_PATTERN = re.compile(r"(?<![\d,])0\s+results?\b|\bno results\b", re.IGNORECASE)
BLOCKED_PATTERN = re.compile(r"\b403\b|permission|something went wrong", re.IGNORECASE)

SERIAL_SPLIT_PATTERN = re.compile(r"Check to tag for (\d{8})")
WORDMARK_PATTERN = re.compile(r"Wordmark\s*wordmark\s*([A-Z][A-Z0-9\s'&-]*?)\s*Status", re.IGNORECASE)
STATUS_PATTERN = re.compile(r"(LIVE|DEAD)\s*(REGISTERED|PENDING|CANCELLED|ABANDONED)", re.IGNORECASE)
CLASS_PATTERN = re.compile(r"(?:IC|Class)\s*(\d{3})", re.IGNORECASE)
GOODS_PATTERN = re.compile(
    r"Goods & services\s*(?:IC \d{3}:\s*)?\[?\s*([^\]]+?)(?:\]|\.|\s*Class|\s*Serial)",
    re.IGNORECASE,
)
OWNER_PATTERN = re.compile(r"Owners?\s*([A-Za-z][A-Za-z0-9 ,.'&-]+?)\s*(?:\(|\n|$)")

GOODS_MAX_CHARS = 100
OWNER_MAX_CHARS = 50

# Evaluated in the page by wait_for_function
RESULTS_READY_JS = r"""() => {
    const text = document.body.innerText;
    return /\d[\d,]*\s+results?\s+for/i.test(text)
        || /(^|[^\d,])0 results/.test(text)
        || text.includes('403')
        || text.toLowerCase().includes('something went wrong');
}"""

COUNT_CHANGED_JS = r"""(previous) => {
    const text = document.body.innerText;
    const match = text.match(/(\d+(?:,\d+)*)\s+results?\s+for/i);
    return (match && match[1] !== previous) || /(^|[^\d,])0 results/.test(text);
}"""

UNKNOWN_SEARCH_FAILED = "Could not search USPTO database"
UNKNOWN_BLOCKED = "USPTO search blocked or unavailable (try again later)"
UNKNOWN_UNREADABLE = "Could not read USPTO results (try again later)"


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class TrademarkRecord:
    """One mark parsed from the search results."""
    serial_number: str
    word_mark: str
    status: str = ""
    is_live: bool = False
    is_registered: bool = False
    is_pending: bool = False
    international_class: str = ""
    goods_services: str = ""
    owner: Optional[str] = None


@dataclass
class SearchOutcome:
    """
    Raw outcome of one portal search.

    total_count is None when the page gave no usable count.
    """
    records: list[TrademarkRecord] = field(default_factory=list)
    total_count: Optional[int] = None
    blocked: bool = False


def normalize_trademark_name(name: str) -> str:
    return name.lower().strip()


def trademark_search_url(name: str) -> str:
    """Portal results page for manual verification."""
    return f"{config.trademark.results_url}?searchTerm={quote(name)}"


# =============================================================================
# PAGE TEXT PARSING
# =============================================================================

def is_blocked_page(text: str) -> bool:
    """
    Bot-block, permission or generic error page.

    A page that shows a result count is never treated as blocked, since
    goods descriptions and serial numbers can contain the same words.
    """
    if RESULT_COUNT_PATTERN.search(text):
        return False
    return bool(BLOCKED_PATTERN.search(text))


def parse_result_count(text: str) -> Optional[int]:
    """
    Total result count from page text.

    Returns:
        The count, 0 for an explicit "0 results"/"no results", None if absent
    """
    match = RESULT_COUNT_PATTERN.search(text)
    if match:
        return int(match.group(1).replace(",", ""))
    if ZERO_RESULTS_PATTERN.search(text):
        return 0
    return None


def _truncate(value: str, limit: int, marker: str = "") -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + marker


def parse_trademark_records(text: str, limit: int = 10) -> list[TrademarkRecord]:
    """
    Segment result text into records on the "Check to tag for <serial>" markers.

    Args:
        text: Rendered page text
        limit: Maximum records to return

    Returns:
        Records that have both a serial number and a word mark
    """
    sections = SERIAL_SPLIT_PATTERN.split(text)
    records = []

    # sections = [preamble, serial, content, serial, content, ...]
    for i in range(1, len(sections), 2):
        if len(records) >= limit:
            break
        serial = sections[i]
        content = sections[i + 1] if i + 1 < len(sections) else ""

        wordmark_match = WORDMARK_PATTERN.search(content)
        word_mark = wordmark_match.group(1).strip() if wordmark_match else ""
        if not serial or not word_mark:
            continue

        status_match = STATUS_PATTERN.search(content)
        status = "".join(status_match.groups()).upper() if status_match else ""

        class_match = CLASS_PATTERN.search(content)

        goods_match = GOODS_PATTERN.search(content)
        goods = re.sub(r"\s+", " ", goods_match.group(1)).strip() if goods_match else ""

        owner_match = OWNER_PATTERN.search(content)
        owner = _truncate(owner_match.group(1).strip(), OWNER_MAX_CHARS) if owner_match else None

        records.append(TrademarkRecord(
            serial_number=serial,
            word_mark=word_mark,
            status=status,
            is_live=status.startswith("LIVE"),
            is_registered="REGISTERED" in status,
            is_pending="PENDING" in status,
            international_class=class_match.group(1) if class_match else "",
            goods_services=_truncate(goods, GOODS_MAX_CHARS, "..."),
            owner=owner,
        ))

    return records


def classify_trademark(
    name: str,
    records: list[TrademarkRecord],
    total_count: Optional[int],
) -> TrademarkResult:
    """
    Turn parsed search results into a TrademarkResult.

    Priority:
    1. No count -> UNKNOWN; zero results -> AVAILABLE
    2. Exact live match -> REGISTERED if registered, else PENDING
    3. Live mark containing / contained by the name -> PENDING
    4. Other live marks -> PENDING with the occupied classes
    5. Nothing parseable despite a count -> PENDING with the raw count
    """
    if total_count is None:
        return TrademarkResult.unknown(UNKNOWN_UNREADABLE)

    if total_count == 0:
        return TrademarkResult(TrademarkStatus.AVAILABLE, "No live trademarks found in USPTO database")

    if not records:
        return TrademarkResult(TrademarkStatus.PENDING, f"{total_count} live marks found (verify at USPTO)")

    target = normalize_trademark_name(name)
    live = [r for r in records if r.is_live]

    exact = next((r for r in live if r.word_mark.lower() == target), None)
    if exact is not None:
        class_info = f" Class {exact.international_class}" if exact.international_class else ""
        goods_info = f": {exact.goods_services}" if exact.goods_services else ""
        if exact.is_registered:
            return TrademarkResult(
                TrademarkStatus.REGISTERED,
                f"Registered (SN: {exact.serial_number}){class_info}{goods_info}",
            )
        if exact.is_pending:
            return TrademarkResult(
                TrademarkStatus.PENDING,
                f"Pending (SN: {exact.serial_number}){class_info}{goods_info}",
            )
        return TrademarkResult(TrademarkStatus.PENDING, f"{total_count} live marks found")

    similar = [
        r for r in live
        if target in r.word_mark.lower() or r.word_mark.lower() in target
    ]
    if similar:
        registered = [r for r in similar if r.is_registered]
        if registered:
            first = registered[0]
            class_info = f" (Class {first.international_class})" if first.international_class else ""
            marks = ", ".join(r.word_mark for r in registered[:2])
            return TrademarkResult(
                TrademarkStatus.PENDING,
                f"Similar marks: {marks}{class_info} - {total_count} total live",
            )
        return TrademarkResult(TrademarkStatus.PENDING, f"{total_count} live marks found")

    classes = []
    for r in live:
        if r.international_class and r.international_class not in classes:
            classes.append(r.international_class)
    classes_str = f" in classes: {', '.join(classes[:5])}" if classes else ""
    return TrademarkResult(TrademarkStatus.PENDING, f"{total_count} live marks found{classes_str}")


def outcome_to_result(name: str, outcome: SearchOutcome) -> TrademarkResult:
    if outcome.blocked:
        return TrademarkResult.unknown(UNKNOWN_BLOCKED)
    return classify_trademark(name, outcome.records, outcome.total_count)


# =============================================================================
# CACHE
# =============================================================================

class TrademarkCache:
    """
    Process-wide results keyed by normalized name.

    Only confident results are stored; UNKNOWN is dropped so the next
    request for that name searches again.
    """

    def __init__(self):
        self._results: dict[str, TrademarkResult] = {}
        self._lock = asyncio.Lock()

    def get(self, key: str) -> Optional[TrademarkResult]:
        return self._results.get(key)

    async def put(self, key: str, result: TrademarkResult) -> bool:
        """Store a result; returns False when it was not cacheable."""
        if result.status == TrademarkStatus.UNKNOWN:
            return False
        async with self._lock:
            self._results.setdefault(key, result)
        return True

    def clear(self) -> None:
        self._results.clear()

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, key: str) -> bool:
        return key in self._results


# =============================================================================
# BROWSER SESSION
# =============================================================================

class PlaywrightSession:
    """A launched Chromium with one shared context; pages come from here."""

    def __init__(self, playwright, browser, context):
        self._playwright = playwright
        self._browser = browser
        self._context = context

    async def new_page(self):
        return await self._context.new_page()

    async def close(self) -> None:
        try:
            await self._context.close()
            await self._browser.close()
        finally:
            await self._playwright.stop()


async def launch_playwright_session(headless: Optional[bool] = None) -> PlaywrightSession:
    """Start Playwright and launch headless Chromium."""
    headless = config.trademark.headless if headless is None else headless
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=headless,
            args=[
                "--no-sandbox",
                "--disable-setuid-sandbox",
                "--disable-dev-shm-usage",
                "--disable-gpu",
                "--window-size=1920,1080",
            ],
        )
        context = await browser.new_context(
            viewport={"width": 1920, "height": 1080},
            user_agent=config.stores.browser_user_agent,
        )
    except Exception:
        await playwright.stop()
        raise
    logger.debug("Launched headless browser for trademark searches")
    return PlaywrightSession(playwright, browser, context)


class BrowserSessionManager:
    """
    Owns the single long-lived browser session.

    get_session() is single-flight: concurrent callers during the first
    launch wait on the same launch instead of starting a second browser.
    A failed launch is not remembered, so the next call tries again.
    """

    def __init__(self, launcher: Optional[Callable[[], Awaitable[Any]]] = None):
        """
        Args:
            launcher: Coroutine factory returning an object with async
                new_page() and close() (defaults to Playwright Chromium)
        """
        self._launcher = launcher or launch_playwright_session
        self._session = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._session is not None

    async def get_session(self):
        if self._session is not None:
            return self._session
        async with self._lock:
            if self._session is None:
                self._session = await self._launcher()
        return self._session

    async def new_page(self):
        """A fresh page in the shared session."""
        session = await self.get_session()
        return await session.new_page()

    async def close(self) -> None:
        """Release the browser. Safe to call when nothing was launched."""
        async with self._lock:
            session, self._session = self._session, None
        if session is not None:
            await session.close()
            logger.debug("Closed trademark browser session")


async def wait_or_fallback(awaitable: Awaitable[Any], timeout_seconds: float, fallback: Any = None) -> Any:
    """
    Await with a deadline.

    Returns:
        The awaited value, or fallback if the deadline (or a Playwright
        wait timeout) passes first
    """
    try:
        return await asyncio.wait_for(awaitable, timeout_seconds)
    except (asyncio.TimeoutError, PlaywrightTimeoutError):
        return fallback


# =============================================================================
# CHECKER
# =============================================================================

class TrademarkChecker:
    """
    Checks candidate names against the USPTO register.

    The browser session and cache are injectable so several checkers (or
    tests) can share or replace them. close_browser() must be called at
    shutdown.
    """

    def __init__(
        self,
        browser: Optional[BrowserSessionManager] = None,
        cache: Optional[TrademarkCache] = None,
        settings: Optional[TrademarkConfig] = None,
        timeouts: Optional[TimeoutConfig] = None,
    ):
        self.browser = browser or BrowserSessionManager()
        self.cache = cache if cache is not None else TrademarkCache()
        self.settings = settings or config.trademark
        self.timeouts = timeouts or config.timeouts

    async def check_trademark(self, name: str) -> TrademarkResult:
        """
        Check a name's trademark status.

        Args:
            name: Candidate name

        Returns:
            TrademarkResult; UNKNOWN (with a reason) on any failure
        """
        key = normalize_trademark_name(name)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Trademark cache hit for {key!r}")
            return cached

        try:
            outcome = await self._search(name)
            result = outcome_to_result(name, outcome)
        except Exception as e:
            logger.warning(f"Trademark search failed for {name!r}: {e}")
            return TrademarkResult.unknown(UNKNOWN_SEARCH_FAILED)

        await self.cache.put(key, result)
        return result

    async def close_browser(self) -> None:
        await self.browser.close()

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def _search(self, name: str) -> SearchOutcome:
        """Run one portal search in its own page. The page is always closed."""
        page = await self.browser.new_page()
        try:
            return await self._search_in_page(page, name)
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.debug(f"Ignoring error while closing page: {e}")

    async def _search_in_page(self, page, name: str) -> SearchOutcome:
        settings = self.settings
        timeouts = self.timeouts

        page.set_default_timeout(timeouts.browser_default_ms)
        await self._pause(
            settings.pre_navigation_min_seconds + random.random() * settings.pre_navigation_jitter_seconds
        )

        await page.goto(settings.search_url, wait_until="domcontentloaded")
        await page.wait_for_selector(SEARCH_INPUT_SELECTOR, timeout=timeouts.browser_search_input_ms)
        await page.type(SEARCH_INPUT_SELECTOR, name, delay=settings.typing_delay_ms)
        await page.click(SEARCH_BUTTON_SELECTOR)

        await wait_or_fallback(
            page.wait_for_function(RESULTS_READY_JS, timeout=timeouts.browser_results_ms),
            timeouts.browser_results_ms / 1000 + 1,
        )
        await self._pause(settings.stabilize_seconds)

        text = await page.inner_text("body")
        if is_blocked_page(text):
            return SearchOutcome(blocked=True)

        total = parse_result_count(text)
        if not total:
            return SearchOutcome(total_count=total)

        dead_filter = await page.query_selector(DEAD_FILTER_SELECTOR)
        if dead_filter is not None:
            initial = RESULT_COUNT_PATTERN.search(text)
            await dead_filter.click()
            changed = await wait_or_fallback(
                page.wait_for_function(
                    COUNT_CHANGED_JS,
                    arg=initial.group(1) if initial else "",
                    timeout=timeouts.browser_filter_ms,
                ),
                timeouts.browser_filter_ms / 1000 + 1,
            )
            if changed is None:
                logger.debug(f"Dead-mark filter did not change the count for {name!r}")
            await self._pause(settings.filter_settle_seconds)
            text = await page.inner_text("body")
            filtered_total = parse_result_count(text)
            if filtered_total is not None:
                total = filtered_total
            if total == 0:
                return SearchOutcome(total_count=0)

        records = parse_trademark_records(text, limit=settings.max_records)
        return SearchOutcome(records=records, total_count=total)
