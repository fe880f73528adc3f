"""
Availability Orchestrator

Fans one candidate name out to the four availability sources and joins
the answers into a NameCheckResult:
1. Trademark register (headless browser)
2. iOS App Store (JSON search API)
3. Google Play (search page scrape or client library)
4. Domains (DNS resolution)

Sources run concurrently for a name; names are checked one after another
so the trademark portal only ever sees one search at a time.
"""

import asyncio
import logging
from typing import Callable, Iterable, Optional, Protocol

from .checkers.app_store import AppStoreChecker
from .checkers.domain import DomainChecker
from .checkers.play_store import get_play_store_checker
from .checkers.trademark import TrademarkChecker
from .models import AppStoreResult, DomainCheckResult, NameCheckResult, TrademarkResult

logger = logging.getLogger(__name__)


class StoreChecker(Protocol):
    async def check(self, name: str) -> AppStoreResult: ...


def unknown_result(name: str) -> NameCheckResult:
    """All-unknown record used when checking a name fails outright."""
    return NameCheckResult(
        name=name,
        trademark=TrademarkResult.unknown(),
        ios_app_store=AppStoreResult.unknown(),
        google_play_store=AppStoreResult.unknown(),
        domains=(),
    )


class AvailabilityOrchestrator:
    """
    Runs every availability check for a name.

    Checkers are injectable; by default the orchestrator builds the
    production ones and owns the trademark browser session, which
    close() releases.
    """

    def __init__(
        self,
        trademark: Optional[TrademarkChecker] = None,
        ios: Optional[StoreChecker] = None,
        android: Optional[StoreChecker] = None,
        domains: Optional[DomainChecker] = None,
    ):
        self.trademark = trademark or TrademarkChecker()
        self.ios = ios or AppStoreChecker()
        self.android = android or get_play_store_checker()
        self.domains = domains or DomainChecker()

    async def check_name_availability(self, name: str) -> NameCheckResult:
        """
        Check one name against all four sources concurrently.

        Checkers handle their own failures; anything that still escapes
        one is logged and replaced by that source's safe default, so the
        record is always complete.

        Args:
            name: Candidate name

        Returns:
            NameCheckResult with all four sub-results present
        """
        trademark, ios, android, domains = await asyncio.gather(
            self.trademark.check_trademark(name),
            self.ios.check(name),
            self.android.check(name),
            self.domains.check_domains(name),
            return_exceptions=True,
        )

        if not isinstance(trademark, TrademarkResult):
            logger.error(f"Trademark check for {name!r} broke its contract: {trademark!r}")
            trademark = TrademarkResult.unknown()
        if not isinstance(ios, AppStoreResult):
            logger.error(f"iOS check for {name!r} broke its contract: {ios!r}")
            ios = AppStoreResult.unknown()
        if not isinstance(android, AppStoreResult):
            logger.error(f"Android check for {name!r} broke its contract: {android!r}")
            android = AppStoreResult.unknown()
        if isinstance(domains, BaseException):
            logger.error(f"Domain check for {name!r} broke its contract: {domains!r}")
            domains = []

        return NameCheckResult(
            name=name,
            trademark=trademark,
            ios_app_store=ios,
            google_play_store=android,
            domains=tuple(d for d in domains if isinstance(d, DomainCheckResult)),
        )

    async def check_names(
        self,
        names: Iterable[str],
        on_result: Optional[Callable[[NameCheckResult], None]] = None,
    ) -> list[NameCheckResult]:
        """
        Check names one at a time, in order.

        A name whose check raises gets an all-unknown record; the batch
        always finishes.

        Args:
            names: Candidate names in generation order
            on_result: Called with each record as soon as it is ready

        Returns:
            One NameCheckResult per name, in input order
        """
        results = []
        for name in names:
            try:
                result = await self.check_name_availability(name)
            except Exception as e:
                logger.error(f"Availability check failed for {name!r}: {e}")
                result = unknown_result(name)
            results.append(result)
            if on_result is not None:
                on_result(result)
        return results

    async def close(self) -> None:
        """Release the trademark browser session."""
        await self.trademark.close_browser()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


async def check_name_availability(
    name: str,
    orchestrator_factory: Callable[[], AvailabilityOrchestrator] = AvailabilityOrchestrator,
) -> NameCheckResult:
    """
    Check a single name with a throwaway orchestrator.

    Convenient for scripts; interactive use should keep one orchestrator
    so the browser session and trademark cache are reused.
    """
    async with orchestrator_factory() as orchestrator:
        return await orchestrator.check_name_availability(name)
