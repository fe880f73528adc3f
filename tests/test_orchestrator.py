"""
Tests for the availability orchestrator.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from name_maker.models import (
    AppStoreResult,
    AvailabilityStatus,
    DomainCheckResult,
    NameCheckResult,
    TrademarkResult,
    TrademarkStatus,
)
from name_maker.orchestrator import (
    AvailabilityOrchestrator,
    check_name_availability,
    unknown_result,
)


def make_orchestrator(
    trademark=None,
    ios=None,
    android=None,
    domains=None,
) -> AvailabilityOrchestrator:
    """Orchestrator with fake checkers that all report available."""
    trademark_checker = MagicMock()
    trademark_checker.check_trademark = AsyncMock(
        return_value=trademark or TrademarkResult(TrademarkStatus.AVAILABLE)
    )
    trademark_checker.close_browser = AsyncMock()

    ios_checker = MagicMock()
    ios_checker.check = AsyncMock(return_value=ios or AppStoreResult.available())

    android_checker = MagicMock()
    android_checker.check = AsyncMock(return_value=android or AppStoreResult.available())

    domain_checker = MagicMock()
    domain_checker.check_domains = AsyncMock(
        return_value=domains if domains is not None else [DomainCheckResult("lumina.com", True)]
    )

    return AvailabilityOrchestrator(
        trademark=trademark_checker,
        ios=ios_checker,
        android=android_checker,
        domains=domain_checker,
    )


class TestCheckNameAvailability:
    """Tests for checking one name."""

    @pytest.mark.asyncio
    async def test_joins_all_sources(self):
        """Every source's answer ends up in the record."""
        taken = AppStoreResult.taken("Lumina Photo", "https://apps.apple.com/app/id1")
        orchestrator = make_orchestrator(
            ios=taken,
            domains=[DomainCheckResult("lumina.com", False), DomainCheckResult("lumina.io", True)],
        )

        result = await orchestrator.check_name_availability("Lumina")

        assert result.name == "Lumina"
        assert result.trademark.status == TrademarkStatus.AVAILABLE
        assert result.ios_app_store == taken
        assert result.google_play_store.status == AvailabilityStatus.AVAILABLE
        assert result.domains == (
            DomainCheckResult("lumina.com", False),
            DomainCheckResult("lumina.io", True),
        )
        orchestrator.trademark.check_trademark.assert_awaited_once_with("Lumina")
        orchestrator.domains.check_domains.assert_awaited_once_with("Lumina")

    @pytest.mark.asyncio
    async def test_every_field_present_when_checkers_raise(self):
        """Escaped exceptions become safe defaults, never a missing field."""
        orchestrator = make_orchestrator()
        orchestrator.trademark.check_trademark.side_effect = RuntimeError("browser gone")
        orchestrator.ios.check.side_effect = ValueError("bad json")
        orchestrator.android.check.side_effect = TimeoutError()
        orchestrator.domains.check_domains.side_effect = OSError("no network")

        result = await orchestrator.check_name_availability("Lumina")

        assert result.trademark.status == TrademarkStatus.UNKNOWN
        assert result.ios_app_store.status == AvailabilityStatus.UNKNOWN
        assert result.google_play_store.status == AvailabilityStatus.UNKNOWN
        assert result.domains == ()

    @pytest.mark.asyncio
    async def test_one_failure_keeps_other_answers(self):
        orchestrator = make_orchestrator()
        orchestrator.android.check.side_effect = RuntimeError("scrape failed")

        result = await orchestrator.check_name_availability("Lumina")

        assert result.google_play_store.status == AvailabilityStatus.UNKNOWN
        assert result.ios_app_store.status == AvailabilityStatus.AVAILABLE
        assert result.trademark.status == TrademarkStatus.AVAILABLE
        assert result.available_domains == ["lumina.com"]


class TestCheckNames:
    """Tests for batch checking."""

    @pytest.mark.asyncio
    async def test_order_preserved(self):
        orchestrator = make_orchestrator()
        names = ["Zeta", "Alpha", "Mira"]

        results = await orchestrator.check_names(names)

        assert [r.name for r in results] == names

    @pytest.mark.asyncio
    async def test_on_result_called_per_name(self):
        """Each record is reported as soon as it is ready."""
        orchestrator = make_orchestrator()
        seen = []

        results = await orchestrator.check_names(["Zeta", "Alpha"], on_result=seen.append)

        assert seen == results

    @pytest.mark.asyncio
    async def test_failed_name_gets_unknown_record(self):
        """A name whose whole check raises still gets a record."""
        orchestrator = make_orchestrator()
        original = orchestrator.check_name_availability

        async def flaky(name):
            if name == "Broken":
                raise RuntimeError("boom")
            return await original(name)

        orchestrator.check_name_availability = flaky

        results = await orchestrator.check_names(["Good", "Broken", "Fine"])

        assert [r.name for r in results] == ["Good", "Broken", "Fine"]
        assert results[1] == unknown_result("Broken")
        assert results[2].trademark.status == TrademarkStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        orchestrator = make_orchestrator()

        assert await orchestrator.check_names([]) == []


class TestLifecycle:
    """Tests for browser cleanup."""

    @pytest.mark.asyncio
    async def test_close_releases_browser(self):
        orchestrator = make_orchestrator()

        await orchestrator.close()

        orchestrator.trademark.close_browser.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        orchestrator = make_orchestrator()

        async with orchestrator as active:
            await active.check_name_availability("Lumina")

        orchestrator.trademark.close_browser.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_module_level_check(self):
        """The convenience function closes its orchestrator afterwards."""
        orchestrator = make_orchestrator()

        result = await check_name_availability("Lumina", orchestrator_factory=lambda: orchestrator)

        assert isinstance(result, NameCheckResult)
        orchestrator.trademark.close_browser.assert_awaited_once()


class TestUnknownResult:
    """Tests for the all-unknown fallback record."""

    def test_all_unknown(self):
        result = unknown_result("Lumina")

        assert result.trademark.status == TrademarkStatus.UNKNOWN
        assert result.ios_app_store.status == AvailabilityStatus.UNKNOWN
        assert result.google_play_store.status == AvailabilityStatus.UNKNOWN
        assert result.domains == ()
