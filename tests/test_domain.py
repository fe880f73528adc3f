"""
Tests for the DNS domain checker.
"""

import pytest
import dns.exception
import dns.resolver

from name_maker.checkers.domain import (
    DomainChecker,
    TLDS,
    build_candidate_domains,
    generate_domain_hacks,
    normalize_base_name,
)


class FakeResolver:
    """Resolver whose outcome per domain is scripted."""

    def __init__(self, outcomes: dict, default=None):
        self.outcomes = outcomes
        self.default = default
        self.queried = []

    async def resolve(self, domain, rdtype="A", lifetime=None):
        self.queried.append(domain)
        outcome = self.outcomes.get(domain, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class TestCandidateDomains:
    """Tests for candidate domain building."""

    def test_normalize_strips_non_alphanumerics(self):
        """Spaces, punctuation and case are removed."""
        assert normalize_base_name("Swift Hub!") == "swifthub"
        assert normalize_base_name("Café-9") == "caf9"

    def test_standard_tlds_first(self):
        """The first 12 TLDs in priority order, .com first."""
        domains = build_candidate_domains("Lumina", max_hacks=0)

        assert len(domains) == 12
        assert domains[0] == "lumina.com"
        assert domains == [f"lumina{tld}" for tld in TLDS[:12]]

    def test_domain_hacks_appended(self):
        """Names ending in a hackable suffix get hack domains after the TLDs."""
        domains = build_candidate_domains("Studio")

        assert domains[:12] == [f"studio{tld}" for tld in TLDS[:12]]
        assert "stud.io" in domains[12:]

    def test_hacks_capped(self):
        """max_hacks=0 leaves only the standard TLDs."""
        assert generate_domain_hacks("Friendly") == ["friend.ly"]

        domains = build_candidate_domains("Friendly", max_tlds=1, max_hacks=0)
        assert domains == ["friendly.com"]

        domains = build_candidate_domains("Friendly", max_tlds=1)
        assert domains == ["friendly.com", "friend.ly"]

    def test_hack_needs_a_prefix(self):
        """A name that is only the ending produces no hack."""
        assert generate_domain_hacks("io") == []

    def test_empty_name(self):
        """Nothing to check for a name with no letters or digits."""
        assert build_candidate_domains("!!!") == []


class TestDomainChecker:
    """Tests for resolution outcomes."""

    @pytest.mark.asyncio
    async def test_resolution_success_is_taken(self):
        """A name that resolves is taken."""
        checker = DomainChecker(resolver=FakeResolver({}, default=["93.184.216.34"]))
        assert await checker.is_available("example.com") is False

    @pytest.mark.asyncio
    async def test_nxdomain_is_available(self):
        """NXDOMAIN means available."""
        checker = DomainChecker(resolver=FakeResolver({}, default=dns.resolver.NXDOMAIN()))
        assert await checker.is_available("no-such-name-xyz.com") is True

    @pytest.mark.asyncio
    async def test_timeout_is_taken(self):
        """Timeouts are treated as taken."""
        checker = DomainChecker(resolver=FakeResolver({}, default=dns.exception.Timeout()))
        assert await checker.is_available("slow.com") is False

    @pytest.mark.asyncio
    async def test_server_failure_is_taken(self):
        """SERVFAIL / no nameservers is treated as taken."""
        checker = DomainChecker(resolver=FakeResolver({}, default=dns.resolver.NoNameservers()))
        assert await checker.is_available("broken.io") is False

    @pytest.mark.asyncio
    async def test_unexpected_error_is_taken(self):
        """Any other error is treated as taken rather than raised."""
        checker = DomainChecker(resolver=FakeResolver({}, default=RuntimeError("socket closed")))
        assert await checker.is_available("weird.dev") is False

    @pytest.mark.asyncio
    async def test_check_domains_keeps_candidate_order(self):
        """Results line up with the candidate list."""
        resolver = FakeResolver(
            {"lumina.com": ["1.2.3.4"], "lumina.io": dns.resolver.NXDOMAIN()},
            default=dns.resolver.NXDOMAIN(),
        )
        checker = DomainChecker(resolver=resolver)

        results = await checker.check_domains("Lumina")

        assert [r.domain for r in results] == build_candidate_domains("Lumina")
        assert results[0].domain == "lumina.com"
        assert results[0].available is False
        assert results[1].domain == "lumina.io"
        assert results[1].available is True
        assert sorted(resolver.queried) == sorted(r.domain for r in results)

    @pytest.mark.asyncio
    async def test_check_domains_empty_name(self):
        """No lookups for an empty base name."""
        resolver = FakeResolver({})
        checker = DomainChecker(resolver=resolver)

        assert await checker.check_domains("  ") == []
        assert resolver.queried == []
