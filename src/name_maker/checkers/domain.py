"""
Domain availability via DNS resolution

A name that resolves is taken. NXDOMAIN means nobody has published
records for it, which we treat as available. Every other failure
(timeout, SERVFAIL, no nameservers, refused) is treated as taken.
Marking a free domain as taken is the safer mistake when someone is
about to buy one; the flip side is that a flaky resolver under-reports
availability.
"""

import asyncio
import logging
import re
from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from ..config import config
from ..models import DomainCheckResult

logger = logging.getLogger(__name__)


# Priority ordered. Only the first config.domains.max_tlds are checked.
TLDS = [
    # Essential
    ".com",
    # Tech & startups
    ".io", ".co", ".ai", ".app", ".dev", ".tech", ".software",
    # Modern & trendy
    ".so", ".to", ".gg", ".xyz", ".me", ".cc",
    # Business & professional
    ".inc", ".company", ".agency", ".studio", ".works",
    # Industry specific
    ".design", ".digital", ".cloud", ".tools", ".systems", ".games",
    # Short & memorable
    ".sh", ".is", ".it", ".im", ".fm", ".tv", ".vc",
]

PRIMARY_TLD = ".com"

# Name endings that double as a TLD ("stud" + ".io")
HACK_ENDINGS = [
    "io", "ly", "er", "al", "es", "is", "it", "in",
    "us", "me", "to", "at", "be", "do", "so",
]


def normalize_base_name(name: str) -> str:
    """Lowercase and strip everything that isn't a-z or 0-9."""
    return re.sub(r"[^a-z0-9]", "", name.lower())


def generate_domain_hacks(name: str) -> list[str]:
    """
    Build domain hacks where the end of the name becomes the TLD.

    Args:
        name: Candidate name

    Returns:
        Domains like 'stud.io' for 'Studio', in HACK_ENDINGS order
    """
    base = normalize_base_name(name)
    hacks = []
    for ending in HACK_ENDINGS:
        if base.endswith(ending) and len(base) > len(ending):
            hacks.append(f"{base[:-len(ending)]}.{ending}")
    return hacks


def build_candidate_domains(
    name: str,
    max_tlds: Optional[int] = None,
    max_hacks: Optional[int] = None,
) -> list[str]:
    """Standard TLD domains first, then domain hacks."""
    max_tlds = config.domains.max_tlds if max_tlds is None else max_tlds
    max_hacks = config.domains.max_hacks if max_hacks is None else max_hacks

    base = normalize_base_name(name)
    if not base:
        return []

    domains = [f"{base}{tld}" for tld in TLDS[:max_tlds]]
    for hack in generate_domain_hacks(name)[:max_hacks]:
        if hack not in domains:
            domains.append(hack)
    return domains


class DomainChecker:
    """
    Resolves candidate domains concurrently.

    All lookups for one name are issued at once; the number in flight is
    bounded by the candidate list, not by a semaphore.
    """

    def __init__(
        self,
        resolver: Optional[dns.asyncresolver.Resolver] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            resolver: Resolver to use (created lazily from system config if None)
            timeout: Per-lookup lifetime in seconds
        """
        self._resolver = resolver
        self.timeout = timeout if timeout is not None else config.timeouts.dns_seconds

    def _get_resolver(self) -> dns.asyncresolver.Resolver:
        """Lazy initialization of the system resolver."""
        if self._resolver is None:
            resolver = dns.asyncresolver.Resolver()
            resolver.timeout = self.timeout
            resolver.lifetime = self.timeout
            self._resolver = resolver
        return self._resolver

    async def is_available(self, domain: str) -> bool:
        """True only when the resolver says the name does not exist."""
        try:
            resolver = self._get_resolver()
            await resolver.resolve(domain, "A", lifetime=self.timeout)
        except dns.resolver.NXDOMAIN:
            return True
        except (dns.resolver.NoAnswer, dns.resolver.NoNameservers, dns.exception.Timeout) as e:
            logger.debug(f"{domain}: {type(e).__name__}, treating as taken")
            return False
        except Exception as e:
            logger.warning(f"DNS lookup failed for {domain}, treating as taken: {e}")
            return False
        return False

    async def check_domains(self, name: str) -> list[DomainCheckResult]:
        """
        Check the standard TLDs and domain hacks for a name.

        Args:
            name: Candidate name

        Returns:
            DomainCheckResult per candidate domain, in candidate order
        """
        domains = build_candidate_domains(name)
        if not domains:
            return []

        availability = await asyncio.gather(*(self.is_available(d) for d in domains))
        results = [
            DomainCheckResult(domain=domain, available=available)
            for domain, available in zip(domains, availability)
        ]
        logger.debug(
            f"{name}: {sum(r.available for r in results)}/{len(results)} domains available"
        )
        return results
