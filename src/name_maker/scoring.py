"""
Scoring and ranking of availability results

Pure functions over NameCheckResult values. Nothing here mutates its
input, so scoring the same results twice always gives the same answer.
"""

from typing import Iterable, Optional

from .checkers.domain import PRIMARY_TLD
from .models import AvailabilityStatus, NameCheckResult, TrademarkStatus

TRADEMARK_POINTS = 3
APP_STORE_POINTS = 2
DOMAIN_POINTS = 1

EXCELLENT_THRESHOLD = 10
GOOD_THRESHOLD = 6


def score_result(result: NameCheckResult) -> int:
    """
    Desirability score for one name.

    3 for an available trademark, 2 per available app store, 1 per
    available domain.
    """
    score = 0
    if result.trademark.status == TrademarkStatus.AVAILABLE:
        score += TRADEMARK_POINTS
    if result.ios_app_store.status == AvailabilityStatus.AVAILABLE:
        score += APP_STORE_POINTS
    if result.google_play_store.status == AvailabilityStatus.AVAILABLE:
        score += APP_STORE_POINTS
    score += DOMAIN_POINTS * sum(1 for d in result.domains if d.available)
    return score


def is_fully_available(result: NameCheckResult) -> bool:
    """Trademark free, both stores free and the .com domain free."""
    return (
        result.trademark.status == TrademarkStatus.AVAILABLE
        and result.ios_app_store.status == AvailabilityStatus.AVAILABLE
        and result.google_play_store.status == AvailabilityStatus.AVAILABLE
        and any(d.available and d.domain.endswith(PRIMARY_TLD) for d in result.domains)
    )


def rank_results(results: Iterable[NameCheckResult]) -> list[NameCheckResult]:
    """Highest score first; equal scores keep their original order."""
    return sorted(results, key=score_result, reverse=True)


def fully_available(results: Iterable[NameCheckResult]) -> list[NameCheckResult]:
    """Fully available names, in original order."""
    return [r for r in results if is_fully_available(r)]


def best_candidate(results: Iterable[NameCheckResult]) -> Optional[NameCheckResult]:
    """The top-ranked name, or None if nothing scored above zero."""
    ranked = rank_results(results)
    if not ranked or score_result(ranked[0]) <= 0:
        return None
    return ranked[0]


def assess(result: NameCheckResult) -> str:
    """One-line verdict for a single name."""
    score = score_result(result)
    if score >= EXCELLENT_THRESHOLD:
        return "Excellent candidate!"
    if score >= GOOD_THRESHOLD:
        return "Good potential"
    return "May have conflicts"
