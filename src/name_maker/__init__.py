"""
name-maker: AI product name generator with availability checking.

Checks each candidate name against the trademark register, the iOS App
Store, Google Play and a set of domains.
"""

__version__ = "1.0.0"

from .config import config
from .models import (
    AppStoreResult,
    AvailabilityStatus,
    CandidateName,
    DomainCheckResult,
    NameBrief,
    NameCheckResult,
    TrademarkResult,
    TrademarkStatus,
)
from .orchestrator import AvailabilityOrchestrator, check_name_availability, unknown_result
from .scoring import is_fully_available, rank_results, score_result

__all__ = [
    # Config
    "config",
    # Models
    "AppStoreResult",
    "AvailabilityStatus",
    "CandidateName",
    "DomainCheckResult",
    "NameBrief",
    "NameCheckResult",
    "TrademarkResult",
    "TrademarkStatus",
    # Orchestrator
    "AvailabilityOrchestrator",
    "check_name_availability",
    "unknown_result",
    # Scoring
    "score_result",
    "is_fully_available",
    "rank_results",
]
