"""
Tests for scoring, ranking and the summary helpers.
"""

from name_maker.models import (
    AppStoreResult,
    DomainCheckResult,
    NameCheckResult,
    TrademarkResult,
    TrademarkStatus,
)
from name_maker.scoring import (
    assess,
    best_candidate,
    fully_available,
    is_fully_available,
    rank_results,
    score_result,
)


def make_result(
    name="Lumina",
    trademark=TrademarkStatus.AVAILABLE,
    ios=None,
    android=None,
    domains=(("lumina.com", True),),
) -> NameCheckResult:
    return NameCheckResult(
        name=name,
        trademark=TrademarkResult(trademark),
        ios_app_store=ios or AppStoreResult.available(),
        google_play_store=android or AppStoreResult.available(),
        domains=tuple(DomainCheckResult(d, a) for d, a in domains),
    )


def nothing_free(name: str) -> NameCheckResult:
    return make_result(
        name,
        trademark=TrademarkStatus.REGISTERED,
        ios=AppStoreResult.taken(name),
        android=AppStoreResult.taken(name),
        domains=((f"{name.lower()}.com", False),),
    )


class TestScoreResult:
    """Tests for the point weights."""

    def test_weights(self):
        """Trademark 3, iOS 2, two free domains: 7 points."""
        result = make_result(
            android=AppStoreResult.taken("Lumina Photo"),
            domains=(("lumina.com", False), ("lumina.io", True), ("lumina.app", True)),
        )

        assert score_result(result) == 7

    def test_everything_free(self):
        result = make_result(domains=(("lumina.com", True), ("lumina.io", True), ("lumina.app", True)))

        assert score_result(result) == 10

    def test_unknown_scores_nothing(self):
        """Unknown answers are not rewarded."""
        result = make_result(
            trademark=TrademarkStatus.UNKNOWN,
            ios=AppStoreResult.unknown(),
            android=AppStoreResult.unknown(),
            domains=(),
        )

        assert score_result(result) == 0

    def test_pending_trademark_scores_only_stores(self):
        assert score_result(make_result(trademark=TrademarkStatus.PENDING, domains=())) == 4


class TestFullyAvailable:
    """Tests for the fully-available rule."""

    def test_all_free(self):
        assert is_fully_available(make_result())

    def test_com_taken(self):
        """Other free domains don't make up for a taken .com."""
        result = make_result(domains=(("lumina.com", False), ("lumina.io", True)))

        assert not is_fully_available(result)

    def test_no_domains(self):
        assert not is_fully_available(make_result(domains=()))

    def test_store_taken(self):
        assert not is_fully_available(make_result(android=AppStoreResult.taken("Lumina")))

    def test_filter_keeps_order(self):
        results = [make_result("Zeta"), nothing_free("Beta"), make_result("Alpha")]

        assert [r.name for r in fully_available(results)] == ["Zeta", "Alpha"]


class TestRanking:
    """Tests for ranking and the best candidate."""

    def test_rank_descending(self):
        low = nothing_free("Low")
        mid = make_result("Mid", trademark=TrademarkStatus.PENDING)
        high = make_result("High")

        assert [r.name for r in rank_results([low, high, mid])] == ["High", "Mid", "Low"]

    def test_ties_keep_input_order(self):
        results = [make_result("First"), make_result("Second"), make_result("Third")]

        assert [r.name for r in rank_results(results)] == ["First", "Second", "Third"]

    def test_rank_does_not_mutate(self):
        """Ranking twice gives the same answer and leaves the input alone."""
        results = [nothing_free("Low"), make_result("High")]
        snapshot = list(results)

        first = rank_results(results)
        second = rank_results(results)

        assert first == second
        assert results == snapshot

    def test_best_candidate(self):
        results = [nothing_free("Low"), make_result("High")]

        assert best_candidate(results).name == "High"

    def test_no_best_when_nothing_scores(self):
        assert best_candidate([nothing_free("Low"), nothing_free("Lower")]) is None

    def test_no_best_when_empty(self):
        assert best_candidate([]) is None


class TestAssess:
    """Tests for the one-line verdict."""

    def test_excellent(self):
        result = make_result(domains=(("lumina.com", True), ("lumina.io", True), ("lumina.app", True)))

        assert assess(result) == "Excellent candidate!"

    def test_good(self):
        result = make_result(android=AppStoreResult.taken("Lumina"), domains=(("lumina.com", True),))

        assert score_result(result) == 6
        assert assess(result) == "Good potential"

    def test_conflicts(self):
        assert assess(nothing_free("Low")) == "May have conflicts"
