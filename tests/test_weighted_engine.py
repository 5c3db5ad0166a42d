"""Tests for the weighted matching engine."""

import pytest

from rescue_match.matching.engine import WeightedMatchEngine
from rescue_match.matching.exceptions import InvalidRequest
from tests.helpers import make_dog


@pytest.fixture
def engine():
    return WeightedMatchEngine()


@pytest.fixture
def pool():
    return [
        make_dog("rex", age=3, size="medium", goodWithKids=True),
        make_dog("bella", age=6, size="small", goodWithKids=True),
        make_dog("max", age=2, size="large", goodWithKids=False),
    ]


class TestScoreCandidate:
    """Test normalized scoring of a single candidate."""

    def test_exact_match_scores_100(self, engine):
        candidate = make_dog("rex", age=3, size="medium")
        result = engine.score_candidate(candidate, {"age": 3, "size": "medium"}, {})
        assert result.match_score == 100.0
        assert result.candidate is candidate

    def test_partial_numeric_match(self, engine):
        candidate = make_dog("bella", age=5, size="medium")
        result = engine.score_candidate(candidate, {"age": 3, "size": "medium"}, {})
        assert result.match_score == 90.0

    def test_weights_scale_contributions(self, engine):
        candidate = make_dog("bella", age=5, size="large")
        result = engine.score_candidate(candidate, {"age": 3, "size": "medium"}, {"age": 3})
        # (0.8 * 3 + 0) / (3 + 1)
        assert result.match_score == 60.0

    def test_zero_weight_defaults_to_one(self, engine):
        candidate = make_dog("bella", age=3, size="large")
        result = engine.score_candidate(candidate, {"age": 3, "size": "medium"}, {"age": 0})
        assert result.match_score == 50.0

    def test_absent_attributes_excluded_from_maximum(self, engine):
        """Only attributes the candidate has count toward the maximum."""
        candidate = make_dog("rex", age=3)
        result = engine.score_candidate(candidate, {"age": 3, "size": "medium"}, {})
        assert result.match_score == 100.0

    def test_no_comparable_attributes_scores_zero(self, engine):
        candidate = make_dog("rex")
        result = engine.score_candidate(candidate, {"color": "brown"}, {})
        assert result.match_score == 0.0

    def test_score_rounded_to_two_decimals(self, engine):
        candidate = make_dog("rex", size="medium", breed="Beagle", color="black")
        criteria = {"size": "medium", "breed": "Labrador", "color": "brown"}
        result = engine.score_candidate(candidate, criteria, {})
        assert result.match_score == 33.33

    def test_large_numeric_gap_gives_negative_score(self, engine):
        """Numeric similarity is unclamped, so a gap over 10 goes below zero."""
        candidate = make_dog("rex", age=25)
        result = engine.score_candidate(candidate, {"age": 3}, {})
        assert result.match_score == -120.0

    def test_weights_not_mutated(self, engine):
        weights = {"age": 2}
        engine.score_candidate(make_dog("rex", age=3, size="small"), {"age": 3, "size": "small"}, weights)
        assert weights == {"age": 2}


class TestFindBestMatches:
    """Test ranking, ordering and truncation."""

    def test_ranked_descending(self, engine, pool):
        results = engine.find_best_matches(pool, {"size": "medium", "age": 3, "goodWithKids": True})
        assert [r.candidate.id for r in results] == ["rex", "bella", "max"]
        scores = [r.match_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_scores_within_percentage_range(self, engine, pool):
        results = engine.find_best_matches(pool, {"size": "medium", "goodWithKids": True})
        assert all(0 <= r.match_score <= 100 for r in results)

    def test_equal_scores_keep_pool_order(self, engine):
        pool = [
            make_dog("first", size="small"),
            make_dog("second", size="medium"),
            make_dog("third", size="medium"),
            make_dog("fourth", size="small"),
        ]
        results = engine.find_best_matches(pool, {"size": "medium"})
        assert [r.candidate.id for r in results] == ["second", "third", "first", "fourth"]

    def test_default_limit_is_five(self, engine):
        pool = [make_dog(f"dog-{i}", age=i) for i in range(8)]
        results = engine.find_best_matches(pool, {"age": 0})
        assert len(results) == 5

    def test_limit_truncates(self, engine, pool):
        results = engine.find_best_matches(pool, {"size": "medium"}, limit=1)
        assert [r.candidate.id for r in results] == ["rex"]

    def test_limit_zero_returns_empty(self, engine, pool):
        assert engine.find_best_matches(pool, {"size": "medium"}, limit=0) == []

    def test_limit_larger_than_pool_returns_all(self, engine, pool):
        results = engine.find_best_matches(pool, {"size": "medium"}, limit=50)
        assert len(results) == len(pool)

    def test_empty_pool_returns_empty(self, engine):
        assert engine.find_best_matches([], {"size": "medium"}) == []

    def test_empty_criteria_rejected(self, engine, pool):
        with pytest.raises(InvalidRequest):
            engine.find_best_matches(pool, {})

    def test_repeated_calls_identical(self, engine, pool):
        criteria = {"size": "medium", "age": 4}
        first = engine.find_best_matches(pool, criteria, {"age": 2})
        second = engine.find_best_matches(pool, criteria, {"age": 2})
        assert first == second
