"""Tests for the match orchestrator."""

import logging

import pytest

from rescue_match.config.models import MatchingConfig
from rescue_match.domain.models import AnimalType, ServiceType
from rescue_match.matching.exceptions import InternalFailure, InvalidRequest
from rescue_match.orchestrator import (
    InMemoryCandidateStore,
    MatchOrchestrator,
    adoptable_filter,
    matches_filter,
    service_eligibility_filter,
)
from tests.helpers import FailingStore, RecordingStore, make_dog, make_horse, make_service_dog


@pytest.fixture
def store():
    return RecordingStore(
        [
            make_dog("rex", size="medium", age=3),
            make_dog("bella", size="small", age=6),
            make_dog("max", size="medium", reserved=True),
            make_dog("luna", size="medium", adoptable=False),
            make_service_dog("scout", obedienceLevel=4, specializations=["guide"]),
            make_service_dog("sage", "THERAPY", temperament=5),
            make_service_dog("rookie", trainingStatus="In Training"),
            make_horse("clover"),
            make_horse("dusty", trainingSpecialization="Riding"),
        ]
    )


@pytest.fixture
def orchestrator(store):
    return MatchOrchestrator(store)


class TestFilters:
    """Test the store prefilters."""

    def test_adoptable_filter(self):
        assert adoptable_filter(AnimalType.DOG) == {
            "animalType": "dog",
            "adoptable": True,
            "reserved": False,
        }

    def test_service_filter_for_dogs(self):
        assert service_eligibility_filter(ServiceType.THERAPY) == {
            "animalType": "dog",
            "adoptable": False,
            "reserved": False,
            "trainingStatus": "Ready",
            "serviceType": "THERAPY",
        }

    def test_service_filter_for_horses(self):
        assert service_eligibility_filter(ServiceType.EQUINE_THERAPY) == {
            "animalType": "horse",
            "adoptable": False,
            "reserved": False,
            "trainingStatus": "Ready",
            "trainingSpecialization": "Therapy",
        }

    def test_matches_filter_requires_present_attribute(self):
        candidate = make_dog("rex")
        assert matches_filter(candidate, {"animalType": "dog", "adoptable": True})
        assert not matches_filter(candidate, {"trainingStatus": "Ready"})
        assert not matches_filter(candidate, {"animalType": "horse"})

    def test_matches_filter_strict_equality(self):
        candidate = make_dog("rex", reserved=0)
        assert not matches_filter(candidate, {"reserved": False})


class TestFindBestMatches:
    """Test weighted matching through the orchestrator."""

    def test_only_adoptable_unreserved_candidates(self, orchestrator, store):
        results = orchestrator.find_best_matches(
            {"animalType": "dog", "attributes": {"size": "medium"}}
        )
        assert [r.candidate.id for r in results] == ["rex", "bella"]
        assert store.filters == [adoptable_filter(AnimalType.DOG)]

    def test_explicit_limit_overrides_request(self, orchestrator):
        results = orchestrator.find_best_matches(
            {"animalType": "dog", "attributes": {"size": "medium"}, "limit": 2}, limit=1
        )
        assert len(results) == 1

    def test_request_limit_used(self, orchestrator):
        results = orchestrator.find_best_matches(
            {"animalType": "dog", "attributes": {"size": "medium"}, "limit": 0}
        )
        assert results == []

    def test_configured_default_limit(self, store):
        orchestrator = MatchOrchestrator(store, matching_config=MatchingConfig(default_limit=1))
        results = orchestrator.find_best_matches(
            {"animalType": "dog", "attributes": {"size": "medium"}}
        )
        assert len(results) == 1

    def test_limit_above_configured_max_rejected(self, store):
        orchestrator = MatchOrchestrator(store, matching_config=MatchingConfig(max_limit=10))
        with pytest.raises(InvalidRequest):
            orchestrator.find_best_matches(
                {"animalType": "dog", "attributes": {"size": "medium"}}, limit=11
            )

    @pytest.mark.parametrize("limit", [-1, True, "3"])
    def test_invalid_explicit_limit_rejected(self, orchestrator, limit):
        with pytest.raises(InvalidRequest):
            orchestrator.find_best_matches(
                {"animalType": "dog", "attributes": {"size": "medium"}}, limit=limit
            )

    def test_empty_pool_returns_empty(self, orchestrator):
        assert orchestrator.find_best_matches({"animalType": "monkey", "attributes": {"a": 1}}) == []

    def test_invalid_request_not_sent_to_store(self, orchestrator, store):
        with pytest.raises(InvalidRequest):
            orchestrator.find_best_matches({"animalType": "dragon", "attributes": {"a": 1}})
        assert store.filters == []


class TestMatchForService:
    """Test service matching through the orchestrator."""

    def test_service_pool_prefiltered(self, orchestrator):
        results = orchestrator.match_for_service(
            {"serviceType": "SERVICE", "clientNeeds": {"specializations": ["guide"]}}
        )
        assert [r.candidate.id for r in results] == ["scout"]
        assert results[0].match_score == 91

    def test_therapy(self, orchestrator):
        results = orchestrator.match_for_service({"serviceType": "THERAPY"})
        assert [(r.candidate.id, r.match_score) for r in results] == [("sage", 95)]

    def test_equine_therapy_rider_weight(self, orchestrator):
        results = orchestrator.match_for_service(
            {"serviceType": "EQUINE_THERAPY", "clientNeeds": {"riderWeight": 200}}
        )
        assert [(r.candidate.id, r.match_score) for r in results] == [("clover", 0)]

    def test_zero_rider_weight_skips_weight_check(self):
        orchestrator = MatchOrchestrator(
            InMemoryCandidateStore([make_horse("clover", maxRiderWeight=150)])
        )
        results = orchestrator.match_for_service(
            {"serviceType": "EQUINE_THERAPY", "clientNeeds": {"riderWeight": 0}}
        )
        assert [(r.candidate.id, r.match_score) for r in results] == [("clover", 95)]

    def test_search_with_no_candidates(self, orchestrator):
        assert orchestrator.match_for_service({"serviceType": "SEARCH"}) == []


class TestFindMatchesWithPriorityQueue:
    def test_priority_ranking(self, orchestrator):
        results = orchestrator.find_matches_with_priority_queue(
            {
                "criteria": {"animalType": "dog", "attributes": {"age": 5, "size": "medium"}},
                "priorityAttributes": ["age", "size"],
            }
        )
        assert [(r.candidate.id, r.match_score) for r in results] == [("bella", 2), ("rex", 1)]

    def test_missing_priority_attributes(self, orchestrator):
        with pytest.raises(InvalidRequest):
            orchestrator.find_matches_with_priority_queue(
                {"criteria": {"animalType": "dog", "attributes": {"age": 5}}}
            )


class TestFailureHandling:
    """Test error classification and logging."""

    def test_store_failure_becomes_internal_failure(self, caplog):
        orchestrator = MatchOrchestrator(FailingStore())
        with caplog.at_level(logging.ERROR):
            with pytest.raises(InternalFailure) as exc_info:
                orchestrator.find_best_matches({"animalType": "dog", "attributes": {"a": 1}})

        assert exc_info.value.message == "Failed to find animal matches"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "connection reset" not in str(exc_info.value)
        assert any(record.levelno == logging.ERROR for record in caplog.records)

    @pytest.mark.parametrize(
        "method,body,message",
        [
            ("match_for_service", {"serviceType": "SERVICE"}, "Failed to find service animal matches"),
            (
                "find_matches_with_priority_queue",
                {"criteria": {"animalType": "dog", "attributes": {"a": 1}}, "priorityAttributes": ["a"]},
                "Failed to find matches using priority queue",
            ),
        ],
    )
    def test_failure_messages_per_operation(self, method, body, message):
        orchestrator = MatchOrchestrator(FailingStore())
        with pytest.raises(InternalFailure) as exc_info:
            getattr(orchestrator, method)(body)
        assert exc_info.value.message == message

    def test_completion_logged_with_request_context(self, orchestrator, caplog):
        with caplog.at_level(logging.INFO, logger="rescue_match.orchestrator.service"):
            orchestrator.find_best_matches({"animalType": "dog", "attributes": {"size": "small"}})

        completed = [r for r in caplog.records if getattr(r, "event", None) == "match.weighted.completed"]
        assert len(completed) == 1
        assert completed[0].result_count == 2
        assert completed[0].component == "orchestrator"

    def test_rejection_logged_as_warning(self, orchestrator, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(InvalidRequest):
                orchestrator.match_for_service({"serviceType": "NOPE"})
        assert any(
            getattr(r, "event", None) == "match.service.rejected" for r in caplog.records
        )


class TestInMemoryCandidateStore:
    def test_find_by_id_and_save(self):
        store = InMemoryCandidateStore()
        saved = store.save(make_dog("rex"))
        assert store.find_by_id("rex") is saved
        assert store.find_by_id("missing") is None
        assert len(store) == 1

    def test_from_records(self):
        store = InMemoryCandidateStore.from_records(
            [{"id": "a", "animalType": "bird"}, {"id": "b", "animalType": "dog"}]
        )
        assert [c.id for c in store.find({"animalType": "bird"})] == ["a"]
