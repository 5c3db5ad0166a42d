"""Match orchestration: request validation, pool selection and engine dispatch."""

import time
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from rescue_match.config.models import MatchingConfig
from rescue_match.domain.models import (
    AnimalType,
    ServiceType,
    TrainingSpecialization,
    TrainingStatus,
)
from rescue_match.logging import get_logger
from rescue_match.logging.context import log_context
from rescue_match.matching.engine import WeightedMatchEngine
from rescue_match.matching.exceptions import InternalFailure, InvalidRequest
from rescue_match.matching.models import MatchResult
from rescue_match.matching.priority import PriorityRankEngine
from rescue_match.matching.requests import (
    PriorityMatchRequest,
    ServiceMatchRequest,
    WeightedMatchRequest,
    parse_request,
)
from rescue_match.matching.service import ServiceEligibilityScorer

from .store import ANIMAL_TYPE_KEY, CandidateStore

logger = get_logger(__name__, component="orchestrator")


def adoptable_filter(animal_type: AnimalType) -> Dict[str, Any]:
    """Store filter for animals open to adoption and not reserved."""
    return {ANIMAL_TYPE_KEY: animal_type.value, "adoptable": True, "reserved": False}


def service_eligibility_filter(service_type: ServiceType) -> Dict[str, Any]:
    """Store filter for animals eligible for a service assignment.

    Service animals are held back from adoption, must not be reserved and
    must have finished training. Dogs must be trained for the requested
    service; horses must hold the therapy specialization.
    """
    criteria = {
        ANIMAL_TYPE_KEY: service_type.animal_type.value,
        "adoptable": False,
        "reserved": False,
        "trainingStatus": TrainingStatus.READY.value,
    }
    if service_type is ServiceType.EQUINE_THERAPY:
        criteria["trainingSpecialization"] = TrainingSpecialization.THERAPY.value
    else:
        criteria["serviceType"] = service_type.value
    return criteria


class MatchOrchestrator:
    """
    Entry point for the three matching operations.

    The orchestrator validates the request body, loads the prefiltered
    candidate pool from the store, and hands it to the engine for the
    request kind. It is the only component that talks to the store.
    Validation problems surface as InvalidRequest; anything unexpected is
    logged and re-raised as a generic InternalFailure.
    """

    def __init__(
        self,
        store: CandidateStore,
        matching_config: Optional[MatchingConfig] = None,
        weighted_engine: Optional[WeightedMatchEngine] = None,
        service_scorer: Optional[ServiceEligibilityScorer] = None,
        priority_engine: Optional[PriorityRankEngine] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Entity store supplying candidate pools
            matching_config: Limits configuration (defaults applied if None)
            weighted_engine: Engine for weighted matching
            service_scorer: Scorer for service matching
            priority_engine: Engine for priority-queue matching
        """
        self.store = store
        self.matching_config = matching_config or MatchingConfig()
        self.weighted_engine = weighted_engine or WeightedMatchEngine()
        self.service_scorer = service_scorer or ServiceEligibilityScorer()
        self.priority_engine = priority_engine or PriorityRankEngine()

    def find_best_matches(self, body: Any, limit: Optional[int] = None) -> List[MatchResult]:
        """
        Rank adoptable animals by weighted attribute similarity.

        Args:
            body: Weighted match request body (or WeightedMatchRequest)
            limit: Optional limit overriding the request's limit

        Returns:
            MatchResults with percentage scores, best first

        Raises:
            InvalidRequest: If the request is malformed
            InternalFailure: If loading or scoring fails unexpectedly
        """

        def operation() -> List[MatchResult]:
            request = parse_request(WeightedMatchRequest, body)
            resolved_limit = self._resolve_limit(limit, request.limit)
            pool = self._load_pool(adoptable_filter(request.animal_type))
            if not pool:
                return []
            return self.weighted_engine.find_best_matches(
                pool, request.attributes, request.weights, resolved_limit
            )

        return self._execute("weighted", "Failed to find animal matches", operation)

    def match_for_service(self, body: Any, limit: Optional[int] = None) -> List[MatchResult]:
        """
        Rank eligible service animals for a service request.

        Args:
            body: Service match request body (or ServiceMatchRequest)
            limit: Optional limit overriding the request's limit

        Returns:
            MatchResults with percentage scores, best first

        Raises:
            InvalidRequest: If the request is malformed
            InternalFailure: If loading or scoring fails unexpectedly
        """

        def operation() -> List[MatchResult]:
            request = parse_request(ServiceMatchRequest, body)
            resolved_limit = self._resolve_limit(limit, request.limit)
            pool = self._load_pool(service_eligibility_filter(request.service_type))
            if not pool:
                return []
            return self.service_scorer.match_for_service(
                pool, request.service_type, request.client_needs.as_mapping(), resolved_limit
            )

        return self._execute("service", "Failed to find service animal matches", operation)

    def find_matches_with_priority_queue(
        self, body: Any, limit: Optional[int] = None
    ) -> List[MatchResult]:
        """
        Rank adoptable animals by an explicit attribute priority order.

        Args:
            body: Priority match request body (or PriorityMatchRequest)
            limit: Optional limit overriding the request's limit

        Returns:
            MatchResults whose match_score is the integer priority

        Raises:
            InvalidRequest: If the request is malformed
            InternalFailure: If loading or ranking fails unexpectedly
        """

        def operation() -> List[MatchResult]:
            request = parse_request(PriorityMatchRequest, body)
            resolved_limit = self._resolve_limit(limit, request.limit)
            pool = self._load_pool(adoptable_filter(request.criteria.animal_type))
            if not pool:
                return []
            return self.priority_engine.find_matches_with_priority_queue(
                pool,
                request.criteria.attributes,
                request.priority_attributes,
                resolved_limit,
            )

        return self._execute(
            "priority", "Failed to find matches using priority queue", operation
        )

    def _resolve_limit(self, explicit: Optional[int], from_request: Optional[int]) -> int:
        """Pick the effective limit: explicit argument, then request, then default."""
        if explicit is not None:
            limit = explicit
        elif from_request is not None:
            limit = from_request
        else:
            limit = self.matching_config.default_limit

        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidRequest(
                "Invalid limit",
                errors=[f"limit must be an integer >= 0, got {limit!r}"],
            )
        max_limit = self.matching_config.max_limit
        if max_limit is not None and limit > max_limit:
            raise InvalidRequest(
                "Invalid limit",
                errors=[f"limit must not exceed {max_limit}, got {limit}"],
            )
        return limit

    def _load_pool(self, filter: Dict[str, Any]) -> list:
        pool = list(self.store.find(filter))
        logger.debug(
            f"Loaded candidate pool of {len(pool)}",
            extra={
                "event": "match.pool.loaded",
                "pool_size": len(pool),
                "animal_type": filter.get(ANIMAL_TYPE_KEY),
            },
        )
        return pool

    def _execute(
        self,
        match_kind: str,
        failure_message: str,
        operation: Callable[[], List[MatchResult]],
    ) -> List[MatchResult]:
        """Run a match operation inside a logging scope and classify failures."""
        with log_context(request_id=uuid4().hex, match_kind=match_kind):
            start_time = time.perf_counter()
            try:
                results = operation()
            except InvalidRequest as e:
                logger.warning(
                    f"Rejected {match_kind} match request: {e.message}",
                    extra={
                        "event": f"match.{match_kind}.rejected",
                        "errors": e.errors,
                    },
                )
                raise
            except Exception as e:
                logger.error(
                    f"{failure_message}: {e}",
                    extra={
                        "event": f"match.{match_kind}.failed",
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise InternalFailure(failure_message) from e

            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.info(
                f"Completed {match_kind} match with {len(results)} results",
                extra={
                    "event": f"match.{match_kind}.completed",
                    "result_count": len(results),
                    "duration_ms": duration_ms,
                },
            )
            return results
