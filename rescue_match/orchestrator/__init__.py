"""Match orchestration and the entity store contract."""

from .service import MatchOrchestrator, adoptable_filter, service_eligibility_filter
from .store import CandidateStore, InMemoryCandidateStore, matches_filter

__all__ = [
    "MatchOrchestrator",
    "adoptable_filter",
    "service_eligibility_filter",
    "CandidateStore",
    "InMemoryCandidateStore",
    "matches_filter",
]
