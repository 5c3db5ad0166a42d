"""Entity store contract consumed by the orchestrator.

The orchestrator only needs read access to candidate pools, but the store
contract mirrors the generic CRUD store (find, find_by_id, save) so the same
object can back both the matching core and data loading.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from rescue_match.domain.attributes import values_equal
from rescue_match.domain.models import AnimalType, Candidate

logger = logging.getLogger(__name__)

# Filter key selecting the animal subtype rather than an attribute
ANIMAL_TYPE_KEY = "animalType"


@runtime_checkable
class CandidateStore(Protocol):
    """Generic entity store offering find, find_by_id and save."""

    def find(self, filter: Mapping[str, Any]) -> List[Candidate]:
        """Return every candidate whose fields equal all filter values."""
        ...

    def find_by_id(self, candidate_id: str) -> Optional[Candidate]:
        ...

    def save(self, candidate: Candidate) -> Candidate:
        ...


def matches_filter(candidate: Candidate, filter: Mapping[str, Any]) -> bool:
    """Check a candidate against an equality filter.

    The ``animalType`` key compares the candidate's subtype; every other key
    must be present on the candidate with an equal value.
    """
    for key, expected in filter.items():
        if key == ANIMAL_TYPE_KEY:
            if candidate.animal_type is not AnimalType.from_token(expected):
                return False
            continue
        if not candidate.has_attribute(key):
            return False
        if not values_equal(candidate.get(key), expected):
            return False
    return True


class InMemoryCandidateStore:
    """CandidateStore backed by a list, preserving insertion order."""

    def __init__(self, candidates: Optional[Iterable[Candidate]] = None):
        self._candidates: Dict[str, Candidate] = {}
        for candidate in candidates or []:
            self.save(candidate)

    def find(self, filter: Mapping[str, Any]) -> List[Candidate]:
        return [
            candidate
            for candidate in self._candidates.values()
            if matches_filter(candidate, filter)
        ]

    def find_by_id(self, candidate_id: str) -> Optional[Candidate]:
        return self._candidates.get(candidate_id)

    def save(self, candidate: Candidate) -> Candidate:
        self._candidates[candidate.id] = candidate
        logger.debug(
            f"Stored candidate {candidate.id}",
            extra={"candidate_id": candidate.id, "animal_type": candidate.animal_type.value},
        )
        return candidate

    def __len__(self) -> int:
        return len(self._candidates)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "InMemoryCandidateStore":
        """Build a store from flat animal records (see Candidate.from_dict)."""
        return cls(Candidate.from_dict(dict(record)) for record in records)
