"""Candidate matching and ranking engines.

This module provides:
- score_attribute / matches_approximately: per-attribute comparison rules
- WeightedMatchEngine: weighted similarity scoring normalized to 0-100
- ServiceEligibilityScorer: rule-based scoring for service assignments
- PriorityRankEngine: ordinal ranking from an attribute priority order
- Request schemas, exceptions and response helpers shared by the engines
"""

from .engine import WeightedMatchEngine
from .exceptions import InternalFailure, InvalidRequest, MatchingError
from .models import MatchResult, PriorityEntry
from .priority import CandidatePriorityQueue, PriorityRankEngine
from .requests import (
    ClientNeeds,
    PriorityCriteria,
    PriorityMatchRequest,
    ServiceMatchRequest,
    WeightedMatchRequest,
    parse_request,
)
from .scorer import matches_approximately, score_attribute
from .service import ServiceEligibilityScorer
from .utils import build_match_response, build_response_envelope

__all__ = [
    "WeightedMatchEngine",
    "ServiceEligibilityScorer",
    "PriorityRankEngine",
    "CandidatePriorityQueue",
    "MatchResult",
    "PriorityEntry",
    "MatchingError",
    "InvalidRequest",
    "InternalFailure",
    "ClientNeeds",
    "PriorityCriteria",
    "PriorityMatchRequest",
    "ServiceMatchRequest",
    "WeightedMatchRequest",
    "parse_request",
    "score_attribute",
    "matches_approximately",
    "build_match_response",
    "build_response_envelope",
]
