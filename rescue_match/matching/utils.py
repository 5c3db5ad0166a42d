"""Utility functions for preparing match results for callers.

This module turns ranked MatchResults into the JSON-like response shapes
returned by the matching operations.
"""

from typing import Any, Dict, List, Sequence

from .models import MatchResult


def build_match_response(results: Sequence[MatchResult]) -> List[Dict[str, Any]]:
    """Serialize ranked results.

    Args:
        results: MatchResults in ranked order

    Returns:
        List of ``{"animal": {...}, "matchScore": number}`` dicts, order preserved
    """
    return [result.to_dict() for result in results]


def build_response_envelope(results: Sequence[MatchResult]) -> Dict[str, Any]:
    """Wrap ranked results in the success envelope.

    Args:
        results: MatchResults in ranked order

    Returns:
        Dict with keys:
        - status: Always "success"
        - results: Number of matches returned
        - data: Serialized matches (see build_match_response)
    """
    return {
        "status": "success",
        "results": len(results),
        "data": build_match_response(results),
    }
