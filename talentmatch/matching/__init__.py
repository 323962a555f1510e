"""Keyword match scoring.

This module provides:
- MatchScorer: computes a MatchResult for one (employer, candidate) pair
- MatchResult / MatchedKeyword: derived, non-persistent scoring results
- Utility functions for building output payloads and score rationales
"""

from .engine import MatchScorer, round_half_up
from .models import MatchedKeyword, MatchResult
from .utils import build_keyword_payload, build_match_payload, build_rationale_dict

__all__ = [
    "MatchScorer",
    "MatchResult",
    "MatchedKeyword",
    "round_half_up",
    "build_keyword_payload",
    "build_match_payload",
    "build_rationale_dict",
]
