"""Ranking and eligibility classification of match results."""

from .models import EligibilityTier, MatchStatistics, RankedMatch
from .ranker import MatchRanker

__all__ = [
    "EligibilityTier",
    "MatchRanker",
    "MatchStatistics",
    "RankedMatch",
]
