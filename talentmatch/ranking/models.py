"""Data models for ranked match output."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable

from talentmatch.matching.models import MatchResult
from talentmatch.matching.engine import round_half_up
from talentmatch.matching.utils import build_match_payload


class EligibilityTier(str, Enum):
    """Display tier of a ranked match, highest first."""

    FAST_TRACK = "fast-track"
    QUALIFIED = "qualified"
    PARTIAL = "partial"
    NONE = "none"


@dataclass(frozen=True)
class RankedMatch:
    """A scored counterparty with its position and eligibility tier."""

    rank: int
    result: MatchResult
    tier: EligibilityTier

    @property
    def counterparty_id(self) -> str:
        return self.result.counterparty_id

    @property
    def match_rate(self) -> int:
        return self.result.match_rate

    @property
    def meets_all_required(self) -> bool:
        return self.result.meets_all_required

    @property
    def is_fast_track(self) -> bool:
        return self.tier is EligibilityTier.FAST_TRACK

    def to_payload(self) -> Dict[str, Any]:
        payload = build_match_payload(self.result, eligibility_tier=self.tier.value)
        payload["rank"] = self.rank
        return payload


@dataclass(frozen=True)
class MatchStatistics:
    """Summary figures shown above a ranked list.

    Attributes:
        total: Number of ranked matches
        high_matches: Matches at or above the high threshold
        good_matches: Matches at or above the good threshold
        fast_track: Matches in the fast-track tier
        qualified: Matches meeting every required keyword
        average_rate: Mean match rate, rounded (0 for an empty list)
    """

    total: int = 0
    high_matches: int = 0
    good_matches: int = 0
    fast_track: int = 0
    qualified: int = 0
    average_rate: int = 0

    @classmethod
    def from_ranked(
        cls,
        ranked: Iterable[RankedMatch],
        high_threshold: int = 80,
        good_threshold: int = 50,
    ) -> "MatchStatistics":
        """
        Summarize a ranked list.

        Args:
            ranked: Ranked matches after view filtering
            high_threshold: Minimum rate counted as a high match
            good_threshold: Minimum rate counted as a good match

        Returns:
            MatchStatistics; all zeros for an empty list
        """
        ranked = list(ranked)
        if not ranked:
            return cls()

        rates = [m.match_rate for m in ranked]
        return cls(
            total=len(ranked),
            high_matches=sum(1 for r in rates if r >= high_threshold),
            good_matches=sum(1 for r in rates if r >= good_threshold),
            fast_track=sum(1 for m in ranked if m.is_fast_track),
            qualified=sum(1 for m in ranked if m.meets_all_required),
            average_rate=round_half_up(sum(rates) / len(rates)),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "high_matches": self.high_matches,
            "good_matches": self.good_matches,
            "fast_track": self.fast_track,
            "qualified": self.qualified,
            "average_rate": self.average_rate,
        }
