"""Data models for the match scorer.

Results are derived values: they are recomputed on every match run and never
persisted.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from talentmatch.domain.models import PartyProfile, Priority


@dataclass(frozen=True)
class MatchedKeyword:
    """An employer keyword with its tier, as held or lacked by a candidate."""

    keyword_id: int
    tier: Priority
    text: Optional[str] = None
    category: Optional[str] = None


@dataclass
class MatchResult:
    """Score of one (job seeker, employer) pair.

    Attributes:
        counterparty_id: Party the viewer is being matched against
        match_rate: Rounded score in [0, 100]
        meets_all_required: True if the employer has no required keywords or
            the candidate holds all of them
        raw_rate: Unrounded score
        matched_required_ids: Required keywords the candidate holds
        missing_required_ids: Required keywords the candidate lacks
        matched_preferred_ids: Preferred keywords the candidate holds
        total_required_count: Number of employer required keywords
        total_preferred_count: Number of employer preferred keywords
        matched_keywords: Matched keywords, required tier first
        missing_keywords: Required keywords the candidate lacks, described
        profile: Counterparty profile, passed through for display
    """

    counterparty_id: str
    match_rate: int
    meets_all_required: bool
    raw_rate: float = 0.0
    matched_required_ids: FrozenSet[int] = field(default_factory=frozenset)
    missing_required_ids: FrozenSet[int] = field(default_factory=frozenset)
    matched_preferred_ids: FrozenSet[int] = field(default_factory=frozenset)
    total_required_count: int = 0
    total_preferred_count: int = 0
    matched_keywords: List[MatchedKeyword] = field(default_factory=list)
    missing_keywords: List[MatchedKeyword] = field(default_factory=list)
    profile: Optional[PartyProfile] = None

    @property
    def matched_required_count(self) -> int:
        return len(self.matched_required_ids)

    @property
    def matched_preferred_count(self) -> int:
        return len(self.matched_preferred_ids)

    @property
    def total_matched_count(self) -> int:
        return len(self.matched_required_ids) + len(self.matched_preferred_ids)

    @property
    def total_criteria_count(self) -> int:
        return self.total_required_count + self.total_preferred_count
