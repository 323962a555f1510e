"""Data models for match run tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from talentmatch.ranking.models import MatchStatistics, RankedMatch


@dataclass
class ExcludedCounterparty:
    """A counterparty dropped from a run because its record was unusable."""

    counterparty_id: str
    reason: str


@dataclass
class MatchRunResult:
    """
    Outcome of one match run for one viewing party.

    Attributes:
        run_id: Unique id of the run (also present in every log record)
        viewer_id: Party the matches were computed for
        view: Ranked view that was applied
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        ranked: Ranked matches, best first
        excluded: Counterparties dropped because their data was malformed
        scored_count: Counterparties that were scored (before view filtering)
        statistics: Summary figures over ``ranked``
        duration_seconds: Wall time of the run
    """

    run_id: str
    viewer_id: str
    view: str
    run_started_at: datetime
    run_finished_at: datetime
    ranked: List[RankedMatch] = field(default_factory=list)
    excluded: List[ExcludedCounterparty] = field(default_factory=list)
    scored_count: int = 0
    statistics: MatchStatistics = field(default_factory=MatchStatistics)
    duration_seconds: float = 0.0

    def __post_init__(self):
        if self.duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.duration_seconds = delta.total_seconds()

    @property
    def excluded_ids(self) -> List[str]:
        return [e.counterparty_id for e in self.excluded]

    @property
    def is_empty(self) -> bool:
        return not self.ranked

    def to_payload(self) -> Dict[str, Any]:
        """Serializable form of the run: output records plus summary."""
        return {
            "run_id": self.run_id,
            "viewer_id": self.viewer_id,
            "view": self.view,
            "matches": [match.to_payload() for match in self.ranked],
            "statistics": self.statistics.to_dict(),
            "excluded": [
                {"counterparty_id": e.counterparty_id, "reason": e.reason} for e in self.excluded
            ],
            "scored_count": self.scored_count,
        }
