"""Ranking and eligibility classification of scored counterparties.

Ordering is descending by (meets_all_required, match_rate) with a stable
sort, so ties keep their input order. A result that meets every required
keyword always ranks above one that does not, whatever the raw rates.
"""

from typing import Iterable, List, Optional

from talentmatch.config.models import RankingConfig, RankingView
from talentmatch.logging import get_logger
from talentmatch.matching.models import MatchResult

from .models import EligibilityTier, RankedMatch

logger = get_logger(__name__, component="ranking")


class MatchRanker:
    """Filters, orders and classifies match results. Holds no state between calls."""

    def __init__(
        self,
        view: RankingView = RankingView.ACTIVE,
        fast_track_threshold: int = 80,
    ):
        """Initialize MatchRanker.

        Args:
            view: Default view used when rank() is called without one
            fast_track_threshold: Minimum rate for the fast-track tier
        """
        self.view = RankingView(view)
        self.fast_track_threshold = fast_track_threshold

    @classmethod
    def from_config(cls, config: RankingConfig) -> "MatchRanker":
        return cls(view=config.view, fast_track_threshold=config.fast_track_threshold)

    def classify(self, result: MatchResult) -> EligibilityTier:
        """Assign the eligibility tier of a single result."""
        if result.match_rate <= 0:
            return EligibilityTier.NONE
        if result.meets_all_required:
            if result.match_rate >= self.fast_track_threshold:
                return EligibilityTier.FAST_TRACK
            return EligibilityTier.QUALIFIED
        return EligibilityTier.PARTIAL

    def filter(
        self, results: Iterable[MatchResult], view: Optional[RankingView] = None
    ) -> List[MatchResult]:
        """Keep the results visible in ``view``, preserving input order.

        Args:
            results: Scored results
            view: ``active`` keeps positive rates, ``qualified`` also requires
                every required keyword, ``all`` keeps everything

        Returns:
            Visible results
        """
        view = RankingView(view) if view is not None else self.view

        if view == RankingView.ALL:
            return list(results)
        if view == RankingView.QUALIFIED:
            return [r for r in results if r.match_rate > 0 and r.meets_all_required]
        return [r for r in results if r.match_rate > 0]

    @staticmethod
    def sort(results: Iterable[MatchResult]) -> List[MatchResult]:
        """Stable sort: all-required-met first, then higher rate first."""
        return sorted(results, key=lambda r: (not r.meets_all_required, -r.match_rate))

    def rank(
        self, results: Iterable[MatchResult], view: Optional[RankingView] = None
    ) -> List[RankedMatch]:
        """Filter, sort and classify a complete batch of results.

        Args:
            results: One result per counterparty; must be the full batch
            view: Override of the default view

        Returns:
            Ranked matches, rank numbers starting at 1
        """
        results = list(results)
        visible = self.filter(results, view)
        ordered = self.sort(visible)

        ranked = [
            RankedMatch(rank=position, result=result, tier=self.classify(result))
            for position, result in enumerate(ordered, 1)
        ]

        logger.debug(
            f"Ranked {len(ranked)} of {len(results)} results",
            extra={
                "event": "ranking.completed",
                "view": (RankingView(view) if view is not None else self.view).value,
                "input_count": len(results),
                "ranked_count": len(ranked),
            },
        )
        return ranked
