"""Match scorer: keyword overlap between an employer and a job seeker.

Tiered policy (canonical):
1. Intersect the candidate's keywords with the employer's required and
   preferred keywords
2. The required gate passes when the employer has no required keywords or
   the candidate holds all of them
3. No employer keywords at all scores 0
4. Gate passed: pass_floor plus the remaining points in proportion to
   preferred coverage (full remaining points when there are no preferred
   keywords)
5. Gate failed: partial_ceiling in proportion to required coverage;
   preferred matches do not count
6. Round half up to an integer at the end

Flat policy: 100 * matched / employer keywords, tiers ignored.
"""

import logging
import math
from typing import AbstractSet, Callable, List, Optional

from talentmatch.config.models import MatchingConfig, ScoringPolicy
from talentmatch.domain.models import PartyProfile, Priority
from talentmatch.selection.catalog import KeywordCatalog
from talentmatch.selection.model import KeywordSelectionSet

from .models import MatchedKeyword, MatchResult

logger = logging.getLogger(__name__)

FULL_SCORE = 100.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero for positive scores."""
    return int(math.floor(value + 0.5))


class MatchScorer:
    """Computes a MatchResult for one (employer, candidate) pair.

    The scorer is stateless between calls: identical inputs always produce
    identical results.
    """

    def __init__(
        self,
        policy: ScoringPolicy = ScoringPolicy.TIERED,
        pass_floor: float = 50.0,
        partial_ceiling: float = 30.0,
        catalog: Optional[KeywordCatalog] = None,
        logger_instance: logging.Logger = None,
    ):
        """Initialize MatchScorer.

        Args:
            policy: Scoring policy applied to every pair
            pass_floor: Score granted once all required keywords are met
            partial_ceiling: Maximum score while required keywords are missing
            catalog: Optional catalog used to describe matched keywords
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.policy = ScoringPolicy(policy)
        self.pass_floor = float(pass_floor)
        self.partial_ceiling = float(partial_ceiling)
        self.catalog = catalog
        self.logger = logger_instance or logger

    @classmethod
    def from_config(
        cls, config: MatchingConfig, catalog: Optional[KeywordCatalog] = None
    ) -> "MatchScorer":
        return cls(
            policy=config.policy,
            pass_floor=config.pass_floor,
            partial_ceiling=config.partial_ceiling,
            catalog=catalog,
        )

    def with_catalog(self, catalog: Optional[KeywordCatalog]) -> "MatchScorer":
        """Copy of this scorer describing matches with ``catalog``."""
        return MatchScorer(
            policy=self.policy,
            pass_floor=self.pass_floor,
            partial_ceiling=self.partial_ceiling,
            catalog=catalog,
            logger_instance=self.logger,
        )

    def score(
        self,
        employer_required: AbstractSet[int],
        employer_preferred: AbstractSet[int],
        candidate_keywords: AbstractSet[int],
        counterparty_id: str = "",
        profile: Optional[PartyProfile] = None,
        category_hint: Optional[Callable[[int], Optional[str]]] = None,
    ) -> MatchResult:
        """Score a candidate's keywords against an employer's criteria.

        Args:
            employer_required: Keyword ids the employer requires
            employer_preferred: Keyword ids the employer prefers (disjoint
                from employer_required)
            candidate_keywords: Keyword ids the job seeker selected
            counterparty_id: Id reported on the result
            profile: Counterparty profile passed through to the result
            category_hint: Fallback category lookup when no catalog is set

        Returns:
            MatchResult for the pair
        """
        required = frozenset(employer_required)
        preferred = frozenset(employer_preferred)
        candidate = frozenset(candidate_keywords)

        if self.policy == ScoringPolicy.FLAT:
            result = self._score_flat(required | preferred, candidate, category_hint)
        else:
            result = self._score_tiered(required, preferred, candidate, category_hint)

        result.counterparty_id = counterparty_id
        result.profile = profile

        self.logger.debug(
            f"Scored counterparty {counterparty_id}: {result.match_rate}%",
            extra={
                "event": "match.pair.scored",
                "counterparty_id": counterparty_id,
                "policy": self.policy.value,
                "match_rate": result.match_rate,
                "meets_all_required": result.meets_all_required,
                "required_matched": result.matched_required_count,
                "required_total": result.total_required_count,
                "preferred_matched": result.matched_preferred_count,
                "preferred_total": result.total_preferred_count,
            },
        )
        return result

    def score_selections(
        self,
        employer: KeywordSelectionSet,
        candidate: KeywordSelectionSet,
        counterparty_id: str = "",
        profile: Optional[PartyProfile] = None,
    ) -> MatchResult:
        """Score two selection sets; the employer side supplies the tiers."""
        return self.score(
            employer.required_ids(),
            employer.preferred_ids(),
            candidate.all_ids(),
            counterparty_id=counterparty_id,
            profile=profile,
            category_hint=employer.category_of,
        )

    def _score_tiered(self, required, preferred, candidate, category_hint) -> MatchResult:
        matched_required = required & candidate
        matched_preferred = preferred & candidate
        meets_all_required = not required or matched_required == required

        if not required and not preferred:
            raw_rate = 0.0
        elif meets_all_required:
            if preferred:
                coverage = len(matched_preferred) / len(preferred)
            else:
                coverage = 1.0
            raw_rate = self.pass_floor + (FULL_SCORE - self.pass_floor) * coverage
        else:
            raw_rate = self.partial_ceiling * len(matched_required) / len(required)

        matched_keywords = self._describe(matched_required, Priority.REQUIRED, category_hint)
        matched_keywords += self._describe(matched_preferred, Priority.PREFERRED, category_hint)

        return MatchResult(
            counterparty_id="",
            match_rate=self._finalize(raw_rate),
            meets_all_required=meets_all_required,
            raw_rate=raw_rate,
            matched_required_ids=matched_required,
            missing_required_ids=required - candidate,
            matched_preferred_ids=matched_preferred,
            total_required_count=len(required),
            total_preferred_count=len(preferred),
            matched_keywords=matched_keywords,
            missing_keywords=self._describe(required - candidate, Priority.REQUIRED, category_hint),
        )

    def _score_flat(self, employer_keywords, candidate, category_hint) -> MatchResult:
        matched = employer_keywords & candidate
        if employer_keywords:
            raw_rate = FULL_SCORE * len(matched) / len(employer_keywords)
        else:
            raw_rate = 0.0

        return MatchResult(
            counterparty_id="",
            match_rate=self._finalize(raw_rate),
            meets_all_required=True,
            raw_rate=raw_rate,
            matched_preferred_ids=matched,
            total_preferred_count=len(employer_keywords),
            matched_keywords=self._describe(matched, Priority.PREFERRED, category_hint),
        )

    @staticmethod
    def _finalize(raw_rate: float) -> int:
        return max(0, min(100, round_half_up(raw_rate)))

    def _describe(self, keyword_ids, tier: Priority, category_hint) -> List[MatchedKeyword]:
        described = []
        for keyword_id in sorted(keyword_ids):
            keyword = self.catalog.get(keyword_id) if self.catalog is not None else None
            if keyword is not None:
                described.append(
                    MatchedKeyword(
                        keyword_id=keyword_id,
                        tier=tier,
                        text=keyword.text,
                        category=keyword.category,
                    )
                )
            else:
                category = category_hint(keyword_id) if category_hint else None
                described.append(MatchedKeyword(keyword_id=keyword_id, tier=tier, category=category))
        return described
