"""Match run orchestration: score every counterparty, then rank the batch."""

from typing import Any, Iterable, List, Optional, Tuple, Union
from uuid import uuid4

from pydantic import ValidationError

from talentmatch.config.models import AppConfig, RankingView
from talentmatch.domain.models import DEFAULT_PRIORITY, PartyRecord, PartyType
from talentmatch.logging import get_logger
from talentmatch.logging.context import log_context
from talentmatch.matching.engine import MatchScorer
from talentmatch.matching.models import MatchResult
from talentmatch.persistence.database import get_session
from talentmatch.persistence.exceptions import RecordNotFoundError
from talentmatch.persistence.repositories import (
    KeywordRepository,
    KeywordSelectionRepository,
    ProfileRepository,
)
from talentmatch.ranking.models import MatchStatistics
from talentmatch.ranking.ranker import MatchRanker
from talentmatch.selection.catalog import KeywordCatalog
from talentmatch.selection.exceptions import MalformedSelectionError
from talentmatch.selection.model import KeywordSelectionSet
from talentmatch.utils.timestamps import utc_now

from .models import ExcludedCounterparty, MatchRunResult

logger = get_logger(__name__, component="pipeline")

RecordLike = Union[PartyRecord, dict]


class MatchPipeline:
    """
    Computes the ranked match list for one viewing party.

    A run works on a snapshot of its inputs taken when it starts. Every
    counterparty is scored before anything is ranked, so the ranker never
    sees a partial batch. A counterparty whose record is malformed is logged
    and excluded; the rest of the batch is still ranked. Unknown keywords are
    dropped from the record that references them.
    """

    def __init__(
        self,
        scorer: MatchScorer,
        ranker: MatchRanker,
        catalog: Optional[KeywordCatalog] = None,
        default_priority=DEFAULT_PRIORITY,
        high_match_threshold: int = 80,
        good_match_threshold: int = 50,
    ):
        """
        Initialize the match pipeline.

        Args:
            scorer: Scorer applied to every (employer, job seeker) pair
            ranker: Ranker applied to the complete batch
            catalog: Keyword catalog; unknown keywords are dropped when set
            default_priority: Tier for selections that carry none
            high_match_threshold: Rate counted as a high match in statistics
            good_match_threshold: Rate counted as a good match in statistics
        """
        self.scorer = scorer
        self.ranker = ranker
        self.catalog = catalog
        self.default_priority = default_priority
        self.high_match_threshold = high_match_threshold
        self.good_match_threshold = good_match_threshold

    @classmethod
    def from_config(
        cls, app_config: AppConfig, catalog: Optional[KeywordCatalog] = None
    ) -> "MatchPipeline":
        return cls(
            scorer=MatchScorer.from_config(app_config.matching, catalog=catalog),
            ranker=MatchRanker.from_config(app_config.ranking),
            catalog=catalog,
            default_priority=app_config.matching.default_priority,
            high_match_threshold=app_config.ranking.high_match_threshold,
            good_match_threshold=app_config.ranking.good_match_threshold,
        )

    def run(
        self,
        viewer: RecordLike,
        counterparties: Iterable[RecordLike],
        view: Optional[RankingView] = None,
        catalog: Optional[KeywordCatalog] = None,
    ) -> MatchRunResult:
        """
        Score and rank every counterparty for ``viewer``.

        The employer side of each pair supplies the required/preferred
        criteria, whichever side is viewing.

        Args:
            viewer: Party the matches are computed for
            counterparties: Complete list of parties to match against
            view: Ranked view override (defaults to the ranker's view)
            catalog: Catalog override for this run

        Returns:
            MatchRunResult with ranked matches and excluded counterparties

        Raises:
            pydantic.ValidationError: If the viewer record is invalid
            MalformedSelectionError: If the viewer's own selections conflict
        """
        run_started_at = utc_now()
        run_id = uuid4().hex
        catalog = catalog if catalog is not None else self.catalog
        scorer = self.scorer.with_catalog(catalog) if catalog is not None else self.scorer
        view = RankingView(view) if view is not None else self.ranker.view

        viewer = _as_record(viewer)
        # Snapshot: later edits to the caller's list cannot leak into this run
        snapshot: Tuple[Any, ...] = tuple(counterparties)

        with log_context(run_id=run_id, viewer_id=viewer.party_id):
            logger.info(
                "Match run started",
                extra={
                    "event": "match.run.started",
                    "viewer_type": viewer.party_type.value,
                    "counterparty_count": len(snapshot),
                    "view": view.value,
                },
            )

            viewer_set = self._selection_set(viewer, catalog)
            results: List[MatchResult] = []
            excluded: List[ExcludedCounterparty] = []

            for raw in snapshot:
                counterparty_id = _record_id(raw)
                with log_context(counterparty_id=counterparty_id):
                    try:
                        record = _as_record(raw)
                        self._check_counterparty(viewer, record)
                        counterparty_set = self._selection_set(record, catalog)
                    except (ValidationError, MalformedSelectionError, ValueError) as e:
                        excluded.append(ExcludedCounterparty(counterparty_id, str(e)))
                        logger.warning(
                            f"Excluding counterparty {counterparty_id}: {e}",
                            extra={
                                "event": "match.counterparty.excluded",
                                "error_type": type(e).__name__,
                            },
                        )
                        continue

                    if viewer.party_type is PartyType.EMPLOYER:
                        employer_set, candidate_set = viewer_set, counterparty_set
                    else:
                        employer_set, candidate_set = counterparty_set, viewer_set

                    results.append(
                        scorer.score_selections(
                            employer_set,
                            candidate_set,
                            counterparty_id=record.party_id,
                            profile=record.profile,
                        )
                    )

            ranked = self.ranker.rank(results, view=view)
            statistics = MatchStatistics.from_ranked(
                ranked,
                high_threshold=self.high_match_threshold,
                good_threshold=self.good_match_threshold,
            )

            result = MatchRunResult(
                run_id=run_id,
                viewer_id=viewer.party_id,
                view=view.value,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                ranked=ranked,
                excluded=excluded,
                scored_count=len(results),
                statistics=statistics,
            )

            logger.info(
                "Match run completed",
                extra={
                    "event": "match.run.completed",
                    "duration_ms": int(result.duration_seconds * 1000),
                    "scored": result.scored_count,
                    "ranked": len(result.ranked),
                    "excluded": len(result.excluded),
                    "fast_track": statistics.fast_track,
                    "average_rate": statistics.average_rate,
                },
            )
            return result

    def run_for_party(self, party_id: str, view: Optional[RankingView] = None) -> MatchRunResult:
        """
        Load a snapshot from the store and run matching for one party.

        All reads happen in a single session before scoring starts.
        Counterpart rows are handed to ``run`` unvalidated, so a malformed
        stored profile is excluded like any other bad counterparty.

        Args:
            party_id: Viewing party
            view: Ranked view override

        Returns:
            MatchRunResult for the viewing party

        Raises:
            RecordNotFoundError: If the party has no profile
            pydantic.ValidationError: If the viewer's own stored profile is invalid
        """
        with get_session() as session:
            profiles = ProfileRepository(session)
            viewer_profile = profiles.get(party_id)
            if viewer_profile is None:
                raise RecordNotFoundError(f"Profile {party_id} not found")

            catalog = self.catalog
            if catalog is None:
                catalog = KeywordCatalog(KeywordRepository(session).get_all())

            counterpart_rows = profiles.list_rows_by_type(viewer_profile.party_type.counterpart)
            selections = KeywordSelectionRepository(session).get_for_parties(
                [party_id] + [row["party_id"] for row in counterpart_rows]
            )

        viewer = PartyRecord(profile=viewer_profile, keyword_selections=selections[party_id])
        counterparties = [
            {**row, "keyword_selections": selections[row["party_id"]]}
            for row in counterpart_rows
        ]
        return self.run(viewer, counterparties, view=view, catalog=catalog)

    def _selection_set(
        self, record: PartyRecord, catalog: Optional[KeywordCatalog]
    ) -> KeywordSelectionSet:
        return KeywordSelectionSet.from_records(
            record.keyword_selections,
            party_id=record.party_id,
            catalog=catalog,
            strict=False,
            default_priority=self.default_priority,
        )

    @staticmethod
    def _check_counterparty(viewer: PartyRecord, record: PartyRecord) -> None:
        if record.party_id == viewer.party_id:
            raise ValueError("Counterparty is the viewing party")
        if record.party_type is viewer.party_type:
            raise ValueError(
                f"Counterparty is a {record.party_type.value}, same side as the viewer"
            )


def _as_record(raw: RecordLike) -> PartyRecord:
    if isinstance(raw, PartyRecord):
        return raw.model_copy(deep=True)
    return PartyRecord.model_validate(raw)


def _record_id(raw: Any) -> str:
    if isinstance(raw, PartyRecord):
        return raw.party_id
    if isinstance(raw, dict):
        party_id = raw.get("party_id")
        if party_id is None and isinstance(raw.get("profile"), dict):
            party_id = raw["profile"].get("party_id")
        return str(party_id) if party_id is not None else "unknown"
    return "unknown"
