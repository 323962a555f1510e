"""Tests for the match pipeline orchestration.

Covers:
- Orientation of each pair (employer criteria drive the score)
- Ranking of the full batch and the statistics summary
- Exclusion of malformed counterparties without aborting the run
- Snapshot semantics and run-scoped log context
"""

import logging

import pytest
from pydantic import ValidationError

from talentmatch.config.models import AppConfig, RankingView
from talentmatch.logging.config import ContextualFilter
from talentmatch.matching import MatchScorer
from talentmatch.pipeline import MatchPipeline, MatchRunResult
from talentmatch.ranking import EligibilityTier, MatchRanker
from talentmatch.selection import MalformedSelectionError


@pytest.fixture
def pipeline(catalog):
    return MatchPipeline(scorer=MatchScorer(), ranker=MatchRanker(), catalog=catalog)


@pytest.fixture
def employer(make_record):
    return make_record("emp-1", "employer", required=[1, 2], preferred=[3, 4], name="Harbour Logistics")


@pytest.fixture
def seekers(make_record):
    return [
        make_record("seeker-ana", keywords=[1, 2, 3], name="Ana Reyes"),
        make_record("seeker-ben", keywords=[1, 3, 4], name="Ben Tran"),
        make_record("seeker-cho", keywords=[1, 2, 3, 4, 5], name="Cho Min"),
        make_record("seeker-dan", keywords=[6], name="Dan Okafor"),
    ]


class TestEmployerView:
    """An employer ranking job seekers."""

    def test_ranked_order_and_tiers(self, pipeline, employer, seekers):
        result = pipeline.run(employer, seekers)

        assert isinstance(result, MatchRunResult)
        assert [(m.counterparty_id, m.match_rate, m.tier) for m in result.ranked] == [
            ("seeker-cho", 100, EligibilityTier.FAST_TRACK),
            ("seeker-ana", 75, EligibilityTier.QUALIFIED),
            ("seeker-ben", 15, EligibilityTier.PARTIAL),
        ]
        assert result.scored_count == 4
        assert result.excluded == []

    def test_all_view_keeps_zero_rates(self, pipeline, employer, seekers):
        result = pipeline.run(employer, seekers, view=RankingView.ALL)
        assert result.ranked[-1].counterparty_id == "seeker-dan"
        assert result.ranked[-1].tier is EligibilityTier.NONE

    def test_qualified_view(self, pipeline, employer, seekers):
        result = pipeline.run(employer, seekers, view="qualified")
        assert [m.counterparty_id for m in result.ranked] == ["seeker-cho", "seeker-ana"]

    def test_statistics(self, pipeline, employer, seekers):
        stats = pipeline.run(employer, seekers).statistics

        assert stats.total == 3
        assert stats.high_matches == 1
        assert stats.good_matches == 2
        assert stats.fast_track == 1
        assert stats.qualified == 2
        # (100 + 75 + 15) / 3 = 63.33
        assert stats.average_rate == 63

    def test_profile_passed_through(self, pipeline, employer, seekers):
        result = pipeline.run(employer, seekers)
        assert result.ranked[0].result.profile.name == "Cho Min"

    def test_no_counterparties(self, pipeline, employer):
        result = pipeline.run(employer, [])

        assert result.is_empty
        assert result.statistics.total == 0


class TestJobSeekerView:
    """A job seeker ranking employers: the employer side still supplies the tiers."""

    def test_employer_criteria_drive_score(self, pipeline, make_record):
        seeker = make_record("seeker-ana", keywords=[1, 2, 3])
        employers = [
            make_record("emp-1", "employer", required=[1, 2], preferred=[3, 4]),
            make_record("emp-2", "employer", required=[6], preferred=[1]),
            make_record("emp-3", "employer", required=[1], preferred=[]),
        ]

        result = pipeline.run(seeker, employers)

        assert [(m.counterparty_id, m.match_rate) for m in result.ranked] == [
            ("emp-3", 100),
            ("emp-1", 75),
        ]

    def test_same_side_counterparty_excluded(self, pipeline, make_record):
        seeker = make_record("seeker-ana", keywords=[1])
        others = [
            make_record("seeker-ben", keywords=[1]),
            make_record("emp-1", "employer", required=[1]),
        ]

        result = pipeline.run(seeker, others)

        assert result.excluded_ids == ["seeker-ben"]
        assert [m.counterparty_id for m in result.ranked] == ["emp-1"]


class TestExclusions:
    """Malformed counterparties are logged and skipped; the batch is still ranked."""

    def test_conflicting_tiers_excluded(self, pipeline, make_record):
        seeker = make_record("seeker-ana", keywords=[1, 2])
        employers = [
            {
                "party_id": "emp-bad",
                "party_type": "employer",
                "keyword_selections": [
                    {"keyword_id": 1, "priority": "required"},
                    {"keyword_id": 1, "priority": "preferred"},
                ],
            },
            make_record("emp-good", "employer", required=[1, 2]),
        ]

        result = pipeline.run(seeker, employers)

        assert result.excluded_ids == ["emp-bad"]
        assert "both required and preferred" in result.excluded[0].reason
        assert [m.counterparty_id for m in result.ranked] == ["emp-good"]

    def test_invalid_record_excluded(self, pipeline, employer, seekers, caplog):
        caplog.handler.addFilter(ContextualFilter())
        broken = {"party_id": "seeker-x", "party_type": "job_seeker", "email": "not-an-email"}

        with caplog.at_level(logging.WARNING):
            result = pipeline.run(employer, [broken] + seekers)

        assert result.excluded_ids == ["seeker-x"]
        assert len(result.ranked) == 3
        excluded_logs = [
            r for r in caplog.records if getattr(r, "event", None) == "match.counterparty.excluded"
        ]
        assert excluded_logs[0].counterparty_id == "seeker-x"
        assert excluded_logs[0].run_id == result.run_id

    def test_viewer_itself_excluded(self, pipeline, employer, seekers):
        result = pipeline.run(employer, seekers + [employer])
        assert "emp-1" in result.excluded_ids

    def test_unknown_keywords_dropped(self, pipeline, make_record, caplog):
        employer = make_record("emp-1", "employer", required=[1, 999])
        seeker = make_record("seeker-1", keywords=[1, 998])

        with caplog.at_level(logging.WARNING):
            result = pipeline.run(employer, [seeker])

        assert result.ranked[0].match_rate == 100
        assert result.ranked[0].result.total_required_count == 1
        unknown = [r for r in caplog.records if getattr(r, "event", None) == "selection.keyword.unknown"]
        assert sorted(r.keyword_id for r in unknown) == [998, 999]

    def test_malformed_viewer_raises(self, pipeline, seekers):
        viewer = {
            "party_id": "emp-bad",
            "party_type": "employer",
            "keyword_selections": [
                {"keyword_id": 2, "priority": 1},
                {"keyword_id": 2, "priority": 2},
            ],
        }
        with pytest.raises(MalformedSelectionError):
            pipeline.run(viewer, seekers)

    def test_invalid_viewer_raises(self, pipeline, seekers):
        with pytest.raises(ValidationError):
            pipeline.run({"party_type": "employer"}, seekers)


class TestRunSemantics:
    def test_accepts_one_shot_iterables(self, pipeline, employer, seekers):
        result = pipeline.run(employer, iter(seekers))
        assert result.scored_count == 4

    def test_input_records_are_not_mutated(self, pipeline, employer, seekers):
        before = [s.model_dump() for s in seekers]
        pipeline.run(employer, seekers)
        assert [s.model_dump() for s in seekers] == before

    def test_run_logs_start_and_completion(self, pipeline, employer, seekers, caplog):
        caplog.handler.addFilter(ContextualFilter())
        with caplog.at_level(logging.INFO, logger="talentmatch.pipeline.runner"):
            result = pipeline.run(employer, seekers)

        events = {getattr(r, "event", None): r for r in caplog.records}
        assert events["match.run.started"].viewer_id == "emp-1"
        assert events["match.run.started"].counterparty_count == 4
        assert events["match.run.completed"].run_id == result.run_id
        assert events["match.run.completed"].ranked == 3

    def test_run_ids_are_unique(self, pipeline, employer, seekers):
        assert pipeline.run(employer, seekers).run_id != pipeline.run(employer, seekers).run_id

    def test_from_config_flat_policy(self, catalog, employer, seekers):
        config = AppConfig.model_validate({"matching": {"policy": "flat"}, "ranking": {"view": "all"}})
        pipeline = MatchPipeline.from_config(config, catalog=catalog)

        rates = {m.counterparty_id: m.match_rate for m in pipeline.run(employer, seekers).ranked}

        assert rates == {"seeker-ana": 75, "seeker-ben": 75, "seeker-cho": 100, "seeker-dan": 0}

    def test_payload(self, pipeline, employer, seekers):
        payload = pipeline.run(employer, seekers).to_payload()

        assert payload["viewer_id"] == "emp-1"
        assert payload["view"] == "active"
        assert payload["matches"][0]["rank"] == 1
        assert payload["matches"][0]["eligibility_tier"] == "fast-track"
        assert payload["statistics"]["total"] == 3
        assert payload["excluded"] == []
