"""End-to-end tests: seed the store from a fixture, then run matching from it."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from talentmatch.config.exceptions import ConfigurationError, FixtureError
from talentmatch.config.models import AppConfig, MatchingConfig
from talentmatch.domain.models import PartyType, Priority
from talentmatch.persistence import (
    KeywordRepository,
    KeywordSelectionRepository,
    ProfileRepository,
    RecordNotFoundError,
    get_session,
)
from talentmatch.persistence.schema import ProfileModel
from talentmatch.pipeline import MatchPipeline
from talentmatch.ranking import EligibilityTier
from talentmatch.seed import read_fixture, seed_from_file
from talentmatch.selection import UnknownKeywordError

SEED_FIXTURE = Path(__file__).parent.parent / "fixtures" / "seed.yaml"


class TestSeed:
    """Tests for loading the YAML fixture."""

    def test_seed_counts(self, database):
        result = seed_from_file(SEED_FIXTURE, MatchingConfig())

        assert result.keywords == 6
        assert result.parties == 6
        assert result.selections == 18

    def test_seeded_rows(self, seeded_database):
        with get_session() as session:
            assert len(KeywordRepository(session).get_all()) == 6
            seekers = ProfileRepository(session).list_by_type(PartyType.JOB_SEEKER)
            selections = KeywordSelectionRepository(session).get_for_party("emp-harbour")

        # 'user' in the fixture is the legacy name for a job seeker
        assert {p.party_id for p in seekers} == {"seeker-ana", "seeker-ben", "seeker-cho", "seeker-dan"}
        assert [(s.keyword_id, s.priority) for s in selections] == [
            (1, Priority.REQUIRED),
            (2, Priority.REQUIRED),
            (3, Priority.PREFERRED),
            (4, Priority.PREFERRED),
        ]

    def test_seed_is_idempotent(self, seeded_database):
        result = seed_from_file(SEED_FIXTURE, MatchingConfig())
        assert result.parties == 6

        with get_session() as session:
            assert len(KeywordSelectionRepository(session).get_for_party("seeker-cho")) == 5

    def test_unknown_keyword_strict(self, database, tmp_path):
        fixture = tmp_path / "seed.yaml"
        fixture.write_text(
            "keywords:\n"
            "  - {id: 1, text: Python, category: Skills}\n"
            "parties:\n"
            "  - party_id: emp-1\n"
            "    party_type: employer\n"
            "    keyword_selections:\n"
            "      - {keyword_id: 1, priority: required}\n"
            "      - {keyword_id: 42}\n"
        )

        with pytest.raises(UnknownKeywordError):
            seed_from_file(fixture, MatchingConfig())

        # The failed fixture rolled back as a whole
        with get_session() as session:
            assert KeywordRepository(session).get_all() == []

    def test_unknown_keyword_non_strict_dropped(self, database, tmp_path):
        fixture = tmp_path / "seed.yaml"
        fixture.write_text(
            "keywords:\n"
            "  - {id: 1, text: Python, category: Skills}\n"
            "parties:\n"
            "  - party_id: emp-1\n"
            "    party_type: employer\n"
            "    keyword_selections:\n"
            "      - {keyword_id: 1, priority: required}\n"
            "      - {keyword_id: 42}\n"
        )

        result = seed_from_file(fixture, MatchingConfig(strict_keywords=False))
        assert result.selections == 1

    def test_malformed_fixture(self, tmp_path):
        fixture = tmp_path / "seed.yaml"
        fixture.write_text(
            "keywords:\n"
            "  - {id: 1, text: '', category: Skills}\n"
            "parties:\n"
            "  - {party_type: employer}\n"
        )

        with pytest.raises(FixtureError) as exc_info:
            read_fixture(fixture)
        assert len(exc_info.value.errors) == 2
        assert exc_info.value.source == fixture

    def test_missing_fixture(self, tmp_path):
        with pytest.raises(ConfigurationError):
            read_fixture(tmp_path / "missing.yaml")


class TestRunForParty:
    """Match runs that load their snapshot from the store."""

    def test_employer_view(self, seeded_database):
        result = MatchPipeline.from_config(AppConfig()).run_for_party("emp-harbour")

        assert [(m.counterparty_id, m.match_rate, m.tier) for m in result.ranked] == [
            ("seeker-cho", 100, EligibilityTier.FAST_TRACK),
            ("seeker-ana", 75, EligibilityTier.QUALIFIED),
            ("seeker-ben", 15, EligibilityTier.PARTIAL),
        ]
        assert result.ranked[0].result.profile.name == "Cho Min"
        assert result.ranked[0].result.matched_keywords[0].text == "Forklift licence"

    def test_job_seeker_view(self, seeded_database):
        result = MatchPipeline.from_config(AppConfig()).run_for_party("seeker-dan", view="all")

        assert [(m.counterparty_id, m.match_rate) for m in result.ranked] == [
            ("emp-shipyard", 50),
            ("emp-harbour", 0),
        ]

    def test_unknown_party(self, seeded_database):
        with pytest.raises(RecordNotFoundError):
            MatchPipeline.from_config(AppConfig()).run_for_party("nobody")

    def test_malformed_stored_profile_is_excluded(self, seeded_database, caplog):
        with get_session() as session:
            session.add(
                ProfileModel(party_id="seeker-bad", party_type="job_seeker", email="not-an-email")
            )

        with caplog.at_level(logging.WARNING):
            result = MatchPipeline.from_config(AppConfig()).run_for_party("emp-harbour")

        assert result.excluded_ids == ["seeker-bad"]
        assert "email" in result.excluded[0].reason
        assert [m.counterparty_id for m in result.ranked] == ["seeker-cho", "seeker-ana", "seeker-ben"]
        assert any(
            getattr(r, "event", None) == "match.counterparty.excluded" for r in caplog.records
        )

    def test_malformed_stored_viewer_raises(self, seeded_database):
        with get_session() as session:
            session.add(ProfileModel(party_id="emp-bad", party_type="employer", email="nope"))

        with pytest.raises(ValidationError):
            MatchPipeline.from_config(AppConfig()).run_for_party("emp-bad")
