"""Shared fixtures for the test suite."""

import logging
from pathlib import Path

import pytest

from talentmatch.config.models import MatchingConfig
from talentmatch.domain.models import Keyword, PartyRecord
from talentmatch.logging.config import JSONFormatter, KeyValueFormatter
from talentmatch.logging.context import clear_log_context
from talentmatch.persistence import close_database, init_database
from talentmatch.selection.catalog import KeywordCatalog

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SEED_FIXTURE = FIXTURES_DIR / "seed.yaml"


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def preserve_root_logger():
    """Undo configure_logging(): drop its handler and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if isinstance(handler.formatter, (JSONFormatter, KeyValueFormatter)):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def keywords():
    return [
        Keyword(id=1, text="Forklift licence", category="Skills"),
        Keyword(id=2, text="Night shift", category="Schedule"),
        Keyword(id=3, text="Korean", category="Skills"),
        Keyword(id=4, text="Busan", category="Location"),
        Keyword(id=5, text="Dormitory", category="Benefits"),
        Keyword(id=6, text="Welding", category="Skills"),
    ]


@pytest.fixture
def catalog(keywords):
    return KeywordCatalog(keywords)


@pytest.fixture
def make_record():
    """Factory for PartyRecord inputs.

    ``required`` and ``preferred`` are keyword id lists; ``keywords`` are
    selections without an explicit tier.
    """

    def _make(party_id, party_type="job_seeker", required=(), preferred=(), keywords=(), **profile):
        selections = [{"keyword_id": k, "priority": "required"} for k in required]
        selections += [{"keyword_id": k, "priority": "preferred"} for k in preferred]
        selections += [{"keyword_id": k} for k in keywords]
        return PartyRecord.model_validate(
            {
                "party_id": party_id,
                "party_type": party_type,
                "keyword_selections": selections,
                **profile,
            }
        )

    return _make


@pytest.fixture
def database():
    """Fresh in-memory database for one test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def seeded_database(database):
    """In-memory database loaded with the sample fixture."""
    from talentmatch.seed import seed_from_file

    seed_from_file(SEED_FIXTURE, MatchingConfig())
    yield
