"""Load a YAML fixture of keywords and parties into the store.

Fixture layout::

    keywords:
      - {id: 1, text: Python, category: Skills}
    parties:
      - party_id: emp-1
        party_type: employer
        name: Harbour Logistics
        keyword_selections:
          - {keyword_id: 1, priority: required}

Selections go through a KeywordSelectionSet, so the fixture is validated
exactly like an interactive edit before it replaces what is stored.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from talentmatch.config.exceptions import FixtureError
from talentmatch.config.models import MatchingConfig
from talentmatch.domain.models import Keyword, PartyRecord
from talentmatch.logging import get_logger
from talentmatch.persistence.database import get_session
from talentmatch.persistence.repositories import (
    KeywordRepository,
    KeywordSelectionRepository,
    ProfileRepository,
)
from talentmatch.selection.catalog import KeywordCatalog
from talentmatch.selection.model import KeywordSelectionSet

logger = get_logger(__name__, component="seed")


@dataclass
class SeedResult:
    keywords: int = 0
    parties: int = 0
    selections: int = 0


def read_fixture(fixture_path: Path) -> Dict[str, Any]:
    """
    Read and validate the fixture file.

    Raises:
        FixtureError: If the file is unreadable or malformed
    """
    try:
        with open(fixture_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FixtureError(
            f"Failed to parse seed fixture: {e}",
            suggestions=["Check YAML syntax in the fixture file"],
            source=fixture_path,
        )
    except OSError as e:
        raise FixtureError(
            f"Failed to read seed fixture: {e}",
            suggestions=[f"Ensure {fixture_path} exists and is readable"],
            source=fixture_path,
        )

    if not isinstance(data, dict):
        raise FixtureError(
            "Seed fixture must contain a mapping with 'keywords' and 'parties'",
            source=fixture_path,
        )

    errors: List[str] = []
    keywords: List[Keyword] = []
    parties: List[PartyRecord] = []

    for index, raw in enumerate(data.get("keywords") or []):
        try:
            keywords.append(Keyword.model_validate(raw))
        except ValidationError as e:
            errors.append(f"keywords[{index}]: {e.errors()[0]['msg']}")

    for index, raw in enumerate(data.get("parties") or []):
        try:
            parties.append(PartyRecord.model_validate(raw))
        except ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            errors.append(f"parties[{index}].{location}: {error['msg']}")

    if errors:
        raise FixtureError(
            "Seed fixture validation failed",
            errors=errors,
            suggestions=["Every keyword needs id, text and category; every party needs party_id and party_type"],
            source=fixture_path,
        )

    return {"keywords": keywords, "parties": parties}


def seed_from_file(fixture_path: Path, matching_config: MatchingConfig) -> SeedResult:
    """
    Upsert a fixture's keywords and parties, replacing each party's selections.

    Everything runs in one session: a failure anywhere rolls back the whole
    fixture.

    Raises:
        FixtureError: If the fixture is malformed
        UnknownKeywordError: If a selection references an unknown keyword
            and strict_keywords is enabled
        MalformedSelectionError: If a party lists a keyword in both tiers
        PersistenceError: If a database error occurs
    """
    fixture = read_fixture(fixture_path)
    result = SeedResult()

    with get_session() as session:
        keyword_repo = KeywordRepository(session)
        profile_repo = ProfileRepository(session)
        selection_repo = KeywordSelectionRepository(session)

        result.keywords = len(keyword_repo.bulk_upsert(fixture["keywords"]))
        catalog = KeywordCatalog(keyword_repo.get_all())

        for record in fixture["parties"]:
            profile_repo.upsert(record.profile)
            selection_set = KeywordSelectionSet.from_records(
                record.keyword_selections,
                party_id=record.party_id,
                catalog=catalog,
                strict=matching_config.strict_keywords,
                default_priority=matching_config.default_priority,
            )
            result.selections += selection_repo.replace_all(
                record.party_id, selection_set.to_records()
            )
            result.parties += 1

    logger.info(
        f"Seeded {result.keywords} keywords and {result.parties} parties",
        extra={
            "event": "seed.completed",
            "fixture": str(fixture_path),
            "keywords": result.keywords,
            "parties": result.parties,
            "selections": result.selections,
        },
    )
    return result
