"""Tests for domain models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from talentmatch.domain.models import (
    DEFAULT_PRIORITY,
    Keyword,
    KeywordSelection,
    PartyProfile,
    PartyRecord,
    PartyType,
    Priority,
)


class TestPriority:
    """Tests for the Priority tier enum."""

    def test_storage_encoding(self):
        assert int(Priority.REQUIRED) == 1
        assert int(Priority.PREFERRED) == 2

    def test_default_is_preferred(self):
        assert DEFAULT_PRIORITY is Priority.PREFERRED
        assert Priority.parse(None) is Priority.PREFERRED

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1, Priority.REQUIRED),
            (2, Priority.PREFERRED),
            ("1", Priority.REQUIRED),
            ("required", Priority.REQUIRED),
            (" Preferred ", Priority.PREFERRED),
            (Priority.REQUIRED, Priority.REQUIRED),
        ],
    )
    def test_parse(self, value, expected):
        assert Priority.parse(value) is expected

    @pytest.mark.parametrize("value", [0, 3, "optional", "9"])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            Priority.parse(value)

    def test_label_and_opposite(self):
        assert Priority.REQUIRED.label == "required"
        assert Priority.REQUIRED.opposite is Priority.PREFERRED
        assert Priority.PREFERRED.opposite is Priority.REQUIRED


class TestPartyType:
    def test_values(self):
        assert PartyType("job_seeker") is PartyType.JOB_SEEKER
        assert PartyType("employer") is PartyType.EMPLOYER

    def test_legacy_aliases(self):
        assert PartyType("user") is PartyType.JOB_SEEKER
        assert PartyType("Company") is PartyType.EMPLOYER

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            PartyType("recruiter")

    def test_counterpart(self):
        assert PartyType.JOB_SEEKER.counterpart is PartyType.EMPLOYER
        assert PartyType.EMPLOYER.counterpart is PartyType.JOB_SEEKER


class TestKeyword:
    def test_strips_whitespace(self):
        keyword = Keyword(id=1, text="  Forklift licence ", category=" Skills")
        assert keyword.text == "Forklift licence"
        assert keyword.category == "Skills"

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            Keyword(id=1, text="   ", category="Skills")

    def test_frozen(self):
        keyword = Keyword(id=1, text="Korean", category="Skills")
        with pytest.raises(ValidationError):
            keyword.text = "Japanese"


class TestKeywordSelection:
    def test_default_priority(self):
        assert KeywordSelection(keyword_id=3).priority is Priority.PREFERRED

    def test_priority_from_label(self):
        assert KeywordSelection(keyword_id=3, priority="required").priority is Priority.REQUIRED

    def test_explicit_null_priority_uses_default(self):
        selection = KeywordSelection.model_validate({"keyword_id": 3, "priority": None})
        assert selection.priority is DEFAULT_PRIORITY

    def test_invalid_priority_rejected(self):
        with pytest.raises(ValidationError):
            KeywordSelection(keyword_id=3, priority=7)


class TestPartyProfile:
    """Tests for PartyProfile validation."""

    def test_minimal(self):
        profile = PartyProfile(party_id="seeker-1", party_type="job_seeker")
        assert profile.name is None
        assert profile.party_type is PartyType.JOB_SEEKER

    def test_legacy_party_type(self):
        profile = PartyProfile(party_id="c-1", party_type="company")
        assert profile.party_type is PartyType.EMPLOYER

    def test_blank_fields_become_none(self):
        profile = PartyProfile(party_id="seeker-1", party_type="job_seeker", email="  ", name="")
        assert profile.email is None
        assert profile.name is None

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            PartyProfile(party_id="seeker-1", party_type="job_seeker", email="not-an-email")

    def test_empty_party_id_rejected(self):
        with pytest.raises(ValidationError):
            PartyProfile(party_id="  ", party_type="employer")

    def test_created_at_normalized_to_utc(self):
        kst = timezone(timedelta(hours=9))
        profile = PartyProfile(
            party_id="seeker-1",
            party_type="job_seeker",
            created_at=datetime(2024, 3, 1, 9, 0, tzinfo=kst),
        )
        assert profile.created_at == datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc)
        assert profile.created_at.tzinfo == timezone.utc


class TestPartyRecord:
    """Tests for the wire-level record."""

    def test_flat_wire_form(self):
        record = PartyRecord.model_validate(
            {
                "party_id": "emp-1",
                "party_type": "employer",
                "name": "Harbour Logistics",
                "keyword_selections": [
                    {"keyword_id": 1, "category": "Skills", "priority": 1},
                    {"keyword_id": 4, "category": "Location"},
                ],
            }
        )

        assert record.party_id == "emp-1"
        assert record.party_type is PartyType.EMPLOYER
        assert record.profile.name == "Harbour Logistics"
        assert [s.priority for s in record.keyword_selections] == [
            Priority.REQUIRED,
            Priority.PREFERRED,
        ]

    def test_nested_form(self):
        record = PartyRecord.model_validate(
            {"profile": {"party_id": "seeker-1", "party_type": "job_seeker"}}
        )
        assert record.keyword_selections == []

    def test_missing_party_id_rejected(self):
        with pytest.raises(ValidationError):
            PartyRecord.model_validate({"party_type": "employer", "keyword_selections": []})
