"""Core domain models for keywords, parties and their keyword selections.

This module defines the plain records exchanged with the UI and storage
collaborators:
- Keyword: catalog entry (immutable reference data)
- KeywordSelection: one party's choice of a keyword, with a priority tier
- PartyProfile: displayable profile of a job seeker or an employer
- PartyRecord: a profile plus its keyword selections, as fed to the matcher
"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from talentmatch.utils.timestamps import ensure_utc


class Priority(IntEnum):
    """Priority tier of a selected keyword.

    The integer values are the storage encoding (1 = required, 2 = preferred).
    """

    REQUIRED = 1
    PREFERRED = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def opposite(self) -> "Priority":
        return Priority.PREFERRED if self is Priority.REQUIRED else Priority.REQUIRED

    @classmethod
    def parse(cls, value: Any) -> "Priority":
        """Parse a tier from its storage integer, its label or an existing member.

        None maps to DEFAULT_PRIORITY.

        Raises:
            ValueError: If the value names no tier
        """
        if value is None:
            return DEFAULT_PRIORITY
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            label = value.strip().lower()
            if label.isdigit():
                return cls(int(label))
            for member in cls:
                if member.label == label:
                    return member
            raise ValueError(f"Unknown priority: {value!r}")
        return cls(value)


# Tier given to a keyword that is selected without an explicit priority
DEFAULT_PRIORITY = Priority.PREFERRED


class PartyType(str, Enum):
    """Which side of the marketplace a party is on."""

    JOB_SEEKER = "job_seeker"
    EMPLOYER = "employer"

    @classmethod
    def _missing_(cls, value):
        # Legacy profile rows store 'user' / 'company'
        aliases = {"user": cls.JOB_SEEKER, "company": cls.EMPLOYER}
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None

    @property
    def counterpart(self) -> "PartyType":
        return PartyType.EMPLOYER if self is PartyType.JOB_SEEKER else PartyType.JOB_SEEKER


class Keyword(BaseModel):
    """Catalog keyword: a categorised tag such as a skill, benefit or location."""

    id: int = Field(..., description="Unique keyword identifier")
    text: str = Field(..., description="Display text")
    category: str = Field(..., description="Category (Skills, Experience, Location, ...)")

    @field_validator("text", "category")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": 12,
        "text": "Forklift licence",
        "category": "Skills",
    }}}


class KeywordSelection(BaseModel):
    """A party's selection of one keyword.

    ``category`` is optional denormalised data carried by the wire record; the
    catalog remains the authority for keyword metadata.
    """

    keyword_id: int = Field(..., description="Selected keyword")
    priority: Priority = Field(DEFAULT_PRIORITY, description="required or preferred")
    category: Optional[str] = Field(None, description="Keyword category, if known")

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, v: Any) -> Priority:
        return Priority.parse(v)

    model_config = {"frozen": True}


class PartyProfile(BaseModel):
    """Displayable profile fields of a job seeker or an employer.

    The matcher only reads ``party_id``; everything else is passed through to
    the ranked output.
    """

    party_id: str = Field(..., description="Unique party identifier")
    party_type: PartyType = Field(..., description="job_seeker or employer")
    name: Optional[str] = Field(None, description="Person or company name")
    email: Optional[EmailStr] = Field(None, description="Contact email")
    description: Optional[str] = Field(None, description="Free-text description")
    location: Optional[str] = Field(None, description="Address or location")
    website: Optional[str] = Field(None, description="Company website")
    country: Optional[str] = Field(None, description="Country")
    created_at: Optional[datetime] = Field(None, description="Registration time (UTC)")

    @field_validator("party_id")
    @classmethod
    def validate_party_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("party_id cannot be empty")
        return v.strip()

    @field_validator("party_type", mode="before")
    @classmethod
    def parse_party_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return PartyType(v)
        return v

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("email", "name", "description", "location", "website", "country", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            stripped = v.strip()
            return stripped if stripped else None
        return v

    model_config = {"json_schema_extra": {"example": {
        "party_id": "8c1f2d7e",
        "party_type": "employer",
        "name": "Harbour Logistics",
        "email": "jobs@harbourlogistics.com",
        "description": "Warehouse and distribution",
        "location": "Busan",
        "website": "https://harbourlogistics.com",
        "country": "KR",
    }}}


class PartyRecord(BaseModel):
    """Profile plus keyword selections, the unit the matcher consumes.

    Accepts the nested form ``{"profile": {...}, "keyword_selections": [...]}``
    and the flat wire form where profile fields sit next to
    ``keyword_selections``.
    """

    profile: PartyProfile
    keyword_selections: List[KeywordSelection] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_flat_record(cls, data: Any) -> Any:
        if isinstance(data, dict) and "profile" not in data:
            data = dict(data)
            selections = data.pop("keyword_selections", [])
            return {"profile": data, "keyword_selections": selections}
        return data

    @property
    def party_id(self) -> str:
        return self.profile.party_id

    @property
    def party_type(self) -> PartyType:
        return self.profile.party_type
