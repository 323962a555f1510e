"""Database schema definition and ORM models.

Three tables back the matcher:
- keywords: the shared catalog
- profiles: job seeker and employer profiles
- keyword_selections: one row per (party, keyword) with its priority tier
"""

import logging
from typing import Any, Dict

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from talentmatch.domain.models import Keyword, KeywordSelection, PartyProfile, Priority
from talentmatch.utils.timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

Base = declarative_base()


class KeywordModel(Base):
    """ORM model for the keywords catalog table."""

    __tablename__ = "keywords"

    id = Column(Integer, primary_key=True, autoincrement=False)
    text = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)

    __table_args__ = (Index("idx_keywords_category", "category", "text"),)

    def to_domain(self) -> Keyword:
        return Keyword(id=self.id, text=self.text, category=self.category)

    @classmethod
    def from_domain(cls, keyword: Keyword) -> "KeywordModel":
        return cls(id=keyword.id, text=keyword.text, category=keyword.category)


class ProfileModel(Base):
    """ORM model for the profiles table (both party types)."""

    __tablename__ = "profiles"

    party_id = Column(String(64), primary_key=True, nullable=False)
    party_type = Column(String(20), nullable=False)

    name = Column(String(255), nullable=True)
    email = Column(String(320), nullable=True)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    website = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)

    # ISO 8601 string, lexically sortable
    created_at = Column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_profiles_type_created", "party_type", "created_at"),
    )

    def to_domain(self) -> PartyProfile:
        return PartyProfile(
            party_id=self.party_id,
            party_type=self.party_type,
            name=self.name,
            email=self.email,
            description=self.description,
            location=self.location,
            website=self.website,
            country=self.country,
            created_at=parse_timestamp(self.created_at),
        )

    def to_row(self) -> Dict[str, Any]:
        """Stored column values as-is, without domain validation."""
        return {
            "party_id": self.party_id,
            "party_type": self.party_type,
            "name": self.name,
            "email": self.email,
            "description": self.description,
            "location": self.location,
            "website": self.website,
            "country": self.country,
            "created_at": self.created_at,
        }

    @classmethod
    def from_domain(cls, profile: PartyProfile) -> "ProfileModel":
        model = cls(party_id=profile.party_id)
        model.apply(profile)
        return model

    def apply(self, profile: PartyProfile) -> None:
        """Copy mutable profile fields from a domain model."""
        self.party_type = profile.party_type.value
        self.name = profile.name
        self.email = str(profile.email) if profile.email else None
        self.description = profile.description
        self.location = profile.location
        self.website = profile.website
        self.country = profile.country
        self.created_at = format_timestamp(profile.created_at)


class KeywordSelectionModel(Base):
    """ORM model for keyword_selections.

    The composite primary key makes a (party, keyword) pair unique, so a
    keyword can only ever hold one tier per party.
    """

    __tablename__ = "keyword_selections"

    party_id = Column(
        String(64),
        ForeignKey("profiles.party_id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    keyword_id = Column(
        Integer,
        ForeignKey("keywords.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    priority = Column(Integer, nullable=False, default=int(Priority.PREFERRED))

    __table_args__ = (
        CheckConstraint("priority IN (1, 2)", name="ck_keyword_selections_priority"),
        Index("idx_keyword_selections_keyword", "keyword_id"),
    )

    def to_domain(self, category: str = None) -> KeywordSelection:
        return KeywordSelection(
            keyword_id=self.keyword_id,
            priority=self.priority,
            category=category,
        )

    @classmethod
    def from_domain(cls, party_id: str, selection: KeywordSelection) -> "KeywordSelectionModel":
        return cls(
            party_id=party_id,
            keyword_id=selection.keyword_id,
            priority=int(selection.priority),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
