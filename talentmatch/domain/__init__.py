"""Domain models for the matching service."""

from .models import (
    DEFAULT_PRIORITY,
    Keyword,
    KeywordSelection,
    PartyProfile,
    PartyRecord,
    PartyType,
    Priority,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "Keyword",
    "KeywordSelection",
    "PartyProfile",
    "PartyRecord",
    "PartyType",
    "Priority",
]
