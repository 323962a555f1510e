"""Keyword selection model and catalog.

This module provides:
- KeywordCatalog: read-only lookup over the shared keyword catalog
- KeywordSelectionSet: one party's required/preferred keyword choices
- The selection error hierarchy (MatchingError and subclasses)
"""

from .catalog import KeywordCatalog
from .exceptions import MalformedSelectionError, MatchingError, UnknownKeywordError
from .model import KeywordSelectionSet

__all__ = [
    "KeywordCatalog",
    "KeywordSelectionSet",
    "MatchingError",
    "MalformedSelectionError",
    "UnknownKeywordError",
]
