"""Directory views: search and category filtering of party records."""

from .search import (
    ALL_CATEGORIES,
    filter_profiles,
    list_categories,
    matches_category,
    matches_search,
    record_categories,
)

__all__ = [
    "ALL_CATEGORIES",
    "filter_profiles",
    "list_categories",
    "matches_category",
    "matches_search",
    "record_categories",
]
