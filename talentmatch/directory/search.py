"""Browse parties by free-text search and keyword category.

Backs the public company list and the employer's candidate list, which are
plain directory views with no scoring involved.
"""

from typing import Iterable, List, Optional

from talentmatch.domain.models import PartyRecord
from talentmatch.selection.catalog import KeywordCatalog

ALL_CATEGORIES = "all"

SEARCHABLE_FIELDS = ("name", "email", "description", "location", "country")


def matches_search(record: PartyRecord, search_term: Optional[str]) -> bool:
    """Case-insensitive substring search over the profile's text fields.

    An empty or missing term matches every record.
    """
    if not search_term or not search_term.strip():
        return True

    needle = search_term.strip().lower()
    for field_name in SEARCHABLE_FIELDS:
        value = getattr(record.profile, field_name)
        if value and needle in str(value).lower():
            return True
    return False


def record_categories(
    record: PartyRecord, catalog: Optional[KeywordCatalog] = None
) -> List[str]:
    """Categories of a record's keywords in selection order, without repeats."""
    seen = {}
    for selection in record.keyword_selections:
        category = catalog.category_of(selection.keyword_id) if catalog is not None else None
        category = category or selection.category
        if category:
            seen.setdefault(category, None)
    return list(seen)


def matches_category(
    record: PartyRecord,
    category: Optional[str],
    catalog: Optional[KeywordCatalog] = None,
) -> bool:
    """True if the record holds a keyword in ``category`` ('all'/None match everything)."""
    if category is None or category == ALL_CATEGORIES:
        return True
    return category in record_categories(record, catalog)


def filter_profiles(
    records: Iterable[PartyRecord],
    search_term: Optional[str] = None,
    category: Optional[str] = None,
    catalog: Optional[KeywordCatalog] = None,
) -> List[PartyRecord]:
    """
    Records passing both the text search and the category filter.

    Args:
        records: Profiles with their keyword selections
        search_term: Case-insensitive text matched against name, description,
            location, email and country; empty or None matches every record
        category: Keyword category to require; None or 'all' disables the filter
        catalog: Catalog used to resolve categories of selections that lack one

    Returns:
        Matching records in input order
    """
    return [
        record
        for record in records
        if matches_search(record, search_term) and matches_category(record, category, catalog)
    ]


def list_categories(
    records: Iterable[PartyRecord], catalog: Optional[KeywordCatalog] = None
) -> List[str]:
    """Distinct keyword categories across records, in first-seen order."""
    seen = {}
    for record in records:
        for category in record_categories(record, catalog):
            seen.setdefault(category, None)
    return list(seen)
