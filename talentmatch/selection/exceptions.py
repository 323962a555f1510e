"""Errors raised while validating keyword selections.

Everything inherits from MatchingError so callers can catch selection and
scoring problems with a single except clause.
"""

from typing import Iterable, Optional


class MatchingError(Exception):
    """Base exception for keyword selection and matching errors."""

    pass


class UnknownKeywordError(MatchingError):
    """A selection references a keyword that is not in the catalog."""

    def __init__(self, keyword_id: int, party_id: Optional[str] = None):
        self.keyword_id = keyword_id
        self.party_id = party_id
        owner = f" (party {party_id})" if party_id else ""
        super().__init__(f"Unknown keyword id {keyword_id}{owner}")


class MalformedSelectionError(MatchingError):
    """A party marks the same keyword as both required and preferred.

    The scorer assumes disjoint tiers, so such a set is rejected at the
    selection boundary.
    """

    def __init__(self, keyword_ids: Iterable[int], party_id: Optional[str] = None):
        self.keyword_ids = sorted(keyword_ids)
        self.party_id = party_id
        owner = f"Party {party_id}" if party_id else "Selection"
        super().__init__(
            f"{owner} lists keywords as both required and preferred: {self.keyword_ids}"
        )
