"""Keyword selection model: one party's tagged keyword choices.

A keyword is held in exactly one tier at a time. Moving a keyword to the
other tier is a reassignment, never an addition, so the required and
preferred id sets are disjoint by construction.

Strictness: with a catalog attached and ``strict=True`` (the default),
referencing an unknown keyword raises UnknownKeywordError. With
``strict=False`` the call is logged and ignored. Without a catalog every id
is accepted.
"""

from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Union

from talentmatch.domain.models import DEFAULT_PRIORITY, KeywordSelection, Priority
from talentmatch.logging import get_logger

from .catalog import KeywordCatalog
from .exceptions import MalformedSelectionError, UnknownKeywordError

logger = get_logger(__name__, component="selection")

TierLike = Union[Priority, int, str]


class KeywordSelectionSet:
    """Mutable set of keyword selections for one party."""

    def __init__(
        self,
        party_id: Optional[str] = None,
        catalog: Optional[KeywordCatalog] = None,
        strict: bool = True,
        default_priority: TierLike = DEFAULT_PRIORITY,
    ):
        """Initialize an empty selection set.

        Args:
            party_id: Owner of the selections (used in errors and logs)
            catalog: Catalog used to validate keyword ids and look up categories
            strict: Raise on unknown keywords instead of ignoring them
            default_priority: Tier assigned by toggle()
        """
        self.party_id = party_id
        self.catalog = catalog
        self.strict = strict
        self.default_priority = Priority.parse(default_priority)
        self._tiers: Dict[int, Priority] = {}
        self._categories: Dict[int, str] = {}

    @classmethod
    def from_records(
        cls,
        records: Iterable[KeywordSelection],
        party_id: Optional[str] = None,
        catalog: Optional[KeywordCatalog] = None,
        strict: bool = True,
        default_priority: TierLike = DEFAULT_PRIORITY,
        normalize_conflicts: bool = False,
    ) -> "KeywordSelectionSet":
        """Build a selection set from stored or wire-level rows.

        Args:
            records: Selection rows, possibly with repeated keywords
            normalize_conflicts: Resolve a keyword listed in both tiers to
                required instead of raising MalformedSelectionError

        Raises:
            MalformedSelectionError: Keyword in both tiers and not normalising
            UnknownKeywordError: Unknown keyword in strict mode
        """
        selection_set = cls(
            party_id=party_id,
            catalog=catalog,
            strict=strict,
            default_priority=default_priority,
        )
        selection_set.replace_all(records, normalize_conflicts=normalize_conflicts)
        return selection_set

    # Mutations

    def set_priority(self, keyword_id: int, tier: TierLike) -> bool:
        """Put a keyword in the given tier, adding it if absent.

        A keyword held in the opposite tier is moved.

        Returns:
            True if the keyword is now held at ``tier``, False if it was
            ignored as unknown (non-strict mode)
        """
        tier = Priority.parse(tier)
        if not self._accept(keyword_id):
            return False
        self._tiers[keyword_id] = tier
        return True

    def toggle(self, keyword_id: int) -> bool:
        """Add a keyword at the default tier, or remove it from both tiers.

        Returns:
            True if the keyword is selected after the call
        """
        if keyword_id in self._tiers:
            self._remove(keyword_id)
            return False
        return self.set_priority(keyword_id, self.default_priority)

    def toggle_tier(self, keyword_id: int, tier: TierLike) -> bool:
        """Tier-specific toggle used by the employer requirements editor.

        Clicking the tier a keyword already holds deselects it; clicking the
        other tier moves it.

        Returns:
            True if the keyword is selected after the call
        """
        tier = Priority.parse(tier)
        if self._tiers.get(keyword_id) is tier:
            self._remove(keyword_id)
            return False
        return self.set_priority(keyword_id, tier)

    def replace_all(
        self,
        selections: Iterable[KeywordSelection],
        normalize_conflicts: bool = False,
    ) -> None:
        """Discard the current selections and install a new set.

        The whole new set is validated before anything changes; if validation
        fails the previous selections are left untouched.

        Raises:
            MalformedSelectionError: Keyword in both tiers and not normalising
            UnknownKeywordError: Unknown keyword in strict mode
        """
        tiers: Dict[int, Priority] = {}
        categories: Dict[int, str] = {}
        conflicts = set()

        for selection in selections:
            if not isinstance(selection, KeywordSelection):
                selection = KeywordSelection.model_validate(selection)
            keyword_id = selection.keyword_id

            if not self._accept(keyword_id):
                continue

            if selection.category:
                categories[keyword_id] = selection.category

            previous = tiers.get(keyword_id)
            if previous is None or previous is selection.priority:
                tiers[keyword_id] = selection.priority
                continue

            if not normalize_conflicts:
                conflicts.add(keyword_id)
                continue

            logger.warning(
                f"Keyword {keyword_id} selected as both required and preferred; keeping required",
                extra={
                    "event": "selection.conflict.normalized",
                    "party_id": self.party_id,
                    "keyword_id": keyword_id,
                },
            )
            tiers[keyword_id] = Priority.REQUIRED

        if conflicts:
            raise MalformedSelectionError(conflicts, party_id=self.party_id)

        self._tiers = tiers
        self._categories = categories

    # Queries

    def priority(self, keyword_id: int) -> Optional[Priority]:
        return self._tiers.get(keyword_id)

    def required_ids(self) -> FrozenSet[int]:
        return frozenset(k for k, tier in self._tiers.items() if tier is Priority.REQUIRED)

    def preferred_ids(self) -> FrozenSet[int]:
        return frozenset(k for k, tier in self._tiers.items() if tier is Priority.PREFERRED)

    def all_ids(self) -> FrozenSet[int]:
        return frozenset(self._tiers)

    def by_category(self, category: str) -> List[int]:
        """Selected keyword ids in ``category``, in selection order."""
        return [k for k in self._tiers if self.category_of(k) == category]

    def category_of(self, keyword_id: int) -> Optional[str]:
        if self.catalog is not None:
            category = self.catalog.category_of(keyword_id)
            if category is not None:
                return category
        return self._categories.get(keyword_id)

    def to_records(self) -> List[KeywordSelection]:
        """Rows to persist, ordered by keyword id."""
        return [
            KeywordSelection(
                keyword_id=keyword_id,
                priority=self._tiers[keyword_id],
                category=self.category_of(keyword_id),
            )
            for keyword_id in sorted(self._tiers)
        ]

    def __contains__(self, keyword_id: object) -> bool:
        return keyword_id in self._tiers

    def __len__(self) -> int:
        return len(self._tiers)

    def __iter__(self) -> Iterator[int]:
        return iter(self._tiers)

    def __repr__(self) -> str:
        return (
            f"KeywordSelectionSet(party_id={self.party_id!r}, "
            f"required={sorted(self.required_ids())}, preferred={sorted(self.preferred_ids())})"
        )

    # Internals

    def _remove(self, keyword_id: int) -> None:
        self._tiers.pop(keyword_id, None)
        self._categories.pop(keyword_id, None)

    def _accept(self, keyword_id: int) -> bool:
        if self.catalog is None or keyword_id in self.catalog:
            return True
        if self.strict:
            raise UnknownKeywordError(keyword_id, party_id=self.party_id)
        logger.warning(
            f"Ignoring unknown keyword {keyword_id}",
            extra={
                "event": "selection.keyword.unknown",
                "party_id": self.party_id,
                "keyword_id": keyword_id,
            },
        )
        return False
