"""In-memory view of the shared keyword catalog."""

from typing import Dict, Iterable, Iterator, List, Optional

from talentmatch.domain.models import Keyword


class KeywordCatalog:
    """Read-only lookup over catalog keywords, keyed by id.

    Keywords are kept in (category, text) order, the order the keyword
    pickers display them in. Iterating the catalog yields keywords in that
    order.
    """

    def __init__(self, keywords: Iterable[Keyword]):
        """
        Build the catalog.

        Args:
            keywords: Catalog keywords in any order, with unique ids
        """
        ordered = sorted(keywords, key=lambda k: (k.category, k.text, k.id))
        self._keywords: Dict[int, Keyword] = {k.id: k for k in ordered}

    def __contains__(self, keyword_id: object) -> bool:
        return keyword_id in self._keywords

    def __len__(self) -> int:
        return len(self._keywords)

    def __iter__(self) -> Iterator[Keyword]:
        return iter(self._keywords.values())

    def get(self, keyword_id: int) -> Optional[Keyword]:
        """
        Look up a keyword.

        Args:
            keyword_id: Catalog id

        Returns:
            The keyword, or None if the id is not in the catalog
        """
        return self._keywords.get(keyword_id)

    def category_of(self, keyword_id: int) -> Optional[str]:
        """
        Category of a keyword.

        Args:
            keyword_id: Catalog id

        Returns:
            Category name, or None if the id is not in the catalog
        """
        keyword = self._keywords.get(keyword_id)
        return keyword.category if keyword else None

    def categories(self) -> List[str]:
        """
        Distinct categories in display order.

        Returns:
            Category names, each listed once
        """
        seen: Dict[str, None] = {}
        for keyword in self._keywords.values():
            seen.setdefault(keyword.category, None)
        return list(seen)

    def grouped(self) -> Dict[str, List[Keyword]]:
        """
        Keywords grouped by category, as the keyword pickers show them.

        Returns:
            Mapping of category name to its keywords, both in display order
        """
        groups: Dict[str, List[Keyword]] = {}
        for keyword in self._keywords.values():
            groups.setdefault(keyword.category, []).append(keyword)
        return groups
