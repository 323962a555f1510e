"""Data access layer (repositories) for persistence operations.

Repositories wrap a caller-owned session and return domain models rather
than ORM models. They flush but never commit; the surrounding
``get_session()`` block owns the transaction.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from talentmatch.domain.models import Keyword, KeywordSelection, PartyProfile, PartyType
from talentmatch.selection.exceptions import MalformedSelectionError

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import KeywordModel, KeywordSelectionModel, ProfileModel

logger = logging.getLogger(__name__)


class KeywordRepository:
    """Repository for the keyword catalog."""

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> List[Keyword]:
        """All catalog keywords ordered by category, then text.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(KeywordModel).order_by(KeywordModel.category, KeywordModel.text)
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving keyword catalog: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve keywords: {e}") from e

    def get_by_ids(self, keyword_ids: Iterable[int]) -> List[Keyword]:
        """Keywords with the given ids; unknown ids are simply absent.

        Raises:
            PersistenceError: If database error occurs
        """
        keyword_ids = list(set(keyword_ids))
        if not keyword_ids:
            return []

        try:
            stmt = (
                select(KeywordModel)
                .where(KeywordModel.id.in_(keyword_ids))
                .order_by(KeywordModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving keywords {keyword_ids}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve keywords: {e}") from e

    def upsert(self, keyword: Keyword) -> Keyword:
        """Insert a catalog keyword or update its text and category.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(KeywordModel, keyword.id)
            if existing:
                existing.text = keyword.text
                existing.category = keyword.category
                self.session.flush()
                return existing.to_domain()

            model = KeywordModel.from_domain(keyword)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting keyword {keyword.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert keyword: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting keyword {keyword.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert keyword: {e}") from e

    def bulk_upsert(self, keywords: Iterable[Keyword]) -> List[Keyword]:
        return [self.upsert(keyword) for keyword in keywords]


class ProfileRepository:
    """Repository for job seeker and employer profiles."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, party_id: str) -> Optional[PartyProfile]:
        """Retrieve a profile by id, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ProfileModel, party_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving profile {party_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve profile: {e}") from e

    def list_by_type(self, party_type: PartyType) -> List[PartyProfile]:
        """All profiles of one party type, newest first.

        Raises:
            PersistenceError: If database error occurs
            pydantic.ValidationError: If a stored row is not a valid profile
        """
        return [model.to_domain() for model in self._models_by_type(party_type)]

    def list_rows_by_type(self, party_type: PartyType) -> List[Dict[str, Any]]:
        """Raw stored rows of one party type, newest first.

        Rows are returned unvalidated so that a caller can reject bad rows
        one at a time instead of failing the whole listing.

        Args:
            party_type: Party type to list

        Returns:
            List of column-name to value mappings

        Raises:
            PersistenceError: If database error occurs
        """
        return [model.to_row() for model in self._models_by_type(party_type)]

    def _models_by_type(self, party_type: PartyType) -> List[ProfileModel]:
        try:
            stmt = (
                select(ProfileModel)
                .where(ProfileModel.party_type == PartyType(party_type).value)
                .order_by(ProfileModel.created_at.desc(), ProfileModel.party_id)
            )
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing {party_type} profiles: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list profiles: {e}") from e

    def upsert(self, profile: PartyProfile) -> PartyProfile:
        """Insert a new profile or update an existing one.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(ProfileModel, profile.party_id)
            if existing:
                existing.apply(profile)
                self.session.flush()
                return existing.to_domain()

            model = ProfileModel.from_domain(profile)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting profile {profile.party_id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert profile: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting profile {profile.party_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert profile: {e}") from e


class KeywordSelectionRepository:
    """Repository for parties' keyword selections."""

    def __init__(self, session: Session):
        self.session = session

    def get_for_party(self, party_id: str) -> List[KeywordSelection]:
        """A party's selections with catalog categories, ordered by keyword id.

        Raises:
            PersistenceError: If database error occurs
        """
        return self.get_for_parties([party_id]).get(party_id, [])

    def get_for_parties(self, party_ids: Iterable[str]) -> Dict[str, List[KeywordSelection]]:
        """Selections for many parties in one query.

        Returns:
            Mapping of party id to selections; parties without selections map
            to an empty list

        Raises:
            PersistenceError: If database error occurs
        """
        party_ids = list(party_ids)
        grouped: Dict[str, List[KeywordSelection]] = {party_id: [] for party_id in party_ids}
        if not party_ids:
            return grouped

        try:
            stmt = (
                select(KeywordSelectionModel, KeywordModel.category)
                .join(KeywordModel, KeywordModel.id == KeywordSelectionModel.keyword_id)
                .where(KeywordSelectionModel.party_id.in_(party_ids))
                .order_by(KeywordSelectionModel.party_id, KeywordSelectionModel.keyword_id)
            )
            for selection_model, category in self.session.execute(stmt).all():
                grouped[selection_model.party_id].append(selection_model.to_domain(category))
            return grouped

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving selections for {len(party_ids)} parties: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve keyword selections: {e}") from e

    def replace_all(self, party_id: str, selections: Iterable[KeywordSelection]) -> int:
        """Replace a party's whole selection set: delete all rows, insert new ones.

        Both statements run in the caller's transaction, so the replace is one
        unit of work: if the insert fails, rolling back the session restores
        the previous selections. Exact duplicate rows are collapsed; a keyword
        listed in both tiers is rejected before anything is written.

        Args:
            party_id: Owner of the selections
            selections: The complete new selection set

        Returns:
            Number of rows written

        Raises:
            RecordNotFoundError: If the party has no profile
            MalformedSelectionError: If a keyword appears in both tiers
            DataIntegrityError: If a keyword is not in the catalog
            PersistenceError: If another database error occurs
        """
        rows: Dict[int, KeywordSelection] = {}
        conflicts = set()
        for selection in selections:
            previous = rows.get(selection.keyword_id)
            if previous is not None and previous.priority != selection.priority:
                conflicts.add(selection.keyword_id)
            rows.setdefault(selection.keyword_id, selection)

        if conflicts:
            raise MalformedSelectionError(conflicts, party_id=party_id)

        try:
            if self.session.get(ProfileModel, party_id) is None:
                raise RecordNotFoundError(f"Profile {party_id} not found")

            result = self.session.execute(
                delete(KeywordSelectionModel).where(KeywordSelectionModel.party_id == party_id)
            )
            self.session.add_all(
                KeywordSelectionModel.from_domain(party_id, rows[keyword_id])
                for keyword_id in sorted(rows)
            )
            self.session.flush()

            logger.info(
                f"Replaced keyword selections for {party_id}",
                extra={
                    "event": "selection.replaced",
                    "party_id": party_id,
                    "deleted": result.rowcount,
                    "inserted": len(rows),
                },
            )
            return len(rows)

        except RecordNotFoundError:
            raise
        except IntegrityError as e:
            logger.error(f"Integrity error replacing selections for {party_id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to replace keyword selections due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error replacing selections for {party_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to replace keyword selections: {e}") from e
