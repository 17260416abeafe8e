# backend/app/repositories/base_repository.py
"""
Base Repository Pattern for CoachConnect

Provides the foundation for all repository classes with:
- Common CRUD operations
- Type safety with generics
- Transaction support (managed by services)
- Conditional (compare-and-set) status updates

Repositories never commit; the service layer owns the transaction.
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Concrete base repository implementation with common data access patterns.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {self.model.__name__} by id {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {str(e)}")

    def refresh(self, instance: T) -> None:
        """Refresh an instance from the database."""
        self.db.refresh(instance)

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity
        except IntegrityError as exc:
            self.logger.error("Integrity error creating %s: %s", self.model.__name__, exc)
            self.db.rollback()
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}")

    def update_if_status(self, id: str, expected_status: Any, **values: Any) -> bool:
        """
        Compare-and-set: apply ``values`` only while the row still has ``expected_status``.

        Returns True when exactly one row changed. False means the row is gone
        or another writer moved it first. In-session instances are not
        synchronized; callers refresh what they hold.
        """
        try:
            stmt = (
                update(self.model)
                .where(self.model.id == id, self.model.status == expected_status)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            result = self.db.execute(stmt)
            changed = result.rowcount == 1
            if not changed:
                self.logger.info(
                    "Conditional update on %s %s matched no rows (expected status %s)",
                    self.model.__name__,
                    id,
                    getattr(expected_status, "value", expected_status),
                )
            return changed
        except SQLAlchemyError as e:
            self.logger.error(f"Error conditionally updating {self.model.__name__} {id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to update {self.model.__name__}: {str(e)}")

    def get_current_status(self, id: str) -> Any:
        """Stored status of a row read straight from the database (None if the row is gone)."""
        try:
            return self.db.query(self.model.status).filter(self.model.id == id).scalar()
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading status of {self.model.__name__} {id}: {str(e)}")
            raise RepositoryException(f"Failed to read {self.model.__name__} status: {str(e)}")

    def exists(self, **kwargs: Any) -> bool:
        try:
            return self._build_query().filter_by(**kwargs).first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking existence: {str(e)}")
            raise RepositoryException(f"Failed to check existence: {str(e)}")

    def count(self, **kwargs: Any) -> int:
        try:
            return self._build_query().filter_by(**kwargs).count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting records: {str(e)}")
            raise RepositoryException(f"Failed to count records: {str(e)}")

    def find_one_by(self, **kwargs: Any) -> Optional[T]:
        try:
            return self._build_query().filter_by(**kwargs).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding {self.model.__name__} record: {str(e)}")
            raise RepositoryException(f"Failed to find record: {str(e)}")

    def _build_query(self) -> Query:
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[T]:
        try:
            return query.all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error executing {self.model.__name__} query: {str(e)}")
            raise RepositoryException(f"Query failed: {str(e)}")
