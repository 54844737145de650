"""SQLAlchemy-backed TutorProfileStore.

Per-tutor exclusivity is obtained differently per backend:

- PostgreSQL: ``SELECT ... FOR UPDATE`` on the profile row, bounded by the
  ``lock_timeout`` the unit of work sets when it opens the transaction. Units
  touching other tutors are not blocked.
- SQLite: there are no row locks. A no-op ``UPDATE`` on the profile row makes
  sure the transaction holds the database write lock (SQLite allows a single
  writer), which serializes every recompute. Wait time is bounded by the
  connection's ``busy_timeout``.

Lock waits that time out surface as `TransientStorageError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError

from plaudit.adapters.db.dialects import DialectName, UnsupportedDialect
from plaudit.adapters.db.errors import translate_dbapi_error
from plaudit.adapters.persistence.schema import tutor_profiles
from plaudit.domain.errors import TutorProfileNotFoundError
from plaudit.domain.model import TutorAggregate
from plaudit.interfaces.tutor_profiles import TutorProfileStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection


class SqlAlchemyTutorProfileStore(TutorProfileStore):
    """TutorProfileStore that supports both PostgreSQL and SQLite."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.dialect = DialectName.from_sqlalchemy(connection)
        self._locked: set[str] = set()

    # --- locking ---

    def lock(self, tutor_profile_id: str) -> None:
        if tutor_profile_id in self._locked:
            return

        try:
            found = self._acquire(tutor_profile_id)
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e

        if not found:
            raise TutorProfileNotFoundError(tutor_profile_id)
        self._locked.add(tutor_profile_id)

    def _acquire(self, tutor_profile_id: str) -> bool:
        if self.dialect is DialectName.POSTGRES:
            stmt = (
                select(tutor_profiles.c.id)
                .where(tutor_profiles.c.id == tutor_profile_id)
                .with_for_update()
            )
            return self.connection.execute(stmt).first() is not None

        if self.dialect is DialectName.SQLITE:
            stmt = (
                update(tutor_profiles)
                .where(tutor_profiles.c.id == tutor_profile_id)
                .values(total_reviews=tutor_profiles.c.total_reviews)
            )
            return self.connection.execute(stmt).rowcount == 1

        # DialectName.from_sqlalchemy already rejects anything else.
        msg = f"Unsupported dialect: {self.dialect}"  # pragma: no cover # pragma: no mutate
        raise UnsupportedDialect(msg)  # pragma: no cover # pragma: no mutate

    # --- aggregate ---

    def get_aggregate(self, tutor_profile_id: str) -> TutorAggregate | None:
        stmt = select(tutor_profiles.c.rating, tutor_profiles.c.total_reviews).where(
            tutor_profiles.c.id == tutor_profile_id
        )
        try:
            row = self.connection.execute(stmt).fetchone()
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e

        if row is None:
            return None
        return TutorAggregate(rating=row.rating, total_reviews=int(row.total_reviews))

    def save_aggregate(self, tutor_profile_id: str, aggregate: TutorAggregate) -> None:
        stmt = (
            update(tutor_profiles)
            .where(tutor_profiles.c.id == tutor_profile_id)
            .values(rating=aggregate.rating, total_reviews=aggregate.total_reviews)
        )
        try:
            result = self.connection.execute(stmt)
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e

        if result.rowcount != 1:
            raise TutorProfileNotFoundError(tutor_profile_id)
