"""SQLAlchemy-backed stores (PostgreSQL and SQLite).

Each store is bound to a single SQLAlchemy Connection owned by a unit of
work; the stores never commit or roll back themselves.
"""

from .bookings import SqlAlchemyBookingReader
from .reviews import SqlAlchemyReviewStore
from .tutor_profiles import SqlAlchemyTutorProfileStore

__all__ = [
    "SqlAlchemyBookingReader",
    "SqlAlchemyReviewStore",
    "SqlAlchemyTutorProfileStore",
]
