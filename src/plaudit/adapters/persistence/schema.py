"""Review workflow schema.

Defines the three tables the review workflow touches. ``bookings`` and the
identity of ``tutor_profiles`` are owned by other parts of the marketplace;
this service reads bookings, appends reviews and rewrites the two aggregate
columns on ``tutor_profiles``.

Constraints (enforced here):

| Constraint                          | Purpose                              |
|-------------------------------------|--------------------------------------|
| UNIQUE(reviews.booking_id)          | at most one review per booking       |
| CHECK(rating BETWEEN 1 AND 5)       | rating range                         |
| CHECK(length(reviews.id) = 26)      | ULID review ids                      |
| CHECK(total_reviews >= 0)           | aggregate count is non-negative      |
| CHECK(rating BETWEEN 0 AND 5)       | aggregate average range              |
| CHECK(status IN (...))              | known booking states only            |

The unique constraint on ``booking_id`` is the authoritative duplicate guard;
the application-level "already reviewed?" check only gives a nicer error.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    text,
)

from plaudit.adapters.db.metadata import metadata
from plaudit.adapters.db.sa_types import TenthsDecimal, UTCDateTime
from plaudit.domain.model import MAX_COMMENT_LENGTH

__all__ = ["bookings", "reviews", "tutor_profiles"]

ID_LENGTH = 36
REVIEW_ID_LENGTH = 26

tutor_profiles = Table(
    "tutor_profiles",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True, comment="Tutor profile id."),
    Column(
        "rating",
        TenthsDecimal(),
        nullable=False,
        server_default=text("0"),
        comment="Average review rating, rounded half-up to one decimal.",
    ),
    Column(
        "total_reviews",
        Integer,
        nullable=False,
        server_default=text("0"),
        comment="Number of reviews across all of the tutor's bookings.",
    ),
    CheckConstraint("total_reviews >= 0", name="non_negative_total_reviews"),
    CheckConstraint("rating >= 0 AND rating <= 5", name="rating_range"),
    comment="Tutor profiles. Only the aggregate columns are written here.",
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True, comment="Booking id."),
    Column(
        "student_id",
        String(ID_LENGTH),
        nullable=False,
        comment="User id of the student who made the booking.",
    ),
    Column(
        "tutor_profile_id",
        String(ID_LENGTH),
        ForeignKey("tutor_profiles.id"),
        nullable=False,
        comment="Tutor profile the booking is with.",
    ),
    Column(
        "status",
        String(20),
        nullable=False,
        comment="PENDING, CONFIRMED, COMPLETED or CANCELLED.",
    ),
    CheckConstraint(
        "status IN ('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED')",
        name="known_status",
    ),
    Index(None, "tutor_profile_id"),
    comment="Bookings, owned by the booking lifecycle. Read-only here.",
)

reviews = Table(
    "reviews",
    metadata,
    Column(
        "id",
        String(REVIEW_ID_LENGTH),
        primary_key=True,
        comment="ULID (26 chars).",
    ),
    Column(
        "booking_id",
        String(ID_LENGTH),
        ForeignKey("bookings.id"),
        nullable=False,
        comment="Reviewed booking. Unique: one review per booking.",
    ),
    Column(
        "user_id",
        String(ID_LENGTH),
        nullable=False,
        comment="User id of the reviewer.",
    ),
    Column("rating", Integer, nullable=False, comment="Rating from 1 to 5."),
    Column(
        "comment",
        String(MAX_COMMENT_LENGTH),
        nullable=True,
        comment="Sanitized comment, or NULL for no comment.",
    ),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Server-assigned UTC timestamp.",
    ),
    UniqueConstraint("booking_id"),
    CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
    CheckConstraint("length(id) = 26", name="id_26_char"),
    comment="Reviews. Append-only: one row per reviewed booking.",
)
