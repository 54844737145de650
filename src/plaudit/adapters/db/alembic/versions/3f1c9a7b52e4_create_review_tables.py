"""create tutor_profiles, bookings and reviews tables

Revision ID: 3f1c9a7b52e4
Revises:
Create Date: 2026-10-12 14:05:31.482116

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from plaudit.adapters.db.sa_types import TenthsDecimal, UTCDateTime

# pylint: disable=no-member

revision: str = "3f1c9a7b52e4"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "tutor_profiles",
        sa.Column(
            "id", sa.String(length=36), nullable=False, comment="Tutor profile id."
        ),
        sa.Column(
            "rating",
            TenthsDecimal(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Average review rating, rounded half-up to one decimal.",
        ),
        sa.Column(
            "total_reviews",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of reviews across all of the tutor's bookings.",
        ),
        sa.CheckConstraint(
            "total_reviews >= 0",
            name=op.f("ck_tutor_profiles_non_negative_total_reviews"),
        ),
        sa.CheckConstraint(
            "rating >= 0 AND rating <= 5", name=op.f("ck_tutor_profiles_rating_range")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tutor_profiles")),
        comment="Tutor profiles. Only the aggregate columns are written here.",
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Booking id."),
        sa.Column(
            "student_id",
            sa.String(length=36),
            nullable=False,
            comment="User id of the student who made the booking.",
        ),
        sa.Column(
            "tutor_profile_id",
            sa.String(length=36),
            nullable=False,
            comment="Tutor profile the booking is with.",
        ),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            comment="PENDING, CONFIRMED, COMPLETED or CANCELLED.",
        ),
        sa.CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED')",
            name=op.f("ck_bookings_known_status"),
        ),
        sa.ForeignKeyConstraint(
            ["tutor_profile_id"],
            ["tutor_profiles.id"],
            name=op.f("fk_bookings_tutor_profile_id_tutor_profiles"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_bookings")),
        comment="Bookings, owned by the booking lifecycle. Read-only here.",
    )
    op.create_index(
        op.f("ix_bookings_tutor_profile_id"),
        "bookings",
        ["tutor_profile_id"],
        unique=False,
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(length=26), nullable=False, comment="ULID (26 chars)."),
        sa.Column(
            "booking_id",
            sa.String(length=36),
            nullable=False,
            comment="Reviewed booking. Unique: one review per booking.",
        ),
        sa.Column(
            "user_id",
            sa.String(length=36),
            nullable=False,
            comment="User id of the reviewer.",
        ),
        sa.Column("rating", sa.Integer(), nullable=False, comment="Rating from 1 to 5."),
        sa.Column(
            "comment",
            sa.String(length=5000),
            nullable=True,
            comment="Sanitized comment, or NULL for no comment.",
        ),
        sa.Column(
            "created_at",
            UTCDateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
            comment="Server-assigned UTC timestamp.",
        ),
        sa.CheckConstraint("length(id) = 26", name=op.f("ck_reviews_id_26_char")),
        sa.CheckConstraint(
            "rating >= 1 AND rating <= 5", name=op.f("ck_reviews_rating_range")
        ),
        sa.ForeignKeyConstraint(
            ["booking_id"],
            ["bookings.id"],
            name=op.f("fk_reviews_booking_id_bookings"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_reviews")),
        sa.UniqueConstraint("booking_id", name=op.f("uq_reviews_booking_id")),
        comment="Reviews. Append-only: one row per reviewed booking.",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("reviews")
    op.drop_index(op.f("ix_bookings_tutor_profile_id"), table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("tutor_profiles")
