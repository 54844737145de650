"""Module defining Commands."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class CreateReview(Command):
    """Command to review a completed booking.

    Fields hold the request as received; `validate_create_review` decides
    whether they are acceptable. `requester_id` is the authenticated user.
    """

    booking_id: str | None
    rating: object
    comment: str | None
    requester_id: str


@dataclass(frozen=True)
class RecalculateTutorRating(Command):
    """Command to recompute a tutor's rating aggregate from all their reviews."""

    tutor_profile_id: str
