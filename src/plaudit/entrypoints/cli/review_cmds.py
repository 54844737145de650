"""``plaudit review`` and ``plaudit tutor`` command groups.

``review create`` goes through the same envelope a web route would use and
prints it as JSON; the exit status is 0 only when the review was recorded.
The ``tutor`` commands print JSON as well and fail with a message for unknown
tutor profiles.
"""

from __future__ import annotations

import click
import click_extra as clickx

from plaudit.domain.errors import NotFoundError
from plaudit.entrypoints.reviews import create_review_response, serialize_review
from plaudit.interfaces.errors import StorageError
from plaudit.service_layer import queries
from plaudit.service_layer.commands import RecalculateTutorRating

from .app import load_app
from .helpers import echo_json, success

# pylint: disable=redefined-builtin


def _aggregate_json(tutor_profile_id: str, aggregate) -> dict:
    return {
        "tutorProfileId": tutor_profile_id,
        "rating": float(aggregate.rating),
        "totalReviews": aggregate.total_reviews,
    }


@click.group(cls=clickx.ExtraGroup)
def review() -> None:
    """Submit reviews."""


@review.command()
@click.option("--booking", "booking_id", required=True, help="Booking to review.")
@click.option("--rating", type=int, required=True, help="Rating from 1 to 5.")
@click.option("--comment", default=None, help="Optional free-text comment.")
@click.option(
    "--as",
    "requester_id",
    envvar="PLAUDIT_USER",
    show_envvar=True,
    default=None,
    help="User id of the student submitting the review.",
)
@click.pass_context
def create(
    ctx: click.Context,
    booking_id: str,
    rating: int,
    comment: str | None,
    requester_id: str | None,
) -> None:
    """Review a completed booking and update the tutor's rating."""
    app = load_app()
    payload = {"bookingId": booking_id, "rating": rating, "comment": comment}
    response = create_review_response(app.message_bus, requester_id, payload)
    echo_json({"status": int(response.status), **response.body})
    if not response.ok:
        ctx.exit(1)


@click.group(cls=clickx.ExtraGroup)
def tutor() -> None:
    """Inspect and repair tutor ratings."""


@tutor.command()
@click.argument("tutor_profile_id")
def rating(tutor_profile_id: str) -> None:
    """Show a tutor's stored rating and review count."""
    app = load_app()
    try:
        aggregate = queries.get_tutor_rating(tutor_profile_id, app.message_bus.uow)
    except (NotFoundError, StorageError) as e:
        raise click.ClickException(str(e)) from e
    echo_json(_aggregate_json(tutor_profile_id, aggregate))


@tutor.command()
@click.argument("tutor_profile_id")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Show at most this many reviews.",
)
def reviews(tutor_profile_id: str, limit: int | None) -> None:
    """List a tutor's reviews, newest first."""
    app = load_app()
    try:
        found = queries.list_tutor_reviews(
            tutor_profile_id, app.message_bus.uow, limit=limit
        )
    except (NotFoundError, StorageError) as e:
        raise click.ClickException(str(e)) from e
    echo_json([serialize_review(r) for r in found])


@tutor.command()
@click.argument("tutor_profile_id")
def recompute(tutor_profile_id: str) -> None:
    """Rebuild a tutor's rating from all of their reviews."""
    app = load_app()
    try:
        aggregate = app.message_bus.handle(RecalculateTutorRating(tutor_profile_id))
    except (NotFoundError, StorageError) as e:
        raise click.ClickException(str(e)) from e
    echo_json(_aggregate_json(tutor_profile_id, aggregate))
    success("Rating recomputed")
