"""Request/response envelope for review submission.

`create_review_response` is what a web route would call: it takes the
authenticated user id and the decoded JSON payload, runs the `CreateReview`
command, and returns a status code plus a JSON-ready body. Every failure is
turned into a response; nothing raises past this function.

Body shapes::

    {"success": true, "review": {"id": ..., "bookingId": ..., ...}}
    {"success": false, "error": "already reviewed"}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from plaudit.domain.errors import (
    AuthorizationError,
    DomainError,
    DuplicateError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from plaudit.service_layer.commands import CreateReview

if TYPE_CHECKING:
    from plaudit.domain.model import Review
    from plaudit.service_layer.messagebus import MessageBus

logger = logging.getLogger(__name__)

UNAUTHORIZED_MSG = "unauthorized"
INVALID_BODY_MSG = "invalid request body"
INTERNAL_ERROR_MSG = "failed to create review"

# First match wins
ERROR_STATUSES: tuple[tuple[type[DomainError], HTTPStatus], ...] = (
    (ValidationError, HTTPStatus.BAD_REQUEST),
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (AuthorizationError, HTTPStatus.FORBIDDEN),
    (StateConflictError, HTTPStatus.BAD_REQUEST),
    (DuplicateError, HTTPStatus.BAD_REQUEST),
)


@dataclass(frozen=True)
class ReviewResponse:
    """Status code and JSON body returned to the client."""

    status: HTTPStatus
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status < HTTPStatus.BAD_REQUEST


def serialize_review(review: Review) -> dict[str, Any]:
    """Render a review with the camelCase keys clients expect."""
    return {
        "id": review.review_id,
        "bookingId": review.booking_id,
        "userId": review.user_id,
        "rating": review.rating,
        "comment": review.comment,
        "createdAt": (
            review.created_at.isoformat() if review.created_at is not None else None
        ),
    }


def status_for(error: DomainError) -> HTTPStatus:
    """HTTP status for a domain error; unknown kinds are treated as bad requests."""
    for error_type, status in ERROR_STATUSES:
        if isinstance(error, error_type):
            return status
    return HTTPStatus.BAD_REQUEST


def _failure(status: HTTPStatus, message: str) -> ReviewResponse:
    return ReviewResponse(status=status, body={"success": False, "error": message})


def create_review_response(
    bus: MessageBus, requester_id: str | None, payload: object
) -> ReviewResponse:
    """Handle one review submission end to end.

    Args:
        bus: Message bus with the `CreateReview` handler registered.
        requester_id: Authenticated user id, or None for anonymous requests.
        payload: Decoded request body with ``bookingId``, ``rating`` and an
            optional ``comment``.

    Returns:
        ReviewResponse: 200 with the review, 401/400/403/404 for rejected
        requests, 500 with a generic message for storage failures.
    """
    if not requester_id:
        return _failure(HTTPStatus.UNAUTHORIZED, UNAUTHORIZED_MSG)
    if not isinstance(payload, Mapping):
        return _failure(HTTPStatus.BAD_REQUEST, INVALID_BODY_MSG)

    cmd = CreateReview(
        booking_id=payload.get("bookingId"),
        rating=payload.get("rating"),
        comment=payload.get("comment"),
        requester_id=requester_id,
    )
    try:
        review = bus.handle(cmd)
    except DomainError as e:
        logger.info("Review rejected for booking %s: %s", cmd.booking_id, e)
        return _failure(status_for(e), str(e))
    except Exception:  # pylint: disable=broad-except
        logger.error("Review creation failed for booking %s", cmd.booking_id)
        return _failure(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MSG)

    return ReviewResponse(
        status=HTTPStatus.OK,
        body={"success": True, "review": serialize_review(review)},
    )
