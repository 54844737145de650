"""Request validation for review submission.

Runs before any storage access. Checks presence first, then range, then
normalizes the comment.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING

from plaudit.domain.errors import ValidationError
from plaudit.domain.model import MAX_COMMENT_LENGTH, MAX_RATING, MIN_RATING

if TYPE_CHECKING:
    from plaudit.interfaces.sanitizer import Sanitizer
    from plaudit.service_layer.commands import CreateReview


@dataclass(frozen=True)
class ReviewDraft:
    """A review request that passed validation."""

    booking_id: str
    rating: int
    comment: str | None


def validate_create_review(cmd: CreateReview, sanitizer: Sanitizer) -> ReviewDraft:
    """Validate and normalize a `CreateReview` command.

    Raises:
        ValidationError: "missing booking id", "missing rating",
            "rating out of range" or "comment must be text".
    """
    if not isinstance(cmd.booking_id, str) or not cmd.booking_id.strip():
        raise ValidationError("missing booking id")
    if cmd.rating is None:
        raise ValidationError("missing rating")

    return ReviewDraft(
        booking_id=cmd.booking_id.strip(),
        rating=_parse_rating(cmd.rating),
        comment=_normalize_comment(cmd.comment, sanitizer),
    )


def _parse_rating(raw: object) -> int:
    # bool is an int subclass; True must not count as 1
    if isinstance(raw, bool) or not isinstance(raw, Real):
        raise ValidationError("rating out of range")
    if not math.isfinite(raw) or int(raw) != raw:
        raise ValidationError("rating out of range")
    rating = int(raw)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("rating out of range")
    return rating


def _normalize_comment(raw: str | None, sanitizer: Sanitizer) -> str | None:
    if not raw:
        return None
    if not isinstance(raw, str):
        raise ValidationError("comment must be text")
    cleaned = sanitizer.sanitize(raw)[:MAX_COMMENT_LENGTH]
    return cleaned or None
