"""In-memory wiring shared by the unit tests."""

from __future__ import annotations

import pytest

from plaudit.adapters.id_generators import SimpleIdGenerator
from plaudit.adapters.persistence.in_memory_adapters import InMemoryReviewData
from plaudit.adapters.sanitizer import RegexSanitizer
from plaudit.adapters.unit_of_work import InMemoryUnitOfWork
from plaudit.bootstrap.bootstrap import build_message_bus
from plaudit.domain.model import BookingStatus
from plaudit.service_layer.handlers import COMMAND_HANDLERS
from plaudit.service_layer.messagebus import MessageBus
from plaudit.service_layer.retry import RetryPolicy

# pylint: disable=redefined-outer-name

TUTOR_ID = "tutor-1"
STUDENT_ID = "student-1"


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Three attempts, no waiting."""
    return RetryPolicy(max_attempts=3, initial_delay=0.0, jitter=False)


@pytest.fixture
def memory_data() -> InMemoryReviewData:
    """In-memory state with one tutor and one completed booking per status.

    Bookings: ``booking-1`` (COMPLETED), ``booking-pending``,
    ``booking-confirmed``, ``booking-cancelled``; all for ``tutor-1`` and
    ``student-1``.
    """
    data = InMemoryReviewData()
    data.add_tutor_profile(TUTOR_ID)
    data.add_booking("booking-1", student_id=STUDENT_ID, tutor_profile_id=TUTOR_ID)
    for status in (
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
    ):
        data.add_booking(
            f"booking-{status.value.lower()}",
            student_id=STUDENT_ID,
            tutor_profile_id=TUTOR_ID,
            status=status,
        )
    return data


@pytest.fixture
def memory_uow(memory_data: InMemoryReviewData) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(memory_data, lock_timeout_s=1.0)


@pytest.fixture
def memory_bus(memory_uow: InMemoryUnitOfWork, fast_retry: RetryPolicy) -> MessageBus:
    """Message bus over `memory_uow` with the real handlers."""
    return build_message_bus(
        memory_uow,
        COMMAND_HANDLERS,
        sanitizer=RegexSanitizer(),
        id_generator=SimpleIdGenerator(),
        retry_policy=fast_retry,
    )
