"""Backends shared by the review workflow contract tests.

Every test here runs against the in-memory stores, a migrated SQLite file and
(when Docker is available) PostgreSQL. Seeding goes through a `Backend`
wrapper so tests never touch backend-specific state directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from plaudit.adapters.id_generators import ULIDGenerator
from plaudit.adapters.persistence.in_memory_adapters import InMemoryReviewData
from plaudit.adapters.sanitizer import RegexSanitizer
from plaudit.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork
from plaudit.bootstrap.bootstrap import build_message_bus
from plaudit.domain.model import BookingStatus, TutorAggregate
from plaudit.service_layer.handlers import COMMAND_HANDLERS
from plaudit.service_layer.retry import RetryPolicy
from tests.fixtures.datagen import SqlSeeder, unique_id

if TYPE_CHECKING:
    from plaudit.interfaces.unit_of_work import AbstractUnitOfWork
    from plaudit.service_layer.messagebus import MessageBus

# pylint: disable=redefined-outer-name

LOCK_TIMEOUT_MS = 5000


@dataclass
class Backend:
    """A unit of work plus a way to seed and inspect the storage behind it."""

    name: str
    uow: AbstractUnitOfWork
    seeder: SqlSeeder | None = None
    data: InMemoryReviewData | None = None

    def tutor(self, aggregate: TutorAggregate | None = None) -> str:
        if self.seeder is not None:
            return self.seeder.tutor(aggregate=aggregate)
        tutor_id = unique_id("tutor")
        self.data.add_tutor_profile(tutor_id, aggregate)
        return tutor_id

    def booking(
        self,
        tutor_profile_id: str,
        *,
        student_id: str = "student-1",
        status: BookingStatus = BookingStatus.COMPLETED,
    ) -> str:
        if self.seeder is not None:
            return self.seeder.booking(
                tutor_profile_id, student_id=student_id, status=status
            )
        booking_id = unique_id("booking")
        self.data.add_booking(
            booking_id,
            student_id=student_id,
            tutor_profile_id=tutor_profile_id,
            status=status,
        )
        return booking_id

    def aggregate(self, tutor_profile_id: str) -> tuple[Decimal, int]:
        if self.seeder is not None:
            return self.seeder.aggregate(tutor_profile_id)
        with self.data.lock:
            found = self.data.tutor_profiles[tutor_profile_id]
        return found.rating, found.total_reviews

    def review_count(self, booking_id: str | None = None) -> int:
        if self.seeder is not None:
            return self.seeder.review_count(booking_id)
        with self.data.lock:
            return sum(
                1
                for review in self.data.reviews.values()
                if booking_id is None or review.booking_id == booking_id
            )


@pytest.fixture(params=["memory", "sqlite_engine_file", "postgres_engine"])
def backend(request: pytest.FixtureRequest) -> Backend:
    """One storage backend per parametrization."""
    if request.param == "memory":
        data = InMemoryReviewData()
        return Backend(
            name="memory",
            uow=InMemoryUnitOfWork(data, lock_timeout_s=LOCK_TIMEOUT_MS / 1000),
            data=data,
        )
    engine = request.getfixturevalue(request.param)
    return Backend(
        name=request.param,
        uow=SqlAlchemyUnitOfWork(engine, lock_timeout_ms=LOCK_TIMEOUT_MS),
        seeder=SqlSeeder(engine),
    )


@pytest.fixture
def bus(backend: Backend) -> MessageBus:
    """Message bus over `backend` with production collaborators.

    Retries are generous and quick so contention in the concurrency tests
    resolves instead of exhausting attempts.
    """
    return build_message_bus(
        backend.uow,
        COMMAND_HANDLERS,
        sanitizer=RegexSanitizer(),
        id_generator=ULIDGenerator(),
        retry_policy=RetryPolicy(max_attempts=10, initial_delay=0.01, max_delay=0.2),
    )
