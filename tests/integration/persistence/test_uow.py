"""Integration tests for SqlAlchemyUnitOfWork."""

from __future__ import annotations

import sqlite3
import threading
from decimal import Decimal

import pytest
from sqlalchemy.engine import Connection
from sqlalchemy.exc import OperationalError

from plaudit.adapters.db.engine import make_engine
from plaudit.adapters.id_generators import ULIDGenerator
from plaudit.adapters.sanitizer import RegexSanitizer
from plaudit.adapters.unit_of_work import NoActiveUnitOfWork, SqlAlchemyUnitOfWork
from plaudit.bootstrap.bootstrap import build_message_bus
from plaudit.domain.model import Review, TutorAggregate
from plaudit.interfaces.errors import StorageError, TransientStorageError
from plaudit.service_layer.handlers import COMMAND_HANDLERS
from plaudit.service_layer.retry import RetryPolicy
from tests.fixtures.datagen import ulid_like

# pylint: disable=redefined-outer-name

ENGINES = pytest.mark.parametrize(
    "engine", ["sqlite_engine_file", "postgres_engine"], indirect=True
)


@pytest.fixture
def seeded(engine, make_seeder):
    seeder = make_seeder(engine)
    tutor_id = seeder.tutor()
    return seeder, tutor_id, seeder.booking(tutor_id)


def review_for(booking_id: str) -> Review:
    return Review(
        review_id=ulid_like(),
        booking_id=booking_id,
        user_id="student-1",
        rating=5,
        comment=None,
    )


def write_review_and_aggregate(uow, tutor_id: str, booking_id: str) -> None:
    uow.tutor_profiles.lock(tutor_id)
    uow.reviews.add(review_for(booking_id))
    uow.tutor_profiles.save_aggregate(tutor_id, TutorAggregate(Decimal("5.0"), 1))


@ENGINES
def test_commit_persists_both_writes(engine, seeded):
    seeder, tutor_id, booking_id = seeded
    uow = SqlAlchemyUnitOfWork(engine)
    with uow:
        write_review_and_aggregate(uow, tutor_id, booking_id)
        uow.commit()

    assert seeder.review_count(booking_id) == 1
    assert seeder.aggregate(tutor_id) == (Decimal("5.0"), 1)


@ENGINES
def test_no_commit_persists_nothing(engine, seeded):
    seeder, tutor_id, booking_id = seeded
    uow = SqlAlchemyUnitOfWork(engine)
    with uow:
        write_review_and_aggregate(uow, tutor_id, booking_id)

    assert seeder.review_count() == 0
    assert seeder.aggregate(tutor_id) == (Decimal("0.0"), 0)


@ENGINES
def test_error_rolls_back_both_writes(engine, seeded):
    seeder, tutor_id, booking_id = seeded
    uow = SqlAlchemyUnitOfWork(engine)
    with pytest.raises(RuntimeError):
        with uow:
            write_review_and_aggregate(uow, tutor_id, booking_id)
            raise RuntimeError("crash between write and commit")

    assert seeder.review_count() == 0
    assert seeder.aggregate(tutor_id) == (Decimal("0.0"), 0)


def test_stores_need_an_open_unit(sqlite_engine_file):
    uow = SqlAlchemyUnitOfWork(sqlite_engine_file)
    with pytest.raises(NoActiveUnitOfWork):
        _ = uow.connection
    with uow:
        assert not uow.connection.closed
    with pytest.raises(NoActiveUnitOfWork):
        _ = uow.reviews


def test_postgres_lock_timeout_is_transient(postgres_engine, make_seeder):
    """A second unit waiting on a held tutor row gives up after lock_timeout."""
    tutor_id = make_seeder(postgres_engine).tutor()
    holder = SqlAlchemyUnitOfWork(postgres_engine)
    waiter = SqlAlchemyUnitOfWork(postgres_engine, lock_timeout_ms=100)
    outcome: list[BaseException] = []

    def wait_for_lock() -> None:
        try:
            with waiter:
                waiter.tutor_profiles.lock(tutor_id)
        except TransientStorageError as e:
            outcome.append(e)

    with holder:
        holder.tutor_profiles.lock(tutor_id)
        thread = threading.Thread(target=wait_for_lock)
        thread.start()
        thread.join(timeout=10)

    assert len(outcome) == 1


def test_postgres_lock_timeout_bounds_the_insert(postgres_engine, make_seeder):
    """Waiting on another unit's uncommitted review is bounded by lock_timeout."""
    seeder = make_seeder(postgres_engine)
    booking_id = seeder.booking(seeder.tutor())
    holder = SqlAlchemyUnitOfWork(postgres_engine)
    waiter = SqlAlchemyUnitOfWork(postgres_engine, lock_timeout_ms=100)
    outcome: list[BaseException] = []

    def insert_same_booking() -> None:
        try:
            with waiter:
                waiter.reviews.add(review_for(booking_id))
        except Exception as e:  # pylint: disable=broad-exception-caught
            outcome.append(e)

    with holder:
        holder.reviews.add(review_for(booking_id))
        thread = threading.Thread(target=insert_same_booking)
        thread.start()
        thread.join(timeout=10)
        still_waiting = thread.is_alive()

    thread.join(timeout=10)
    assert not still_waiting
    assert len(outcome) == 1
    assert isinstance(outcome[0], TransientStorageError)


def test_sqlite_busy_is_transient(sqlite_file_url, sqlite_engine_file, make_seeder):
    """SQLite's "database is locked" after busy_timeout is retryable."""
    tutor_id = make_seeder(sqlite_engine_file).tutor()
    impatient = make_engine(sqlite_file_url, sqlite_busy_timeout_ms=50)
    holder = SqlAlchemyUnitOfWork(sqlite_engine_file)
    waiter = SqlAlchemyUnitOfWork(impatient)
    try:
        with holder:
            holder.tutor_profiles.lock(tutor_id)
            with waiter:
                with pytest.raises(TransientStorageError):
                    waiter.tutor_profiles.lock(tutor_id)
    finally:
        impatient.dispose()


class FailingCommits:
    """Replacement for `Connection.commit` that fails the first calls."""

    def __init__(self, monkeypatch, *errors: Exception) -> None:
        self.errors = list(errors)
        self.calls = 0
        real_commit = Connection.commit

        def commit(connection: Connection) -> None:
            self.calls += 1
            if self.errors:
                raise self.errors.pop(0)
            real_commit(connection)

        monkeypatch.setattr(Connection, "commit", commit)


def locked_at_commit() -> OperationalError:
    return OperationalError("COMMIT", {}, sqlite3.OperationalError("database is locked"))


@pytest.fixture
def seeded_sqlite(sqlite_engine_file, make_seeder):
    seeder = make_seeder(sqlite_engine_file)
    tutor_id = seeder.tutor()
    return seeder, tutor_id, seeder.booking(tutor_id)


@pytest.fixture
def sqlite_bus(sqlite_engine_file):
    return build_message_bus(
        uow=SqlAlchemyUnitOfWork(sqlite_engine_file),
        command_handlers=COMMAND_HANDLERS,
        sanitizer=RegexSanitizer(),
        id_generator=ULIDGenerator(),
        retry_policy=RetryPolicy(max_attempts=3, initial_delay=0.0, jitter=False),
    )


def test_commit_failure_is_translated(monkeypatch, sqlite_engine_file, seeded_sqlite):
    seeder, tutor_id, booking_id = seeded_sqlite
    FailingCommits(
        monkeypatch,
        OperationalError("COMMIT", {}, sqlite3.OperationalError("disk I/O error")),
    )
    uow = SqlAlchemyUnitOfWork(sqlite_engine_file)
    with pytest.raises(StorageError, match="disk I/O error") as exc_info:
        with uow:
            write_review_and_aggregate(uow, tutor_id, booking_id)
            uow.commit()

    assert not isinstance(exc_info.value, TransientStorageError)
    assert seeder.review_count() == 0


def test_connect_failure_is_translated(tmp_path):
    missing_dir = tmp_path / "missing" / "plaudit.db"
    engine = make_engine(f"sqlite:///{missing_dir}")
    try:
        with pytest.raises(StorageError):
            with SqlAlchemyUnitOfWork(engine):
                pass
    finally:
        engine.dispose()


def test_locked_commit_retries_whole_unit(
    monkeypatch, sqlite_bus, seeded_sqlite, make_create_review
):
    """A transient failure at COMMIT is retried like any other."""
    seeder, tutor_id, booking_id = seeded_sqlite
    commits = FailingCommits(monkeypatch, locked_at_commit())

    review = sqlite_bus.handle(make_create_review(booking_id=booking_id, rating=4))

    assert commits.calls == 2
    assert seeder.review_count(booking_id) == 1
    assert seeder.aggregate(tutor_id) == (Decimal("4.0"), 1)
    assert review.booking_id == booking_id


def test_locked_commit_exhaustion_is_storage_error(
    monkeypatch, sqlite_bus, seeded_sqlite, make_create_review
):
    seeder, tutor_id, booking_id = seeded_sqlite
    commits = FailingCommits(monkeypatch, *(locked_at_commit() for _ in range(3)))

    with pytest.raises(StorageError, match="failed after 3 attempt"):
        sqlite_bus.handle(make_create_review(booking_id=booking_id))

    assert commits.calls == 3
    assert seeder.review_count() == 0
    assert seeder.aggregate(tutor_id) == (Decimal("0.0"), 0)
