"""Test the bootstrap function."""

from collections.abc import Callable
from decimal import Decimal

import pytest

from plaudit import config
from plaudit.adapters.id_generators import ULIDGenerator
from plaudit.adapters.unit_of_work import SqlAlchemyUnitOfWork
from plaudit.bootstrap import bootstrap
from plaudit.bootstrap.bootstrap import (
    build_message_bus,
    build_write_uow,
    inject_dependencies,
)
from plaudit.interfaces.unit_of_work import AbstractUnitOfWork
from plaudit.service_layer.commands import Command, CreateReview
from plaudit.service_layer.retry import RetryPolicy

# pylint: disable=redefined-outer-name
# pylint: disable=too-few-public-methods


class FakeUnitOfWork(AbstractUnitOfWork):
    """Records commits; has no stores."""

    def __init__(self):
        self.committed = False

    def commit(self):
        self.committed = True

    def rollback(self):
        pass


class PingCommand(Command):
    """A command only these tests handle."""


@pytest.fixture
def migrated_env(monkeypatch, sqlite_engine_file):
    """Point PLAUDIT_DB_URL at a migrated SQLite file."""
    monkeypatch.setenv(
        config.DB_URL_ENV, sqlite_engine_file.url.render_as_string(hide_password=False)
    )
    monkeypatch.setenv(config.MAX_ATTEMPTS_ENV, "5")
    monkeypatch.setenv(config.LOCK_TIMEOUT_ENV, "750")
    return sqlite_engine_file


class TestBuildWriteUoW:
    """Tests for build_write_uow."""

    @staticmethod
    def test_returns_sqlalchemy_uow():
        uow = build_write_uow(url="sqlite:///:memory:", lock_timeout_ms=250)
        assert isinstance(uow, SqlAlchemyUnitOfWork)
        assert uow.engine.url.get_backend_name() == "sqlite"
        assert uow.engine.url.database == ":memory:"
        assert uow.lock_timeout_ms == 250

    @staticmethod
    def test_sqlite_busy_timeout_follows_lock_timeout():
        uow = build_write_uow(url="sqlite:///:memory:", lock_timeout_ms=250)
        with uow.engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA busy_timeout;").scalar() == 250


class TestInjectDependencies:
    """Tests for inject_dependencies."""

    @staticmethod
    def test_binds_only_declared_parameters():
        def handler(cmd, uow):
            return cmd, uow

        bound = inject_dependencies(handler, {"uow": "the-uow", "sanitizer": object()})
        assert bound.keywords == {"uow": "the-uow"}
        assert bound("cmd") == ("cmd", "the-uow")


class TestBuildMessageBus:
    """Tests for build_message_bus."""

    @staticmethod
    def test_handler_result_is_returned():
        uow = FakeUnitOfWork()

        def ping(cmd: PingCommand, uow: FakeUnitOfWork):
            with uow:
                uow.commit()
            return "pong"

        handlers: dict[type[Command], Callable[..., object]] = {PingCommand: ping}
        bus = build_message_bus(uow, handlers)
        assert bus.handle(PingCommand()) == "pong"
        assert uow.committed is True

    @staticmethod
    def test_defaults_are_injected():
        seen = {}

        def spy(cmd, sanitizer, id_generator, retry_policy):
            seen.update(
                sanitizer=sanitizer, id_generator=id_generator, retry_policy=retry_policy
            )

        bus = build_message_bus(FakeUnitOfWork(), {PingCommand: spy})
        bus.handle(PingCommand())
        assert isinstance(seen["id_generator"], ULIDGenerator)
        assert seen["retry_policy"] == RetryPolicy()
        assert seen["sanitizer"].sanitize("  a <b>b</b> ") == "a b"


class TestBootstrap:
    """Tests for bootstrap()."""

    @staticmethod
    def test_requires_db_url(monkeypatch):
        monkeypatch.delenv(config.DB_URL_ENV, raising=False)
        with pytest.raises(config.DatabaseUrlNotSetError):
            bootstrap()

    @staticmethod
    def test_rejects_bad_settings(monkeypatch):
        monkeypatch.setenv(config.DB_URL_ENV, "sqlite:///:memory:")
        monkeypatch.setenv(config.MAX_ATTEMPTS_ENV, "0")
        with pytest.raises(config.InvalidSettingError):
            bootstrap()

    @staticmethod
    def test_settings_reach_the_uow(migrated_env):
        bus = bootstrap().message_bus
        assert isinstance(bus.uow, SqlAlchemyUnitOfWork)
        assert bus.uow.lock_timeout_ms == 750

    @staticmethod
    def test_end_to_end_review(migrated_env, make_seeder):
        seeder = make_seeder(migrated_env)
        tutor_id = seeder.tutor()
        booking_id = seeder.booking(tutor_id)

        review = bootstrap().message_bus.handle(
            CreateReview(
                booking_id=booking_id,
                rating=4,
                comment="Patient and clear",
                requester_id="student-1",
            )
        )

        assert len(review.review_id) == 26
        assert seeder.aggregate(tutor_id) == (Decimal("4.0"), 1)
