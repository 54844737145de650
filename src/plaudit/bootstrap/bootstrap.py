"""Bootstrap the message bus with handlers and unit of work."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from plaudit import config
from plaudit.adapters.db.engine import make_engine
from plaudit.adapters.id_generators import ULIDGenerator
from plaudit.adapters.sanitizer import RegexSanitizer
from plaudit.adapters.unit_of_work import SqlAlchemyUnitOfWork
from plaudit.service_layer.handlers import COMMAND_HANDLERS
from plaudit.service_layer.messagebus import MessageBus
from plaudit.service_layer.retry import RetryPolicy

if TYPE_CHECKING:
    from plaudit.interfaces.id_generator import IdGenerator
    from plaudit.interfaces.sanitizer import Sanitizer
    from plaudit.interfaces.unit_of_work import AbstractUnitOfWork
    from plaudit.service_layer.commands import Command


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    message_bus: MessageBus


def build_write_uow(url: str, lock_timeout_ms: int | None = None) -> AbstractUnitOfWork:
    """Build a unit of work over a new engine for `url`.

    The lock timeout bounds both PostgreSQL row-lock waits and SQLite's
    ``busy_timeout``.
    """
    if lock_timeout_ms is None:
        engine = make_engine(url)
    else:
        engine = make_engine(url, sqlite_busy_timeout_ms=lock_timeout_ms)
    return SqlAlchemyUnitOfWork(engine, lock_timeout_ms=lock_timeout_ms)


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: dict[type[Command], Callable[..., object]],
    *,
    sanitizer: Sanitizer | None = None,
    id_generator: IdGenerator | None = None,
    retry_policy: RetryPolicy | None = None,
) -> MessageBus:
    """Build a message bus with injected dependencies.

    Unspecified collaborators get the production defaults: `RegexSanitizer`,
    `ULIDGenerator` and a default `RetryPolicy`.
    """
    dependencies = {
        "uow": uow,
        "sanitizer": sanitizer or RegexSanitizer(),
        "id_generator": id_generator or ULIDGenerator(),
        "retry_policy": retry_policy or RetryPolicy(),
    }
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(
        uow,
        command_handlers=injected_command_handlers,
    )


def bootstrap() -> AppContainer:
    """Build the application from environment configuration.

    Raises:
        DatabaseUrlNotSetError: If PLAUDIT_DB_URL is not set.
        InvalidSettingError: If a numeric setting cannot be parsed.
    """
    uow = build_write_uow(config.get_db_url(), config.get_lock_timeout_ms())
    message_bus = build_message_bus(
        uow,
        COMMAND_HANDLERS,
        retry_policy=RetryPolicy(max_attempts=config.get_max_attempts()),
    )

    return AppContainer(
        message_bus=message_bus,
    )


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Bind the dependencies a handler declares as parameters, by name."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return functools.partial(handler, **deps)
