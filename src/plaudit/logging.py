"""Logging setup for the PLAUDIT CLI.

Two sinks are supported:

- a Rich console handler on stderr whose level follows ``-v``/``-q``;
- a "flight recorder": a `MemoryHandler` that keeps recent records at DEBUG
  granularity and writes them to a file only when something goes wrong (a
  WARNING or worse), or on exit when forced.

Library code never configures logging; it only calls
``logging.getLogger(__name__)``. `configure_logging` is called once by the CLI.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import Literal, TypeAlias

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "plaudit"
BASE_LEVEL = logging.WARNING
DEFAULT_FLIGHT_RECORDER_CAPACITY = 2000

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from other libraries with their top-level package.

    Sets ``record.prefix`` to e.g. ``"[sqlalchemy]"`` for a record from
    ``sqlalchemy.engine.Engine``, and to ``""`` for PLAUDIT's own loggers.
    Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == PROJECT_PREFIX or record.name.startswith(
            f"{PROJECT_PREFIX}."
        ):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.split('.')[0]}]"
        return True


@dataclass(frozen=True)
class LoggingOptions:  # pylint: disable=too-many-instance-attributes
    """Logging choices collected from the command line."""

    verbosity: int = 0  # count of -v minus count of -q
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_recorder: bool = True
    flight_recorder_capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @property
    def console_level(self) -> int:
        """WARNING shifted one level per -v/-q, clamped to DEBUG..CRITICAL."""
        if self.debug:
            return logging.DEBUG
        level = BASE_LEVEL - 10 * self.verbosity
        return max(logging.DEBUG, min(logging.CRITICAL, level))


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler writing to stderr.

    In debug mode the handler logs everything and shows timestamps, logger
    names and source locations; otherwise messages are kept short and
    third-party records get a ``[package]`` prefix.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    if debug_mode:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Return a MemoryHandler that dumps buffered records to `path`.

    The buffer (up to `capacity` records) is written out when a record at
    `flush_level` or above arrives, when it fills up, and, if
    `flush_on_close` is set, when logging shuts down.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] "
            "%(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Install PLAUDIT's handlers on the root logger.

    The root logger itself is opened up to DEBUG; each handler applies its own
    threshold. Per-logger levels from ``-L NAME=LEVEL`` are applied last and
    affect every handler.

    Returns:
        The handlers now attached to the root logger.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(
            level=options.console_level,
            debug_mode=options.debug,
            color=options.color,
        )
    ]
    if options.flight_recorder and options.log_path is not None:
        handlers.append(
            config_flight_recorder(
                path=options.log_path,
                capacity=options.flight_recorder_capacity,
                flush_on_close=options.force_flush,
            )
        )

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)

    return handlers


def log_startup(
    logger: logging.Logger,
    *,
    app_version: str,
    options: LoggingOptions,
    handlers: list[logging.Handler],
) -> None:
    """Log a one-line summary at INFO and environment details at DEBUG."""
    recorder_on = options.flight_recorder and options.log_path is not None
    logger.info(
        "PLAUDIT %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(options.console_level),
        "ON" if recorder_on else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("Alembic: %s", alembic.__version__)
    logger.debug("SQLAlchemy: %s", sqlalchemy.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if recorder_on:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            options.log_path,
            options.flight_recorder_capacity,
            options.force_flush,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {
            name: logging.getLevelName(level)
            for name, level in options.logger_levels.items()
        }
        or "<none>",
    )
