"""PLAUDIT CLI entry point.

Defines the top-level ``plaudit`` command (via Click-Extra), sets up logging
from the global options and registers the command groups:

- ``plaudit db``: forward-only schema management.
- ``plaudit review``: submit a review for a completed booking.
- ``plaudit tutor``: show, list and recompute tutor ratings.

Examples
    $ plaudit --version
    $ plaudit db upgrade --force
    $ plaudit review create --booking b-42 --rating 5 --as student-7
    $ plaudit -v tutor rating tutor-3
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from plaudit import __version__
from plaudit.logging import LoggingOptions, configure_logging, log_startup

from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .review_cmds import review as review_group
from .review_cmds import tutor as tutor_group

logger = logging.getLogger(__name__)


HELP = """PLAUDIT command-line interface.

    PLAUDIT records student reviews of completed tutoring sessions and keeps
    each tutor's average rating and review count exactly in step with the
    reviews, even when many students submit at once.
    """


def _default_log_path() -> Path:
    return Path(user_log_dir("plaudit", appauthor=False, ensure_exists=True)) / (
        "latest.log"
    )


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Lower the console threshold one level below WARNING per repetition.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Raise the console threshold one level above WARNING per repetition.",
)
@click.option(
    "--debug/--no-debug",
    help="Log everything to the console, with timestamps and source locations.",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Flight recorder file [default: <user log dir>/plaudit/latest.log].",
    default=None,
    envvar="PLAUDIT_LOG_PATH",
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="PLAUDIT_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    help=(
        "Keep the last N log records at DEBUG granularity in memory and write "
        "them to --log-path when a WARNING or ERROR occurs (or on exit with "
        "--force-flush). Console verbosity is unaffected."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush",
    help="Always write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set the minimum level of a logger (NAME=LEVEL) for every sink. "
        "Repeatable, e.g. -L sqlalchemy.engine=INFO -L plaudit=DEBUG."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def plaudit(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path | None,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """PLAUDIT command-line interface."""
    if flight_recorder and log_path is None:
        log_path = _default_log_path()

    options = LoggingOptions(
        verbosity=verbose_count - quiet_count,
        debug=debug,
        color=ctx.color is not False,  # None means "auto"
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_recorder_capacity=flight_recorder_capacity,
        force_flush=force_flush,
        logger_levels=logger_levels,
    )
    handlers = configure_logging(options)
    log_startup(logger, app_version=__version__, options=options, handlers=handlers)

    ctx.call_on_close(logging.shutdown)


plaudit.add_command(db_group)
plaudit.add_command(review_group)
plaudit.add_command(tutor_group)
