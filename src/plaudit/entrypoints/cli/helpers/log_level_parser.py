"""Parse ``-L NAME=LEVEL`` options into a logger-name to level mapping.

Values may be repeated (``-L sqlalchemy=INFO -L alembic=DEBUG``) or given as
one comma/space separated string (``PLAUDIT_LOGGER_LEVELS="a=INFO b=DEBUG"``).
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "alembic": logging.WARNING}

SEPARATORS = re.compile(r"[,\s]+")


def _split_items(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    if value is None:
        return []
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in SEPARATORS.split(chunk) if item]


def parse_log_level(
    ctx: click.Context | None,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...] | None,
) -> dict[str, int]:
    """Click callback returning `DEFAULT_LIB_LEVELS` updated with `value`.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _split_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelName(level_name.strip().upper())
        if not isinstance(level, int):
            raise click.BadParameter(f"Invalid log level: {level_name}")
        levels[name.strip()] = level
    return levels
