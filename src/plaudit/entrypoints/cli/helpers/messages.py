"""Terminal output helpers for the PLAUDIT CLI.

Status lines go to stderr with a glyph (an emoji where the stream can encode
it, ASCII otherwise). Command results go to stdout as JSON so they can be
piped.
"""

import json
from typing import Any

import click

GLYPHS = {
    "warn": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Whether stderr's encoding can represent `character`."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """Return the marker for `kind` ("warn", "success" or "error")."""
    emoji, fallback = GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Yellow warning line on stderr, e.g. ``⚠️  This will modify your database.``"""
    click.secho(f"{glyph('warn')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Green success line on stderr."""
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Red error line on stderr."""
    click.secho(f"{glyph('error')}  {msg}", fg="red", bold=True, err=True)


def echo_json(data: Any) -> None:
    """Write `data` to stdout as indented JSON."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
