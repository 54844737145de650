"""Build the application for commands that need the message bus."""

from __future__ import annotations

import click

from plaudit import config
from plaudit.bootstrap import AppContainer, bootstrap

from .db import MISSING_DB_URL_MSG


def load_app() -> AppContainer:
    """Bootstrap the application, turning configuration errors into CLI errors."""
    try:
        return bootstrap()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    except config.InvalidSettingError as e:
        raise click.ClickException(str(e)) from e
