"""Fixtures for end-to-end tests of the ``plaudit`` command.

Every invocation gets its own flight recorder file under the test's temp dir,
so nothing is written to the real user log directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import click
import pytest
from click.testing import CliRunner

from plaudit.entrypoints.cli.main import plaudit

if TYPE_CHECKING:
    from tests.fixtures.datagen import SqlSeeder

# pylint: disable=redefined-outer-name


@click.command()
def log_sample():
    """Log one message per level on PLAUDIT's and a third-party logger."""
    own = logging.getLogger("plaudit.sample")
    other = logging.getLogger("vendor.lib")
    own.debug("sample debug")
    own.info("sample info")
    own.warning("sample warning")
    own.error("sample error")
    own.critical("sample critical")
    other.debug("vendor debug")
    other.info("vendor info")
    other.warning("vendor warning")
    own.debug("sample trailing debug")


@pytest.fixture
def with_log_sample():
    """Register ``plaudit log-sample`` for one test."""
    plaudit.add_command(log_sample, name="log-sample")
    try:
        yield
    finally:
        plaudit.commands.pop("log-sample", None)
        sections = [
            *getattr(plaudit, "_sections", []),
            *getattr(plaudit, "_user_sections", []),
        ]
        if getattr(plaudit, "_default_section", None) is not None:
            sections.append(plaudit._default_section)
        for section in sections:
            getattr(section, "commands", {}).pop("log-sample", None)


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "flight.log"


@pytest.fixture
def runner(log_path: Path) -> CliRunner:
    """CliRunner whose flight recorder writes under the temp dir."""
    return CliRunner(env={"PLAUDIT_LOG_PATH": str(log_path), "PLAUDIT_DB_URL": ""})


@dataclass
class CliDatabase:
    """A migrated SQLite database the CLI is pointed at."""

    url: str
    seeder: SqlSeeder


@pytest.fixture
def cli_db(sqlite_engine_file, make_seeder, runner: CliRunner) -> CliDatabase:
    """Migrated SQLite file, exported to the runner as PLAUDIT_DB_URL."""
    url = sqlite_engine_file.url.render_as_string(hide_password=False)
    runner.env["PLAUDIT_DB_URL"] = url
    return CliDatabase(url=url, seeder=make_seeder(sqlite_engine_file))


@pytest.fixture
def fresh_db_url(sqlite_file_url: str, runner: CliRunner) -> str:
    """Unmigrated SQLite file, exported to the runner as PLAUDIT_DB_URL."""
    runner.env["PLAUDIT_DB_URL"] = sqlite_file_url
    return sqlite_file_url
