"""Global pytest fixtures for PLAUDIT."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
    "tests.fixtures.datagen",
]

TESTS_ROOT = Path(__file__).parent.resolve()

# tests/<directory>/... -> default marker
DIRECTORY_MARKERS = {
    "unit": pytest.mark.unit,
    "integration": pytest.mark.integration,
    "contract": pytest.mark.contract,
    "e2e": pytest.mark.e2e,
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each test after the top-level directory it lives in."""
    for item in items:
        try:
            top = item.path.resolve().relative_to(TESTS_ROOT).parts[0]
        except (ValueError, IndexError):
            continue
        marker = DIRECTORY_MARKERS.get(top)
        if marker is not None and item.get_closest_marker(marker.name) is None:
            item.add_marker(marker)


@pytest.fixture
def engine(request: pytest.FixtureRequest) -> Engine:
    """Indirection fixture to parametrize over engine-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize(
            "engine", ["sqlite_engine_file", "postgres_engine"], indirect=True
        )
        def test_something(engine): ...
        ```
    """
    return request.getfixturevalue(request.param)
