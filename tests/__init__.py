"""PLAUDIT test suite.

Folder taxonomy
- unit/         : Fast checks of one module, in memory only.
- integration/  : Adapters against real SQLite files and PostgreSQL.
- contract/     : Behaviour every storage backend must share, concurrency included.
- e2e/          : The ``plaudit`` CLI driven through click's CliRunner.
- fixtures/     : Shared fixtures, loaded via ``pytest_plugins``.

Tests are marked after their folder (see ``conftest.py``), so
``pytest -m unit`` runs the fast suite.
"""
