"""Supported database dialects.

Row locking differs between backends (PostgreSQL has ``SELECT ... FOR UPDATE``,
SQLite only has a database-wide write lock), so adapters branch on the dialect.
This enum keeps those branches free of raw string literals.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class UnsupportedDialect(Exception):
    """Raised when an unsupported database dialect is encountered."""


class DialectName(str, Enum):
    """Enumeration of supported SQLAlchemy dialect names.

    Attributes:
        POSTGRES: PostgreSQL dialect (``"postgresql"``).
        SQLITE:   SQLite dialect (``"sqlite"``).
    """

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Normalize a dialect or driver-qualified name to DialectName.

        Accepts aliases such as 'postgres', 'pg', 'postgresql+psycopg' and
        'sqlite+pysqlite'.

        Args:
            dialect_str: a raw dialect string

        Returns:
            The corresponding DialectName enum member.

        Raises:
            UnsupportedDialect: if the dialect is not recognized or supported.
        """

        base = (dialect_str or "").strip().lower().split("+", 1)[0]

        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base == "sqlite":
            return cls.SQLITE

        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """Extract the dialect from a SQLAlchemy Engine or Connection.

        Raises:
            UnsupportedDialect: if the object has no dialect or it is unsupported.
        """
        try:
            name = obj.dialect.name
        except AttributeError as e:
            raise UnsupportedDialect(
                f"Object {type(obj).__name__} does not expose .dialect.name"
            ) from e
        return cls.from_string(name)
