"""Custom SQLAlchemy types for PLAUDIT.

These types hide backend differences (SQLite has neither tz-aware timestamps
nor a native decimal) while giving Python code precise types to work with.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import Numeric
from sqlalchemy.types import DateTime, TypeDecorator

from plaudit.adapters.db.dialects import DialectName

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["TenthsDecimal", "UTCDateTime"]

TENTH = Decimal("0.1")


class UTCDateTime(TypeDecorator[datetime]):  # pylint: disable=too-many-ancestors
    """Timezone-aware UTC datetime.

    Ensures values are stored and returned as aware ``datetime`` objects in UTC.
    Naive datetimes are treated as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        # SQLite: store naive UTC so it won't be reinterpreted as local
        return (
            value.replace(tzinfo=None)
            if dialect.name == DialectName.SQLITE.value
            else value
        )

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            # SQLite returns naive; declare it as UTC
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        return value

    def process_literal_param(self, value: datetime | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[datetime]:
        return datetime


class TenthsDecimal(TypeDecorator[Decimal]):  # pylint: disable=too-many-ancestors
    """A non-negative decimal with exactly one fractional digit.

    Stored as ``NUMERIC(2, 1)``. Values cross the driver boundary as floats
    (SQLite has no native decimal) and are re-quantized on the way out, so
    Python code always sees ``Decimal("4.3")`` rather than ``4.29999...``.
    """

    impl = Numeric(2, 1, asdecimal=False)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        return float(Decimal(value).quantize(TENTH, rounding=ROUND_HALF_UP))

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None:
            return None
        return Decimal(str(value)).quantize(TENTH, rounding=ROUND_HALF_UP)

    def process_literal_param(self, value: Decimal | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[Decimal]:
        return Decimal
