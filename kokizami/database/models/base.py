"""
Base Classes and Column Types
------------------------------

Foundational ORM pieces for the Kokizami database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - UTCTimestamp: UTC text timestamp column ("YYYY-MM-DD HH:MM:SS")
    - StopTimestamp: UTCTimestamp that maps the epoch sentinel to None

Both column types keep the on-disk text format, so database files written
by earlier kokizami releases open unchanged.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import datetime, timezone
from typing import Any, Optional

# --- Third party ---
from sqlalchemy import String
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

STORAGE_FORMAT = "%Y-%m-%d %H:%M:%S"

# "Not yet stopped" marker as written to the stop column
SENTINEL_TEXT = "1970-01-01 00:00:00"
SENTINEL = datetime(1970, 1, 1, tzinfo=timezone.utc)

_STORED = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[ T](\d{2}:\d{2}:\d{2})(?:\.\d+)?\s*(Z|[+-]\d{2}:?\d{2})?"
)


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base and gives access to the metadata
    object used for table creation.
    """

    pass


def parse_stored_timestamp(value: str) -> datetime:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts the canonical "YYYY-MM-DD HH:MM:SS" form plus the variants
    older writers produced: a "T" separator, fractional seconds and a
    trailing "Z" or numeric UTC offset.

    Raises:
        ValueError: If the text is not a timestamp
    """
    match = _STORED.match(value.strip())
    if match is None:
        raise ValueError(f"Unrecognized stored timestamp: {value!r}")

    day, clock, offset = match.groups()
    parsed = datetime.strptime(f"{day} {clock}", STORAGE_FORMAT)
    if not offset or offset == "Z":
        return parsed.replace(tzinfo=timezone.utc)

    aware = datetime.strptime(
        f"{day} {clock} {offset.replace(':', '')}", f"{STORAGE_FORMAT} %z"
    )
    return aware.astimezone(timezone.utc)


def format_stored_timestamp(value: datetime) -> str:
    """Format a datetime for storage; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(STORAGE_FORMAT)


class UTCTimestamp(TypeDecorator):
    """Timestamp stored as UTC text, returned as an aware UTC datetime."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> Optional[str]:
        if value is None:
            return None
        return format_stored_timestamp(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> Optional[datetime]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return parse_stored_timestamp(value)


class StopTimestamp(UTCTimestamp):
    """
    Stop time column with the epoch sentinel.

    Python None (still running) is written as "1970-01-01 00:00:00" and
    read back as None, so nothing above the storage layer handles the
    sentinel value.
    """

    cache_ok = True
    # None is a real value here and must reach process_bind_param
    should_evaluate_none = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> Optional[str]:
        if value is None:
            return SENTINEL_TEXT
        return super().process_bind_param(value, dialect)

    def process_result_value(self, value: Any, dialect: Dialect) -> Optional[datetime]:
        parsed = super().process_result_value(value, dialect)
        if parsed is None or parsed == SENTINEL:
            return None
        return parsed
