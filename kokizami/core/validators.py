#!/usr/bin/env python3
"""
validators.py
--------------------
Input validation and normalization for Kokizami operations.

All checks here run before storage is touched, so a rejected input never
creates or changes a row.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import Any, Optional, Tuple

from .exceptions import ValidationError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MONTH_FORMAT = "%Y-%m"
REOPEN_MARKER = "-"

_MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


class DataValidator:
    """Centralized validation for facade and summary inputs."""

    @staticmethod
    def validate_description(desc: Any) -> str:
        """
        Ensure a kizami description is a non-empty string.

        Args:
            desc: Candidate description

        Returns:
            The description, unchanged

        Raises:
            ValidationError: If desc is not a string or is empty
        """
        if not isinstance(desc, str) or desc == "":
            raise ValidationError("Description cannot be empty")
        return desc

    @staticmethod
    def validate_month(yyyymm: Any) -> Tuple[datetime, datetime]:
        """
        Validate a YYYY-MM month string and return its UTC bounds.

        Args:
            yyyymm: Month string such as "2024-05"

        Returns:
            (month_start, next_month_start) as aware UTC datetimes;
            the range is half-open

        Raises:
            ValidationError: If the string is not a valid year-month
        """
        match = _MONTH_PATTERN.match(yyyymm) if isinstance(yyyymm, str) else None
        if match is None:
            raise ValidationError(
                f"Invalid month format: {yyyymm!r} (expected YYYY-MM)"
            )

        year, month = int(match.group(1)), int(match.group(2))
        if year < 1:
            raise ValidationError(f"Invalid month: {yyyymm!r}")

        start = datetime(year, month, 1, tzinfo=timezone.utc)
        if month == 12:
            end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        else:
            end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
        return start, end

    @staticmethod
    def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> datetime:
        """
        Parse a "YYYY-MM-DD HH:MM:SS" wall-clock string into UTC.

        Args:
            value: Timestamp string
            tz: Timezone the string is expressed in (default: system local)

        Returns:
            Aware datetime in UTC

        Raises:
            ValidationError: If the string does not match the format
        """
        if not isinstance(value, str):
            raise ValidationError(f"Invalid timestamp: {value!r}")
        try:
            naive = datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
        except ValueError:
            raise ValidationError(
                f"Invalid timestamp: {value!r} (expected YYYY-MM-DD HH:MM:SS)"
            )

        aware = naive.astimezone() if tz is None else naive.replace(tzinfo=tz)
        return aware.astimezone(timezone.utc)

    @staticmethod
    def parse_stop_timestamp(
        value: Any, tz: Optional[tzinfo] = None
    ) -> Optional[datetime]:
        """
        Parse a stop time, where "-" means the kizami is still running.

        Returns:
            Aware UTC datetime, or None for the reopen marker
        """
        if isinstance(value, str) and value.strip() == REOPEN_MARKER:
            return None
        return DataValidator.parse_timestamp(value, tz)

    @staticmethod
    def format_timestamp(value: datetime, tz: Optional[tzinfo] = None) -> str:
        """Format an aware datetime as wall-clock text in tz (default: local)."""
        return value.astimezone(tz).strftime(TIMESTAMP_FORMAT)

    @staticmethod
    def validate_interval(
        started_at: datetime, stopped_at: Optional[datetime]
    ) -> None:
        """
        Reject a stop time earlier than the start time.

        Raises:
            ValidationError: If stopped_at < started_at
        """
        if stopped_at is not None and stopped_at < started_at:
            raise ValidationError(
                "Stop time cannot be earlier than start time "
                f"({stopped_at.isoformat()} < {started_at.isoformat()})"
            )
