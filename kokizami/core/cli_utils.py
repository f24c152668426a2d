#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for the kkzm commands.

Functions:
    this_month: Current month as YYYY-MM (local time)
    format_duration: Whole-second duration text such as "1h2m3s"
    format_kizami: One tab-separated kizami row
    format_summary: Per-tag totals with the descriptions nested below

Usage:
    from kokizami.core.cli_utils import format_kizami

    click.echo(format_kizami(kizami, now))
"""
from datetime import datetime, timedelta, tzinfo
from typing import Dict, List, Optional

from kokizami.core.validators import MONTH_FORMAT, DataValidator

NO_TAG = "-- No tag --"
RUNNING_MARKER = "*"


def this_month(tz: Optional[tzinfo] = None) -> str:
    """Current month in tz (default: system local time) as YYYY-MM."""
    return datetime.now(tz).strftime(MONTH_FORMAT)


def format_duration(value: timedelta) -> str:
    """
    Format a duration rounded to whole seconds.

    Examples:
        >>> format_duration(timedelta(seconds=3723.6))
        '1h2m4s'
        >>> format_duration(timedelta(0))
        '0s'
    """
    seconds = value.total_seconds()
    sign = "-" if seconds < 0 else ""
    # Half a second rounds away from zero
    total = int(abs(seconds) + 0.5)

    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def format_kizami(kizami, now: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Format a kizami as "id, desc, started_at, stopped_at, elapsed" (tab separated).

    Times are shown in tz (default: local). A running kizami shows the
    current time prefixed with "*" as its stop time.
    """
    if kizami.stopped_at is None:
        stopped = RUNNING_MARKER + DataValidator.format_timestamp(now, tz)
    else:
        stopped = DataValidator.format_timestamp(kizami.stopped_at, tz)

    return "\t".join(
        [
            str(kizami.id),
            kizami.desc,
            DataValidator.format_timestamp(kizami.started_at, tz),
            stopped,
            format_duration(kizami.elapsed(now)),
        ]
    )


def format_summary(yyyymm: str, by_tag: List, by_desc: List) -> str:
    """
    Render monthly totals: one line per tag, its descriptions indented below.

    Args:
        yyyymm: Month shown in the header
        by_tag: Elapsed records per tag
        by_desc: Elapsed records per (tag, desc)

    Returns:
        Multi-line summary text
    """
    descs: Dict[str, List] = {}
    for record in by_desc:
        descs.setdefault(record.tag, []).append(record)

    lines = [f"Summary of {yyyymm}"]
    for record in by_tag:
        lines.append(f"{record.tag or NO_TAG}\t{format_duration(record.elapsed)}")
        for item in descs.get(record.tag, []):
            lines.append(f"  {item.desc}\t{format_duration(item.elapsed)}")
    return "\n".join(lines)
