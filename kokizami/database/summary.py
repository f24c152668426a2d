#!/usr/bin/env python3
"""
summary.py
------------------
Monthly elapsed-time summaries.

A kizami belongs to month YYYY-MM when its start time (UTC) falls in
[first day of the month, first day of the next month). Running kizami count
up to "now". Summaries are computed on demand and never stored.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from kokizami.core.logging_manager import KokizamiLogger
from kokizami.core.validators import DataValidator
from .decorators import log_database_operation
from .interfaces import KizamiRepository, TagRepository
from .models import Kizami

UNTAGGED = ""
NO_DESC = ""


@dataclass
class Elapsed:
    """
    Elapsed time of one summary group.

    Attributes:
        tag: Tag name without '#', "" for untagged kizami
        desc: Description ("" in per-tag summaries)
        count: Number of kizami in the group
        elapsed: Total elapsed time of the group
    """

    tag: str
    desc: str
    count: int
    elapsed: timedelta


class SummaryEngine:
    """
    Aggregates elapsed time over a month, grouped by tag or by (tag, desc).

    A kizami with several tags contributes to each of its tag groups; a
    kizami without tags goes to the untagged group.
    """

    def __init__(
        self,
        kizamis: KizamiRepository,
        tags: TagRepository,
        logger: Optional[KokizamiLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the summary engine.

        Args:
            kizamis: Repository to read kizami from
            tags: Repository to read each kizami's tags from
            logger: Optional logger for summary operations
            clock: Returns "now" for running kizami (default: UTC now)
        """
        self.kizamis = kizamis
        self.tags = tags
        self.logger = logger
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @log_database_operation("elapsed_by_tag")
    def elapsed_by_tag(self, yyyymm: str) -> List[Elapsed]:
        """
        Elapsed time per tag for a month, ordered by tag name.

        Raises:
            ValidationError: If yyyymm is not a valid YYYY-MM month
        """
        groups = self._group(yyyymm, by_desc=False)
        return [
            Elapsed(tag=tag, desc=NO_DESC, count=len(ids), elapsed=total)
            for (tag, _), (ids, total) in sorted(groups.items())
        ]

    @log_database_operation("elapsed_by_desc")
    def elapsed_by_desc(self, yyyymm: str) -> List[Elapsed]:
        """
        Elapsed time per (tag, description) pair for a month.

        The tag is carried on every record so callers can nest the
        descriptions under the per-tag totals.

        Raises:
            ValidationError: If yyyymm is not a valid YYYY-MM month
        """
        groups = self._group(yyyymm, by_desc=True)
        return [
            Elapsed(tag=tag, desc=desc, count=len(ids), elapsed=total)
            for (tag, desc), (ids, total) in sorted(groups.items())
        ]

    def _group(
        self, yyyymm: str, by_desc: bool
    ) -> Dict[Tuple[str, str], Tuple[set, timedelta]]:
        start, end = DataValidator.validate_month(yyyymm)
        now = self.clock()

        groups: Dict[Tuple[str, str], Tuple[set, timedelta]] = {}
        for kizami in self.kizamis.find_started_between(start, end):
            elapsed = kizami.elapsed(now)
            desc = kizami.desc if by_desc else NO_DESC
            for tag in self._tag_names(kizami):
                ids, total = groups.get((tag, desc), (set(), timedelta()))
                # Legacy duplicate labels must not count a kizami twice
                if kizami.id in ids:
                    continue
                ids.add(kizami.id)
                groups[(tag, desc)] = (ids, total + elapsed)

        if self.logger:
            self.logger.log_debug(
                "Summarized month",
                {"month": yyyymm, "groups": len(groups), "by_desc": by_desc},
            )

        return groups

    def _tag_names(self, kizami: Kizami) -> List[str]:
        names = [tag.name for tag in self.tags.find_by_kizami_id(kizami.id)]
        return list(dict.fromkeys(names)) or [UNTAGGED]
