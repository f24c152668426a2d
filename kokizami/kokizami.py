#!/usr/bin/env python3
"""
kokizami.py
--------------------
The Kokizami facade: the single entry point for starting, stopping,
editing, listing and summarizing kizami.

Every public method runs inside one ``session_scope`` of the storage it
was given, so each call is one transaction: a failure partway through
``stop_all`` or a re-tagging leaves storage as it was before the call.

States:
    Running  - stopped_at is None
    Stopped  - stopped_at holds the stop instant

Transitions:
    start            -> new Running kizami
    stop / stop_all  Running -> Stopped (Stopped -> Stopped overwrites the time)
    edit(..., "-")   Stopped -> Running
    delete           removes the kizami in any state

Usage:
    from kokizami import Kokizami
    from kokizami.database import KokizamiDB

    kkzm = Kokizami(KokizamiDB("~/.kokizami.db"))
    kizami = kkzm.start("write spec #docs")
    kkzm.stop(kizami.id)
    report = kkzm.summary_by_tag("2024-05")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional

# --- Local imports ---
from kokizami.core.exceptions import ValidationError
from kokizami.core.logging_manager import KokizamiLogger
from kokizami.core.validators import DataValidator
from kokizami.database.decorators import log_database_operation
from kokizami.database.interfaces import Storage
from kokizami.database.models import Kizami, Tag
from kokizami.database.summary import Elapsed, SummaryEngine
from kokizami.database.tagging import TagResolver


@dataclass(frozen=True)
class KizamiChanges:
    """
    Partial update of a kizami; fields left as None are kept.

    Attributes:
        desc: New description (tags are re-derived from it)
        started_at: New start time (aware)
        stopped_at: New stop time (aware)
        reopen: Clear the stop time, making the kizami Running again
    """

    desc: Optional[str] = None
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    reopen: bool = False

    def __post_init__(self) -> None:
        if self.reopen and self.stopped_at is not None:
            raise ValidationError("Cannot set a stop time and reopen at once")
        if self.desc is not None:
            DataValidator.validate_description(self.desc)


class Kokizami:
    """
    Facade over a Storage (KokizamiDB or MemoryStorage).

    Attributes:
        storage: Unit-of-work provider with kizamis/tags repositories
        clock: Returns the current instant
        tz: Timezone used to read edit timestamps (None: system local time)
        logger: Optional logger, defaults to the storage's logger
    """

    def __init__(
        self,
        storage: Storage,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
        logger: Optional[KokizamiLogger] = None,
    ) -> None:
        self.storage = storage
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.tz = tz
        self.logger = logger if logger is not None else getattr(storage, "logger", None)

    def now(self) -> datetime:
        """Current instant in UTC, truncated to whole seconds."""
        return self.clock().astimezone(timezone.utc).replace(microsecond=0)

    def _resolver(self) -> TagResolver:
        return TagResolver(self.storage.kizamis, self.storage.tags, self.logger)

    def _stop_running(self, now: datetime) -> int:
        running = self.storage.kizamis.find_by_stopped_at(None)
        for kizami in running:
            kizami.stopped_at = now
            self.storage.kizamis.update(kizami)
        return len(running)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @log_database_operation("start")
    def start(self, desc: str, stop_running: bool = False) -> Kizami:
        """
        Start a new kizami and tag it from its description.

        Args:
            desc: Non-empty description, may contain #tags
            stop_running: Stop every running kizami first

        Returns:
            The new, running Kizami

        Raises:
            ValidationError: If desc is empty (nothing is stored)
        """
        DataValidator.validate_description(desc)
        now = self.now()

        with self.storage.session_scope():
            if stop_running:
                self._stop_running(now)
            kizami = self.storage.kizamis.insert(desc, started_at=now)
            self._resolver().reconcile(kizami.id, desc)
            return kizami

    @log_database_operation("restart")
    def restart(self, kizami_id: int, stop_running: bool = False) -> Kizami:
        """
        Start a new kizami with the description of an existing one.

        Raises:
            NotFoundError: If kizami_id is unknown
        """
        now = self.now()

        with self.storage.session_scope():
            desc = self.storage.kizamis.find_by_id(kizami_id).desc
            if stop_running:
                self._stop_running(now)
            kizami = self.storage.kizamis.insert(desc, started_at=now)
            self._resolver().reconcile(kizami.id, desc)
            return kizami

    @log_database_operation("stop")
    def stop(self, kizami_id: int) -> Kizami:
        """
        Record now as the stop time of a kizami.

        Stopping an already stopped kizami overwrites its stop time.

        Raises:
            NotFoundError: If kizami_id is unknown
        """
        now = self.now()

        with self.storage.session_scope():
            kizami = self.storage.kizamis.find_by_id(kizami_id)
            kizami.stopped_at = now
            return self.storage.kizamis.update(kizami)

    @log_database_operation("stop_all")
    def stop_all(self) -> int:
        """
        Stop every running kizami with the same stop time.

        Returns:
            Number of kizami stopped (0 when none was running)
        """
        now = self.now()

        with self.storage.session_scope():
            return self._stop_running(now)

    @log_database_operation("update")
    def update(self, kizami_id: int, changes: KizamiChanges) -> Kizami:
        """
        Apply a partial update; tags are re-derived when desc changes.

        Raises:
            NotFoundError: If kizami_id is unknown
            ValidationError: If the result would stop before it started
        """
        with self.storage.session_scope():
            return self._apply(kizami_id, changes, retag=changes.desc is not None)

    @log_database_operation("edit")
    def edit(
        self, kizami_id: int, desc: str, started_at: str, stopped_at: str
    ) -> Kizami:
        """
        Replace description, start and stop time of a kizami.

        Args:
            kizami_id: Kizami to edit
            desc: New description
            started_at: "YYYY-MM-DD HH:MM:SS" in the facade's timezone
            stopped_at: Same format, or "-" to reopen the kizami

        Raises:
            ValidationError: On an empty description, a malformed
                timestamp or a stop time before the start time
            NotFoundError: If kizami_id is unknown
        """
        stop = DataValidator.parse_stop_timestamp(stopped_at, self.tz)
        changes = KizamiChanges(
            desc=desc,
            started_at=DataValidator.parse_timestamp(started_at, self.tz),
            stopped_at=stop,
            reopen=stop is None,
        )

        with self.storage.session_scope():
            return self._apply(kizami_id, changes, retag=True)

    def _apply(self, kizami_id: int, changes: KizamiChanges, retag: bool) -> Kizami:
        kizami = self.storage.kizamis.find_by_id(kizami_id)

        desc = changes.desc if changes.desc is not None else kizami.desc
        started_at = changes.started_at or kizami.started_at
        if changes.reopen:
            stopped_at = None
        else:
            stopped_at = changes.stopped_at or kizami.stopped_at

        DataValidator.validate_interval(started_at, stopped_at)

        kizami.desc = desc
        kizami.started_at = started_at
        kizami.stopped_at = stopped_at
        kizami = self.storage.kizamis.update(kizami)

        if retag:
            self._resolver().reconcile(kizami.id, desc)
        return kizami

    @log_database_operation("delete")
    def delete(self, kizami_id: int) -> None:
        """
        Delete a kizami and its tag relations.

        Raises:
            NotFoundError: If kizami_id is unknown
        """
        with self.storage.session_scope():
            self.storage.kizamis.delete(kizami_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @log_database_operation("get")
    def get(self, kizami_id: int) -> Kizami:
        """
        Raises:
            NotFoundError: If kizami_id is unknown
        """
        with self.storage.session_scope():
            return self.storage.kizamis.find_by_id(kizami_id)

    @log_database_operation("list")
    def list(self) -> List[Kizami]:
        """All kizami ordered by id."""
        with self.storage.session_scope():
            return self.storage.kizamis.find_all()

    @log_database_operation("summary_by_tag")
    def summary_by_tag(self, yyyymm: str) -> List[Elapsed]:
        """
        Elapsed time per tag for a month.

        Raises:
            ValidationError: If yyyymm is not YYYY-MM (storage is not touched)
        """
        DataValidator.validate_month(yyyymm)
        with self.storage.session_scope():
            return self._summary().elapsed_by_tag(yyyymm)

    @log_database_operation("summary_by_desc")
    def summary_by_desc(self, yyyymm: str) -> List[Elapsed]:
        """
        Elapsed time per (tag, description) for a month.

        Raises:
            ValidationError: If yyyymm is not YYYY-MM (storage is not touched)
        """
        DataValidator.validate_month(yyyymm)
        with self.storage.session_scope():
            return self._summary().elapsed_by_desc(yyyymm)

    def _summary(self) -> SummaryEngine:
        return SummaryEngine(
            self.storage.kizamis, self.storage.tags, self.logger, clock=self.now
        )

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    @log_database_operation("tags_of")
    def tags_of(self, kizami_id: int) -> List[Tag]:
        """Tags of a kizami; empty for unknown or deleted ids."""
        with self.storage.session_scope():
            return self.storage.tags.find_by_kizami_id(kizami_id)

    @log_database_operation("all_tags")
    def all_tags(self) -> List[Tag]:
        with self.storage.session_scope():
            return self.storage.tags.find_all()

    @log_database_operation("delete_tag")
    def delete_tag(self, tag_id: int) -> None:
        """
        Delete a tag and its relations to kizami.

        Raises:
            NotFoundError: If tag_id is unknown
        """
        with self.storage.session_scope():
            self.storage.tags.delete(tag_id)
