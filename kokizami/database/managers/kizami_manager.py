#!/usr/bin/env python3
"""
kizami_manager.py
--------------------
Manages Kizami entities and their tag relation rows.

Key Features:
    - Insert of running kizami
    - Lookup by id, by stop time and by start-time range
    - Full overwrite updates
    - Delete with relation cleanup
    - Tag / untag through the kizami_tag relation

Usage:
    kizami_mgr = KizamiManager(session, logger)

    kizami = kizami_mgr.insert("write spec #docs")
    running = kizami_mgr.find_by_stopped_at(None)
    kizami_mgr.tag(kizami.id, [1, 2])
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import String, func, select

from kokizami.core.validators import DataValidator
from kokizami.database.decorators import handle_db_errors, log_database_operation
from kokizami.database.interfaces import KizamiRepository
from kokizami.database.models import SENTINEL_TEXT, Kizami, Tag
from kokizami.database.models.base import format_stored_timestamp
from .base_manager import BaseManager


def _normalized(column):
    """
    SQLite datetime() of a timestamp column.

    Folds the "T" separator, fractional seconds, "Z" and numeric offsets
    into canonical "YYYY-MM-DD HH:MM:SS" UTC text.
    """
    return func.datetime(column, type_=String)


class KizamiManager(BaseManager, KizamiRepository):
    """
    Manages kizami table operations and the kizami side of kizami_tag.
    """

    @handle_db_errors
    @log_database_operation("insert_kizami")
    def insert(self, desc: str, started_at: Optional[datetime] = None) -> Kizami:
        """
        Create a new running kizami.

        Args:
            desc: Non-empty description
            started_at: Start time (default: now, whole seconds, UTC)

        Returns:
            The stored Kizami with its assigned id

        Raises:
            ValidationError: If desc is empty
        """
        desc = DataValidator.validate_description(desc)
        if started_at is None:
            started_at = datetime.now(timezone.utc).replace(microsecond=0)

        kizami = Kizami(desc=desc, started_at=started_at, stopped_at=None)

        def _do_insert() -> Kizami:
            self.session.add(kizami)
            self.session.flush()
            return kizami

        kizami = self._execute_with_retry(_do_insert)

        if self.logger:
            self.logger.log_debug("Inserted kizami", {"kizami_id": kizami.id})

        return kizami

    @handle_db_errors
    @log_database_operation("find_kizami_by_id")
    def find_by_id(self, kizami_id: int) -> Kizami:
        """
        Retrieve a kizami by id.

        Raises:
            NotFoundError: If no kizami has this id
        """
        return self._require(Kizami, kizami_id, "kizami")

    @handle_db_errors
    @log_database_operation("find_all_kizami")
    def find_all(self) -> List[Kizami]:
        """All kizami ordered by id ascending."""
        return self._get_all(Kizami)

    @handle_db_errors
    @log_database_operation("find_kizami_by_stopped_at")
    def find_by_stopped_at(self, stopped_at: Optional[datetime]) -> List[Kizami]:
        """
        Retrieve kizami stopped exactly at the given instant.

        Args:
            stopped_at: Stop time to match; None selects running kizami

        Returns:
            Matching kizami ordered by id
        """
        stmt = select(Kizami).order_by(Kizami.id)
        if stopped_at is None:
            # Running rows carry the sentinel in the stop column
            stmt = stmt.where(_normalized(Kizami.stopped_at) == SENTINEL_TEXT)
        else:
            stmt = stmt.where(
                _normalized(Kizami.stopped_at) == format_stored_timestamp(stopped_at)
            )
        return list(self.session.scalars(stmt))

    @handle_db_errors
    @log_database_operation("find_kizami_started_between")
    def find_started_between(self, start: datetime, end: datetime) -> List[Kizami]:
        """
        Retrieve kizami started within [start, end).

        Bounds are compared against the normalized UTC text of the column,
        so legacy rows with offsets fall in the month of their UTC instant.
        """
        stmt = (
            select(Kizami)
            .where(
                _normalized(Kizami.started_at) >= format_stored_timestamp(start),
                _normalized(Kizami.started_at) < format_stored_timestamp(end),
            )
            .order_by(Kizami.id)
        )
        return list(self.session.scalars(stmt))

    @handle_db_errors
    @log_database_operation("update_kizami")
    def update(self, kizami: Kizami) -> Kizami:
        """
        Overwrite desc, started_at and stopped_at of a stored kizami.

        Args:
            kizami: Kizami carrying the id to update and the new values;
                may be the persistent instance itself or a detached copy

        Returns:
            The persistent, updated Kizami

        Raises:
            NotFoundError: If kizami.id is not stored
            ValidationError: If the new description is empty
        """
        desc = DataValidator.validate_description(kizami.desc)
        stored = self._require(Kizami, kizami.id, "kizami")

        def _do_update() -> Kizami:
            stored.desc = desc
            stored.started_at = kizami.started_at
            stored.stopped_at = kizami.stopped_at
            self.session.flush()
            return stored

        return self._execute_with_retry(_do_update)

    @handle_db_errors
    @log_database_operation("delete_kizami")
    def delete(self, kizami_id: int) -> None:
        """
        Delete a kizami and its relation rows.

        Raises:
            NotFoundError: If no kizami has this id
        """
        kizami = self._require(Kizami, kizami_id, "kizami")

        if self.logger:
            self.logger.log_debug(
                "Deleting kizami",
                {"kizami_id": kizami.id, "tag_count": len(kizami.tags)},
            )

        # Clearing the collection deletes the kizami_tag rows
        kizami.tags.clear()
        self.session.delete(kizami)
        self.session.flush()

    @handle_db_errors
    @log_database_operation("tag_kizami")
    def tag(self, kizami_id: int, tag_ids: Iterable[int]) -> None:
        """
        Relate a kizami to tags, one relation row per distinct pair.

        Raises:
            NotFoundError: If the kizami or one of the tags is not stored
        """
        kizami = self._require(Kizami, kizami_id, "kizami")

        for tag_id in dict.fromkeys(tag_ids):
            tag = self._require(Tag, tag_id, "tag")
            if tag not in kizami.tags:
                kizami.tags.append(tag)

        self.session.flush()

    @handle_db_errors
    @log_database_operation("untag_kizami")
    def untag(self, kizami_id: int) -> None:
        """Remove every relation row of a kizami (no-op for unknown ids)."""
        kizami = self.session.get(Kizami, kizami_id)
        if kizami is None:
            return

        kizami.tags.clear()
        self.session.flush()
