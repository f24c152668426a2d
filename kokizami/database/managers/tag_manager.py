#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities and lookups through the kizami_tag relation.

Tags are plain labels. They are created in bulk from the #label tokens of
a description and looked up again by label to relate them to a kizami.

Key Features:
    - Bulk insert of labels, skipping labels that already exist
    - Lookup by id, by kizami and by any of several labels
    - Delete with relation cleanup

Usage:
    tag_mgr = TagManager(session, logger)

    tag_mgr.insert_many(["#docs", "#work"])
    tags = tag_mgr.find_by_labels(["#docs", "#work"])
    tags_of_kizami = tag_mgr.find_by_kizami_id(1)
"""
from typing import Iterable, List

from sqlalchemy import select

from kokizami.database.decorators import handle_db_errors, log_database_operation
from kokizami.database.interfaces import TagRepository
from kokizami.database.models import Kizami, Tag
from .base_manager import BaseManager


class TagManager(BaseManager, TagRepository):
    """
    Manages tag table operations.

    Labels are unique: inserting a label that is already stored is a
    no-op. Databases written by older tools may still hold duplicate
    labels; lookups then return every matching row.
    """

    @handle_db_errors
    @log_database_operation("insert_tags")
    def insert_many(self, labels: Iterable[str]) -> None:
        """
        Store labels that are not stored yet.

        Args:
            labels: Tag labels; duplicates and empty strings are skipped
        """
        wanted = [label for label in dict.fromkeys(labels) if label]
        if not wanted:
            return

        existing = set(
            self.session.scalars(select(Tag.label).where(Tag.label.in_(wanted)))
        )
        new_labels = [label for label in wanted if label not in existing]

        def _do_insert() -> None:
            self.session.add_all(Tag(label=label) for label in new_labels)
            self.session.flush()

        if new_labels:
            self._execute_with_retry(_do_insert)

            if self.logger:
                self.logger.log_debug(
                    "Inserted tags",
                    {"labels": new_labels, "skipped": len(wanted) - len(new_labels)},
                )

    @handle_db_errors
    @log_database_operation("find_tag_by_id")
    def find_by_id(self, tag_id: int) -> Tag:
        """
        Retrieve a tag by id.

        Raises:
            NotFoundError: If no tag has this id
        """
        return self._require(Tag, tag_id, "tag")

    @handle_db_errors
    @log_database_operation("delete_tag")
    def delete(self, tag_id: int) -> None:
        """
        Delete a tag.

        Relation rows pointing at the tag are removed with it, so no kizami
        keeps a dangling reference.

        Raises:
            NotFoundError: If no tag has this id
        """
        tag = self._require(Tag, tag_id, "tag")

        if self.logger:
            self.logger.log_debug(
                f"Deleting tag: {tag.label}",
                {"tag_id": tag.id, "usage_count": tag.usage_count},
            )

        tag.kizamis.clear()
        self.session.delete(tag)
        self.session.flush()

    @handle_db_errors
    @log_database_operation("find_all_tags")
    def find_all(self) -> List[Tag]:
        """All tags ordered by id ascending."""
        return self._get_all(Tag)

    @handle_db_errors
    @log_database_operation("find_tags_by_kizami_id")
    def find_by_kizami_id(self, kizami_id: int) -> List[Tag]:
        """
        Tags related to a kizami, ordered by tag id.

        Returns an empty list for kizami ids that do not exist.
        """
        stmt = (
            select(Tag)
            .join(Tag.kizamis)
            .where(Kizami.id == kizami_id)
            .order_by(Tag.id)
        )
        return list(self.session.scalars(stmt))

    @handle_db_errors
    @log_database_operation("find_tags_by_labels")
    def find_by_labels(self, labels: Iterable[str]) -> List[Tag]:
        """
        Tags whose label equals any of the given labels, ordered by id.
        """
        wanted = list(dict.fromkeys(labels))
        if not wanted:
            return []

        stmt = select(Tag).where(Tag.label.in_(wanted)).order_by(Tag.id)
        return list(self.session.scalars(stmt))
