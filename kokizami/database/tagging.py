#!/usr/bin/env python3
"""
tagging.py
--------------------
Derives tags from kizami descriptions and keeps the relation in sync.

A tag is any space-separated token of at least two characters that starts
with '#'. Re-tagging is a full replace: the kizami is untagged first, then
related to exactly the tags found in its current description.

Usage:
    extract_tags("fix bug #work #urgent")   # ['#work', '#urgent']

    resolver = TagResolver(kizami_repo, tag_repo, logger)
    resolver.reconcile(kizami.id, kizami.desc)
"""
from __future__ import annotations

from typing import List, Optional

from kokizami.core.logging_manager import KokizamiLogger
from .decorators import log_database_operation
from .interfaces import KizamiRepository, TagRepository
from .models.entities import TAG_MARKER


def extract_tags(desc: str) -> List[str]:
    """
    Extract #label tokens from a description.

    The description is split on single spaces; tokens keep their
    first-occurrence order and duplicates are kept.

    Args:
        desc: Kizami description

    Returns:
        Tokens starting with '#' that are at least two characters long
    """
    return [
        token
        for token in desc.split(" ")
        if token.startswith(TAG_MARKER) and len(token) >= 2
    ]


class TagResolver:
    """
    Reconciles the kizami_tag relation with a kizami's description.

    Attributes:
        kizamis: Repository used to (un)tag the kizami
        tags: Repository used to store and look up labels
        logger: Optional logger for operation tracking
    """

    def __init__(
        self,
        kizamis: KizamiRepository,
        tags: TagRepository,
        logger: Optional[KokizamiLogger] = None,
    ) -> None:
        self.kizamis = kizamis
        self.tags = tags
        self.logger = logger

    @log_database_operation("reconcile_tags")
    def reconcile(self, kizami_id: int, desc: str) -> List[int]:
        """
        Replace a kizami's tags with the ones found in desc.

        Steps:
            1. Remove every relation row of the kizami
            2. Stop here if desc carries no tags
            3. Store the extracted labels (existing ones are kept)
            4. Look the labels up and relate the kizami to them, in
               lookup order

        Args:
            kizami_id: Kizami to re-tag
            desc: Description to extract tags from

        Returns:
            Ids of the tags now related to the kizami
        """
        self.kizamis.untag(kizami_id)

        labels = extract_tags(desc)
        if not labels:
            return []

        self.tags.insert_many(labels)
        tag_ids = list(dict.fromkeys(tag.id for tag in self.tags.find_by_labels(labels)))
        self.kizamis.tag(kizami_id, tag_ids)

        if self.logger:
            self.logger.log_debug(
                "Reconciled kizami tags",
                {"kizami_id": kizami_id, "labels": labels, "tag_ids": tag_ids},
            )

        return tag_ids
