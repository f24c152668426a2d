#!/usr/bin/env python3
"""
interfaces.py
--------------------
Repository contracts for kizami and tag persistence.

KizamiRepository and TagRepository describe what the facade, the tagging
resolver and the summary engine need from storage. Two families implement
them:

    - KizamiManager / TagManager: SQLAlchemy-backed (managers package)
    - MemoryKizamiRepository / MemoryTagRepository: in-memory doubles

Storage is the unit-of-work surface the facade talks to: a
``session_scope()`` context manager and the two repositories, valid inside
that scope.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Protocol

if TYPE_CHECKING:
    from .models import Kizami, Tag


class KizamiRepository(ABC):
    """Persistence and lookup for kizami."""

    @abstractmethod
    def insert(self, desc: str, started_at: Optional[datetime] = None) -> "Kizami":
        """
        Create a running kizami.

        Raises:
            ValidationError: If desc is empty
        """

    @abstractmethod
    def find_by_id(self, kizami_id: int) -> "Kizami":
        """
        Raises:
            NotFoundError: If no kizami has this id
        """

    @abstractmethod
    def find_all(self) -> List["Kizami"]:
        """All kizami ordered by id ascending."""

    @abstractmethod
    def find_by_stopped_at(self, stopped_at: Optional[datetime]) -> List["Kizami"]:
        """Kizami whose stop time equals stopped_at; None selects running ones."""

    @abstractmethod
    def find_started_between(self, start: datetime, end: datetime) -> List["Kizami"]:
        """Kizami with start <= started_at < end, ordered by id."""

    @abstractmethod
    def update(self, kizami: "Kizami") -> "Kizami":
        """
        Overwrite desc, started_at and stopped_at of the stored row.

        Raises:
            NotFoundError: If kizami.id is not stored
        """

    @abstractmethod
    def delete(self, kizami_id: int) -> None:
        """
        Remove a kizami and every relation row referencing it.

        Raises:
            NotFoundError: If no kizami has this id
        """

    @abstractmethod
    def tag(self, kizami_id: int, tag_ids: Iterable[int]) -> None:
        """Relate a kizami to the given tags."""

    @abstractmethod
    def untag(self, kizami_id: int) -> None:
        """Remove every relation row of a kizami."""


class TagRepository(ABC):
    """Persistence and lookup for tags and the kizami-tag relation."""

    @abstractmethod
    def insert_many(self, labels: Iterable[str]) -> None:
        """Store the given labels; labels already stored are skipped."""

    @abstractmethod
    def find_by_id(self, tag_id: int) -> "Tag":
        """
        Raises:
            NotFoundError: If no tag has this id
        """

    @abstractmethod
    def delete(self, tag_id: int) -> None:
        """
        Remove a tag and every relation row pointing at it.

        Raises:
            NotFoundError: If no tag has this id
        """

    @abstractmethod
    def find_all(self) -> List["Tag"]:
        """All tags ordered by id ascending."""

    @abstractmethod
    def find_by_kizami_id(self, kizami_id: int) -> List["Tag"]:
        """Tags related to a kizami; empty for unknown ids."""

    @abstractmethod
    def find_by_labels(self, labels: Iterable[str]) -> List["Tag"]:
        """Tags whose label equals any of the given labels."""


class Storage(Protocol):
    """Unit-of-work surface shared by KokizamiDB and MemoryStorage."""

    logger: Any

    def session_scope(self) -> AbstractContextManager: ...

    @property
    def kizamis(self) -> KizamiRepository: ...

    @property
    def tags(self) -> TagRepository: ...
