#!/usr/bin/env python3
"""
memory.py
--------------------
In-memory repositories with the same contract as the SQLAlchemy managers.

MemoryStorage keeps kizami rows, tag rows and the relation in plain
dictionaries and hands out fresh, session-less model instances on every
read, the way a database would. ``session_scope()`` restores the state it
started from when the block raises, so multi-step operations are atomic
here too.

Usage:
    storage = MemoryStorage()
    kkzm = Kokizami(storage)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

# --- Local imports ---
from kokizami.core.exceptions import DatabaseError, NotFoundError
from kokizami.core.logging_manager import KokizamiLogger
from kokizami.core.validators import DataValidator
from .interfaces import KizamiRepository, TagRepository
from .models import Kizami, Tag

KizamiRow = Tuple[str, datetime, Optional[datetime]]


@dataclass
class _State:
    kizamis: Dict[int, KizamiRow] = field(default_factory=dict)
    tags: Dict[int, str] = field(default_factory=dict)
    relation: Dict[Tuple[int, int], None] = field(default_factory=dict)
    next_kizami_id: int = 1
    next_tag_id: int = 1

    def copy(self) -> "_State":
        return _State(
            kizamis=dict(self.kizamis),
            tags=dict(self.tags),
            relation=dict(self.relation),
            next_kizami_id=self.next_kizami_id,
            next_tag_id=self.next_tag_id,
        )


class MemoryKizamiRepository(KizamiRepository):
    """KizamiRepository over a MemoryStorage state."""

    def __init__(self, storage: "MemoryStorage") -> None:
        self._storage = storage

    @property
    def _state(self) -> _State:
        return self._storage.state

    def _build(self, kizami_id: int) -> Kizami:
        desc, started_at, stopped_at = self._state.kizamis[kizami_id]
        return Kizami(id=kizami_id, desc=desc, started_at=started_at, stopped_at=stopped_at)

    def _check(self, kizami_id: int) -> None:
        if kizami_id not in self._state.kizamis:
            raise NotFoundError("kizami", kizami_id)

    def insert(self, desc: str, started_at: Optional[datetime] = None) -> Kizami:
        desc = DataValidator.validate_description(desc)
        if started_at is None:
            started_at = datetime.now(timezone.utc).replace(microsecond=0)

        kizami_id = self._state.next_kizami_id
        self._state.next_kizami_id += 1
        self._state.kizamis[kizami_id] = (desc, started_at, None)
        return self._build(kizami_id)

    def find_by_id(self, kizami_id: int) -> Kizami:
        self._check(kizami_id)
        return self._build(kizami_id)

    def find_all(self) -> List[Kizami]:
        return [self._build(kizami_id) for kizami_id in sorted(self._state.kizamis)]

    def find_by_stopped_at(self, stopped_at: Optional[datetime]) -> List[Kizami]:
        return [
            self._build(kizami_id)
            for kizami_id in sorted(self._state.kizamis)
            if self._state.kizamis[kizami_id][2] == stopped_at
        ]

    def find_started_between(self, start: datetime, end: datetime) -> List[Kizami]:
        return [
            self._build(kizami_id)
            for kizami_id in sorted(self._state.kizamis)
            if start <= self._state.kizamis[kizami_id][1] < end
        ]

    def update(self, kizami: Kizami) -> Kizami:
        desc = DataValidator.validate_description(kizami.desc)
        self._check(kizami.id)
        self._state.kizamis[kizami.id] = (desc, kizami.started_at, kizami.stopped_at)
        return self._build(kizami.id)

    def delete(self, kizami_id: int) -> None:
        self._check(kizami_id)
        del self._state.kizamis[kizami_id]
        self.untag(kizami_id)

    def tag(self, kizami_id: int, tag_ids: Iterable[int]) -> None:
        self._check(kizami_id)
        for tag_id in tag_ids:
            if tag_id not in self._state.tags:
                raise NotFoundError("tag", tag_id)
            self._state.relation[(kizami_id, tag_id)] = None

    def untag(self, kizami_id: int) -> None:
        for pair in [p for p in self._state.relation if p[0] == kizami_id]:
            del self._state.relation[pair]


class MemoryTagRepository(TagRepository):
    """TagRepository over a MemoryStorage state."""

    def __init__(self, storage: "MemoryStorage") -> None:
        self._storage = storage

    @property
    def _state(self) -> _State:
        return self._storage.state

    def _build(self, tag_id: int) -> Tag:
        return Tag(id=tag_id, label=self._state.tags[tag_id])

    def insert_many(self, labels: Iterable[str]) -> None:
        existing = set(self._state.tags.values())
        for label in dict.fromkeys(labels):
            if label and label not in existing:
                self._state.tags[self._state.next_tag_id] = label
                self._state.next_tag_id += 1
                existing.add(label)

    def find_by_id(self, tag_id: int) -> Tag:
        if tag_id not in self._state.tags:
            raise NotFoundError("tag", tag_id)
        return self._build(tag_id)

    def delete(self, tag_id: int) -> None:
        if tag_id not in self._state.tags:
            raise NotFoundError("tag", tag_id)
        del self._state.tags[tag_id]
        for pair in [p for p in self._state.relation if p[1] == tag_id]:
            del self._state.relation[pair]

    def find_all(self) -> List[Tag]:
        return [self._build(tag_id) for tag_id in sorted(self._state.tags)]

    def find_by_kizami_id(self, kizami_id: int) -> List[Tag]:
        tag_ids = sorted(t for k, t in self._state.relation if k == kizami_id)
        return [self._build(tag_id) for tag_id in tag_ids]

    def find_by_labels(self, labels: Iterable[str]) -> List[Tag]:
        wanted = set(labels)
        return [
            self._build(tag_id)
            for tag_id in sorted(self._state.tags)
            if self._state.tags[tag_id] in wanted
        ]


class MemoryStorage:
    """
    Storage double for the Kokizami facade.

    Attributes:
        state: Current rows; replaced wholesale on rollback
        logger: Optional logger (same role as on KokizamiDB)
    """

    def __init__(self, logger: Optional[KokizamiLogger] = None) -> None:
        self.state = _State()
        self.logger = logger
        self._kizami_repo: Optional[MemoryKizamiRepository] = None
        self._tag_repo: Optional[MemoryTagRepository] = None

    @contextmanager
    def session_scope(self) -> Iterator[None]:
        """Run a block atomically: on error the previous state is restored."""
        snapshot = self.state.copy()
        self._kizami_repo = MemoryKizamiRepository(self)
        self._tag_repo = MemoryTagRepository(self)
        try:
            yield None
        except Exception:
            self.state = snapshot
            raise
        finally:
            self._kizami_repo = None
            self._tag_repo = None

    @property
    def kizamis(self) -> MemoryKizamiRepository:
        if self._kizami_repo is None:
            raise DatabaseError("Repositories require an active session_scope")
        return self._kizami_repo

    @property
    def tags(self) -> MemoryTagRepository:
        if self._tag_repo is None:
            raise DatabaseError("Repositories require an active session_scope")
        return self._tag_repo
