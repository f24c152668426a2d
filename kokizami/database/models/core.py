"""
Core Models
------------

Models:
    - Kizami: One tracked work session

A kizami is Running until a stop time is recorded and Stopped afterwards.
The stop column keeps the epoch sentinel on disk; on the model the running
state is simply ``stopped_at is None``.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .associations import kizami_tag
from .base import Base, StopTimestamp, UTCTimestamp
from .enums import KizamiState

if TYPE_CHECKING:
    from .entities import Tag


class Kizami(Base):
    """
    A tracked work session.

    Attributes:
        id: Primary key, assigned on insert
        desc: Free-form description, may embed #label tokens
        started_at: Start time (aware UTC)
        stopped_at: Stop time (aware UTC), None while running

    Relationships:
        tags: Many-to-many with Tag through kizami_tag

    Computed Properties:
        state: KizamiState.RUNNING or KizamiState.STOPPED
        is_running: True while no stop time is recorded
    """

    __tablename__ = "kizami"
    __table_args__ = (CheckConstraint("\"desc\" != ''", name="ck_kizami_non_empty_desc"),)

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    desc: Mapped[str] = mapped_column("desc", Text, nullable=False)
    started_at: Mapped[datetime] = mapped_column(UTCTimestamp, nullable=False)
    stopped_at: Mapped[Optional[datetime]] = mapped_column(
        StopTimestamp, nullable=False, index=True
    )

    # ---- Relationships ----
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary=kizami_tag, back_populates="kizamis"
    )

    # ---- Computed properties ----
    @property
    def state(self) -> KizamiState:
        """Current lifecycle state."""
        return KizamiState.RUNNING if self.stopped_at is None else KizamiState.STOPPED

    @property
    def is_running(self) -> bool:
        return self.stopped_at is None

    def elapsed(self, now: Optional[datetime] = None) -> timedelta:
        """
        Time between start and stop, or between start and now while running.

        Args:
            now: Reference instant for running kizami (default: current UTC time)
        """
        end = self.stopped_at
        if end is None:
            end = now if now is not None else datetime.now(timezone.utc)
        return end - self.started_at

    def __repr__(self) -> str:
        return (
            f"<Kizami(id={self.id}, desc={self.desc!r}, "
            f"started_at={self.started_at}, stopped_at={self.stopped_at})>"
        )

    def __str__(self) -> str:
        return f"Kizami {self.id}: {self.desc}"
