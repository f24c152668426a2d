"""
Entity Models
--------------

Models:
    - Tag: A label derived from #label tokens in kizami descriptions
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .associations import kizami_tag
from .base import Base

if TYPE_CHECKING:
    from .core import Kizami

TAG_MARKER = "#"


class Tag(Base):
    """
    Label attached to kizami.

    Labels are stored as written in the description, marker included
    (e.g. "#docs").

    Attributes:
        id: Primary key
        label: The tag text, stored in the "tag" column

    Relationships:
        kizamis: Many-to-many with Kizami

    Computed Properties:
        name: Label without the leading marker ("#docs" -> "docs")
        usage_count: Number of kizami carrying this tag
    """

    __tablename__ = "tag"
    __table_args__ = (CheckConstraint("tag != ''", name="ck_non_empty_tag"),)

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(
        "tag", String(255), unique=True, nullable=False, index=True
    )

    # ---- Relationships ----
    kizamis: Mapped[List["Kizami"]] = relationship(
        "Kizami", secondary=kizami_tag, back_populates="tags"
    )

    # ---- Computed properties ----
    @property
    def name(self) -> str:
        return strip_marker(self.label)

    @property
    def usage_count(self) -> int:
        return len(self.kizamis)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, label={self.label!r})>"

    def __str__(self) -> str:
        return self.label


def strip_marker(label: str) -> str:
    """Drop the leading '#' from a label, if present."""
    return label[len(TAG_MARKER):] if label.startswith(TAG_MARKER) else label
