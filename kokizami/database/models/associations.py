"""
Association Tables
-------------------

The many-to-many relation between kizami and tags.

kizami_tag holds at most one row per (kizami_id, tag_id) pair. Both
foreign keys cascade, so deleting either side never leaves orphaned
relation rows.
"""
# --- Third party imports ---
from sqlalchemy import Column, ForeignKey, Integer, Table

# --- Local imports ---
from .base import Base

kizami_tag = Table(
    "kizami_tag",
    Base.metadata,
    Column(
        "kizami_id",
        Integer,
        ForeignKey("kizami.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tag.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
