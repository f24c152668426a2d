"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Kokizami database.

- base: Base class and the timestamp column types
- enums: KizamiState
- associations: kizami_tag relation table
- core: Kizami
- entities: Tag

Usage:
    from kokizami.database.models import Kizami, Tag
"""
# Base classes
from .base import Base, SENTINEL, SENTINEL_TEXT, StopTimestamp, UTCTimestamp

# Enumerations
from .enums import KizamiState

# Association tables
from .associations import kizami_tag

# Models
from .core import Kizami
from .entities import Tag, strip_marker

__all__ = [
    # Base
    "Base",
    "SENTINEL",
    "SENTINEL_TEXT",
    "StopTimestamp",
    "UTCTimestamp",
    # Enums
    "KizamiState",
    # Association tables
    "kizami_tag",
    # Models
    "Kizami",
    "Tag",
    "strip_marker",
]
