#!/usr/bin/env python3
"""
Kokizami Database Package
-------------------------
Storage, tagging and summaries for kokizami.

- Core database operations (KokizamiDB, session scopes)
- Repositories for kizami and tags (SQLAlchemy managers, in-memory doubles)
- Tag extraction and reconciliation
- Monthly summaries
"""

from .manager import KokizamiDB
from kokizami.core.exceptions import DatabaseError, NotFoundError, ValidationError
from .interfaces import KizamiRepository, Storage, TagRepository
from .memory import MemoryStorage
from .summary import Elapsed, SummaryEngine
from .tagging import TagResolver, extract_tags
from .decorators import handle_db_errors, log_database_operation

__all__ = [
    # Main manager
    "KokizamiDB",
    # Exceptions
    "DatabaseError",
    "NotFoundError",
    "ValidationError",
    # Contracts
    "KizamiRepository",
    "TagRepository",
    "Storage",
    # Doubles
    "MemoryStorage",
    # Services
    "Elapsed",
    "SummaryEngine",
    "TagResolver",
    "extract_tags",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
]
