#!/usr/bin/env python3
"""
managers package
--------------------
SQLAlchemy-backed repositories for the Kokizami database.

Each manager is bound to one session and handles one entity type.

Available Managers:
    BaseManager: Common lookup and retry helpers
    KizamiManager: Kizami rows and their tag relation
    TagManager: Tag rows and lookups through the relation

Usage:
    from kokizami.database.managers import KizamiManager, TagManager

    kizami_mgr = KizamiManager(session, logger)
    tag_mgr = TagManager(session, logger)
"""
from .base_manager import BaseManager
from .kizami_manager import KizamiManager
from .tag_manager import TagManager

__all__ = [
    "BaseManager",
    "KizamiManager",
    "TagManager",
]
