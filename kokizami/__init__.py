"""
Kokizami
========

A personal time-tracking tool.

Records discrete work sessions ("kizami"), each with a description, a start
time and an optional stop time. Sessions are tagged through inline
``#label`` tokens in their description, and monthly totals are produced per
tag and per description.

Main Components:
    - core: Exceptions, logging, validation, paths and CLI helpers
    - database: SQLAlchemy models, entity managers, tagging and summaries
    - kokizami: The Kokizami facade, the single entry point for callers
    - cli: The ``kkzm`` command line interface

Usage:
    from kokizami import Kokizami
    from kokizami.database import KokizamiDB

    kkzm = Kokizami(KokizamiDB("~/.kokizami.db"))
    kizami = kkzm.start("write spec #docs")
"""
from .kokizami import Kokizami, KizamiChanges

__version__ = "0.1.0"

__all__ = ["Kokizami", "KizamiChanges"]
