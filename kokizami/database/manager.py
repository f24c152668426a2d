#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for Kokizami.

Provides the KokizamiDB class, the storage handle handed to the Kokizami
facade. Handles:
    - Initialization of the SQLite engine and sessionmaker
    - Schema creation (compatible with existing kokizami database files)
    - Transactional session scopes with commit/rollback/close
    - Per-session KizamiManager and TagManager instances
    - Rotating logs through KokizamiLogger

Notes
==============
- All timestamps are stored as UTC text; running kizami keep the epoch
  sentinel in their stop column
- Foreign keys are enforced on every connection so relation rows follow
  their kizami and tags
- No module-level engine or session exists: construct one KokizamiDB and
  pass it where it is needed
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, event, inspect
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from kokizami.core.exceptions import DatabaseError
from kokizami.core.logging_manager import KokizamiLogger
from .decorators import handle_db_errors, log_database_operation
from .managers import KizamiManager, TagManager
from .models import Base


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class KokizamiDB:
    """
    Storage handle for the Kokizami database.

    Attributes:
        db_path (Path): Filesystem path to the SQLite database file
        engine (Engine): SQLAlchemy engine instance
        SessionLocal (sessionmaker): SQLAlchemy session factory
        logger (KokizamiLogger | None): Logger, when a log directory is given

    Usage:
        db = KokizamiDB("~/.kokizami.db")
        with db.session_scope():
            kizami = db.kizamis.insert("write spec #docs")
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        echo: bool = False,
    ) -> None:
        """
        Open (and if needed create) the database.

        Args:
            db_path: Path to the SQLite file
            log_dir: Directory for log files (optional)
            echo: Echo SQL statements through SQLAlchemy logging

        Raises:
            DatabaseError: If the engine cannot be created or the schema set up
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.echo = echo

        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve()
            self.logger: Optional[KokizamiLogger] = KokizamiLogger(
                self.log_dir, component_name="database"
            )
        else:
            self.log_dir = None
            self.logger = None

        self._kizami_manager: Optional[KizamiManager] = None
        self._tag_manager: Optional[TagManager] = None

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine, session factory and schema."""
        try:
            if self.logger:
                self.logger.log_operation(
                    "database_init_start", {"db_path": str(self.db_path)}
                )

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=self.echo,
            )
            event.listen(self.engine, "connect", _enable_foreign_keys)

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            self.initialize_schema()

            if self.logger:
                self.logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """
        Create missing tables.

        Existing tables (including ones from older kokizami releases) are
        left untouched.
        """
        existing = set(inspect(self.engine).get_table_names())
        Base.metadata.create_all(bind=self.engine, checkfirst=True)

        if self.logger:
            created = sorted(set(Base.metadata.tables) - existing)
            self.logger.log_operation(
                "schema_ready", {"created_tables": created, "existing": len(existing)}
            )

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on any exception and always closes
        the session. The managers are reachable as ``db.kizamis`` and
        ``db.tags`` only inside the scope.

        Usage:
            with db.session_scope():
                kizami = db.kizamis.find_by_id(1)
                tags = db.tags.find_by_kizami_id(1)
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

        self._kizami_manager = KizamiManager(session, self.logger)
        self._tag_manager = TagManager(session, self.logger)

        if self.logger:
            self.logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            if self.logger:
                self.logger.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            if self.logger:
                self.logger.log_error(
                    e, {"operation": "session_rollback", "session_id": session_id}
                )
            raise
        finally:
            self._kizami_manager = None
            self._tag_manager = None

            session.close()
            if self.logger:
                self.logger.log_debug("session_close", {"session_id": session_id})

    # ---- Manager access ----
    @property
    def kizamis(self) -> KizamiManager:
        """
        KizamiManager bound to the active session.

        Raises:
            DatabaseError: If accessed outside of session_scope
        """
        if self._kizami_manager is None:
            raise DatabaseError(
                "KizamiManager requires active session. "
                "Use within session_scope: "
                "with db.session_scope(): db.kizamis.find_all()"
            )
        return self._kizami_manager

    @property
    def tags(self) -> TagManager:
        """
        TagManager bound to the active session.

        Raises:
            DatabaseError: If accessed outside of session_scope
        """
        if self._tag_manager is None:
            raise DatabaseError(
                "TagManager requires active session. Use within session_scope."
            )
        return self._tag_manager

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    # ----- Context Manager Support -----
    def __enter__(self) -> "KokizamiDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
