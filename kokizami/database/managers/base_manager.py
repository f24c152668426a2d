#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common lookup helpers for entity managers.

Key Features:
    - Retry logic for SQLite lock contention
    - Lookup by id raising NotFoundError
    - Ordered listing

Usage:
    class KizamiManager(BaseManager, KizamiRepository):
        def find_by_id(self, kizami_id: int) -> Kizami:
            return self._require(Kizami, kizami_id, "kizami")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from typing import Any, Callable, List, Optional, Protocol, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from kokizami.core.exceptions import DatabaseError, NotFoundError
from kokizami.core.logging_manager import KokizamiLogger, safe_logger


class HasId(Protocol):
    """Protocol for objects that have an id attribute."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)


class BaseManager:
    """
    Common helpers for managers bound to one SQLAlchemy session.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[KokizamiLogger] = None):
        self.session = session
        self.logger = logger

    def _execute_with_retry(
        self,
        operation: Callable[[], Any],
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> Any:
        """
        Execute a database operation, retrying while the file is locked.

        Args:
            operation: Callable that performs the operation
            max_retries: Maximum number of attempts
            retry_delay: Base delay between retries (exponential backoff)

        Returns:
            Result of the operation

        Raises:
            OperationalError: If the error is not a lock error or retries are exhausted
        """
        for attempt in range(max_retries):
            try:
                return operation()
            except OperationalError as e:
                error_msg = str(e).lower()

                if (
                    "locked" in error_msg or "busy" in error_msg
                ) and attempt < max_retries - 1:
                    wait_time = retry_delay * (2**attempt)

                    safe_logger(self.logger).log_debug(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": max_retries},
                    )

                    time.sleep(wait_time)
                    continue

                raise

        raise DatabaseError("Retry loop completed without success")

    def _require(self, model_class: Type[T], entity_id: int, entity_name: str) -> T:
        """
        Get an entity by primary key.

        Raises:
            NotFoundError: If no row has this id
        """
        entity = self.session.get(model_class, entity_id)
        if entity is None:
            raise NotFoundError(entity_name, entity_id)
        return entity

    def _get_all(self, model_class: Type[T]) -> List[T]:
        """Get all entities of a type ordered by id."""
        stmt = select(model_class).order_by(model_class.id)
        return list(self.session.scalars(stmt))
