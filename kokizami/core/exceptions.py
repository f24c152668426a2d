#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Kokizami project.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all storage-related errors
    │   └── NotFoundError - Lookup of an unknown kizami or tag id
    └── ValidationError - Input rejected before it reaches storage

Usage:
    from kokizami.core.exceptions import DatabaseError, ValidationError

    try:
        kkzm.start(desc)
    except ValidationError as e:
        logger.log_error(e)
    except DatabaseError as e:
        logger.log_error(e)
"""


class DatabaseError(Exception):
    """
    Base exception for storage-related errors.

    Raised when the underlying database cannot be opened, a statement
    fails to execute, or an integrity constraint is violated.

    Examples:
        >>> raise DatabaseError("Database initialization failed: unable to open file")
        >>> raise DatabaseError("Data integrity violation: FOREIGN KEY constraint failed")

    See Also:
        NotFoundError
    """

    pass


class NotFoundError(DatabaseError):
    """
    Exception for lookups of ids that do not exist.

    Raised by get, update, stop and delete operations when the requested
    kizami (or tag) is not stored.

    Attributes:
        entity: Name of the entity type that was looked up
        entity_id: The id that was not found

    Examples:
        >>> raise NotFoundError("kizami", 42)
    """

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"No {entity} found with id: {entity_id}")


class ValidationError(Exception):
    """
    Exception for input validation failures.

    Raised before any storage access when input is malformed:
    - Empty description
    - Month string not in YYYY-MM form
    - Timestamp string not in YYYY-MM-DD HH:MM:SS form
    - Stop time earlier than start time

    Examples:
        >>> raise ValidationError("Description cannot be empty")
        >>> raise ValidationError("Invalid month format: '2021-13' (expected YYYY-MM)")
    """

    pass
