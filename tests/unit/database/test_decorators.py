"""Tests for database decorators."""
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from kokizami.core.exceptions import DatabaseError, NotFoundError, ValidationError
from kokizami.core.logging_manager import KokizamiLogger
from kokizami.database.decorators import handle_db_errors, log_database_operation


class Worker:
    """Minimal object carrying a logger, like the managers do."""

    def __init__(self, logger=None):
        self.logger = logger

    @log_database_operation("work")
    def work(self, value):
        return value * 2

    @log_database_operation("fail")
    def fail(self):
        raise ValueError("broken")


class TestLogDatabaseOperation:
    """Tests for log_database_operation."""

    def test_logs_completion(self):
        mock_logger = MagicMock(spec=KokizamiLogger)

        assert Worker(mock_logger).work(21) == 42

        mock_logger.log_debug.assert_called_once()
        mock_logger.log_operation.assert_called_once()
        call_args = mock_logger.log_operation.call_args
        assert call_args[0][0] == "work_completed"
        assert call_args[0][1]["success"] is True

    def test_logs_and_reraises_errors(self):
        mock_logger = MagicMock(spec=KokizamiLogger)

        with pytest.raises(ValueError):
            Worker(mock_logger).fail()

        mock_logger.log_error.assert_called_once()
        assert mock_logger.log_error.call_args[0][1]["operation"] == "fail"
        mock_logger.log_operation.assert_not_called()

    def test_works_without_logger(self):
        """A None logger falls back to the NullLogger."""
        assert Worker(None).work(2) == 4

    def test_preserves_function_name(self):
        assert Worker.work.__name__ == "work"


class TestHandleDbErrors:
    """Tests for handle_db_errors."""

    def test_integrity_error_becomes_database_error(self):
        @handle_db_errors
        def insert():
            raise IntegrityError("statement", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(DatabaseError) as exc_info:
            insert()

        assert "Data integrity violation" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_sqlalchemy_error_becomes_database_error(self):
        @handle_db_errors
        def query():
            raise SQLAlchemyError("connection failed")

        with pytest.raises(DatabaseError) as exc_info:
            query()

        assert "Database operation failed" in str(exc_info.value)

    @pytest.mark.parametrize(
        "error", [NotFoundError("kizami", 1), ValidationError("bad input")]
    )
    def test_domain_errors_pass_through(self, error):
        @handle_db_errors
        def lookup():
            raise error

        with pytest.raises(type(error)) as exc_info:
            lookup()

        assert exc_info.value is error

    def test_return_value_passes_through(self):
        @handle_db_errors
        def ok():
            return "ok"

        assert ok() == "ok"
