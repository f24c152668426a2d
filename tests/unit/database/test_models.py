"""
test_models.py
--------------
Tests for the ORM models and the UTC timestamp column types.

The stop column stores "1970-01-01 00:00:00" for running kizami; these
tests check that the value never leaks past the column type.
"""
import pytest
from datetime import datetime, timedelta, timezone

from sqlalchemy import text

from kokizami.database.models import (
    SENTINEL,
    SENTINEL_TEXT,
    Kizami,
    KizamiState,
    StopTimestamp,
    Tag,
    UTCTimestamp,
    strip_marker,
)
from kokizami.database.models.base import (
    format_stored_timestamp,
    parse_stored_timestamp,
)

T0 = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


class TestStoredTimestampParsing:
    """Tests for parse_stored_timestamp / format_stored_timestamp."""

    def test_parse_canonical_form(self):
        assert parse_stored_timestamp("2024-05-01 09:00:00") == T0

    @pytest.mark.parametrize(
        "value",
        [
            "2024-05-01T09:00:00",
            "2024-05-01 09:00:00.123456",
            "2024-05-01T09:00:00Z",
            "2024-05-01 11:00:00+02:00",
            "2024-05-01 04:00:00-0500",
        ],
    )
    def test_parse_tolerates_older_writers(self, value):
        """Separators, fractions and offsets all resolve to the same instant."""
        assert parse_stored_timestamp(value) == T0

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_stored_timestamp("yesterday")

    def test_format_converts_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2024, 5, 1, 11, 0, 0, tzinfo=plus_two)

        assert format_stored_timestamp(value) == "2024-05-01 09:00:00"

    def test_format_treats_naive_as_utc(self):
        assert format_stored_timestamp(datetime(2024, 5, 1, 9)) == "2024-05-01 09:00:00"


class TestColumnTypes:
    """Tests for UTCTimestamp and StopTimestamp bind/result processing."""

    def test_utc_timestamp_none_passthrough(self):
        column_type = UTCTimestamp()
        assert column_type.process_bind_param(None, None) is None
        assert column_type.process_result_value(None, None) is None

    def test_stop_timestamp_binds_none_as_sentinel(self):
        assert StopTimestamp().process_bind_param(None, None) == SENTINEL_TEXT

    def test_stop_timestamp_reads_sentinel_as_none(self):
        column_type = StopTimestamp()
        assert column_type.process_result_value(SENTINEL_TEXT, None) is None
        assert column_type.process_result_value("1970-01-01T00:00:00Z", None) is None

    def test_stop_timestamp_reads_real_time(self):
        assert StopTimestamp().process_result_value("2024-05-01 09:00:00", None) == T0


class TestSentinelStorage:
    """Round trips of the sentinel through SQLite."""

    def test_running_kizami_stored_with_sentinel(self, test_db):
        with test_db.session_scope() as session:
            kizami = test_db.kizamis.insert("task", started_at=T0)
            raw = session.execute(
                text("SELECT started_at, stopped_at FROM kizami WHERE id = :id"),
                {"id": kizami.id},
            ).one()

        assert raw.started_at == "2024-05-01 09:00:00"
        assert raw.stopped_at == SENTINEL_TEXT

    def test_sentinel_rows_load_as_running(self, test_db):
        """Rows written by other tools with the sentinel load as running."""
        with test_db.session_scope() as session:
            session.execute(
                text(
                    "INSERT INTO kizami (id, \"desc\", started_at, stopped_at) "
                    "VALUES (1, 'legacy', '2024-05-01T09:00:00Z', :stop)"
                ),
                {"stop": SENTINEL_TEXT},
            )

        with test_db.session_scope():
            kizami = test_db.kizamis.find_by_id(1)
            running = test_db.kizamis.find_by_stopped_at(None)

        assert kizami.stopped_at is None
        assert kizami.started_at == T0
        assert [k.id for k in running] == [1]

    @pytest.mark.parametrize(
        "stop",
        ["1970-01-01 00:00:00+00:00", "1970-01-01T00:00:00Z", "1970-01-01 00:00:00.000"],
    )
    def test_sentinel_variants_are_running(self, test_db, stop):
        """Every sentinel spelling that loads as running is also queried as running."""
        with test_db.session_scope() as session:
            session.execute(
                text(
                    "INSERT INTO kizami (id, \"desc\", started_at, stopped_at) "
                    "VALUES (1, 'legacy', '2024-05-01 09:00:00+00:00', :stop)"
                ),
                {"stop": stop},
            )

        with test_db.session_scope():
            kizami = test_db.kizamis.find_by_id(1)
            running = test_db.kizamis.find_by_stopped_at(None)

        assert kizami.is_running
        assert [k.id for k in running] == [1]

    def test_find_by_stop_time_matches_offset_rows(self, test_db):
        with test_db.session_scope() as session:
            session.execute(
                text(
                    "INSERT INTO kizami (id, \"desc\", started_at, stopped_at) "
                    "VALUES (1, 'legacy', '2024-05-01 09:00:00', "
                    "'2024-05-01 11:00:00+02:00')"
                )
            )

        with test_db.session_scope():
            stopped = test_db.kizamis.find_by_stopped_at(T0)

        assert [k.id for k in stopped] == [1]

    def test_start_range_uses_utc_instant(self, test_db):
        """A row stored with an offset falls in the range of its UTC instant."""
        with test_db.session_scope() as session:
            session.execute(
                text(
                    "INSERT INTO kizami (id, \"desc\", started_at, stopped_at) "
                    "VALUES (1, 'late', '2024-06-01 08:00:00+09:00', :stop)"
                ),
                {"stop": SENTINEL_TEXT},
            )

        may = datetime(2024, 5, 1, tzinfo=timezone.utc)
        june = datetime(2024, 6, 1, tzinfo=timezone.utc)
        july = datetime(2024, 7, 1, tzinfo=timezone.utc)
        with test_db.session_scope():
            in_may = test_db.kizamis.find_started_between(may, june)
            in_june = test_db.kizamis.find_started_between(june, july)

        assert [k.id for k in in_may] == [1]
        assert in_june == []

    def test_stopped_kizami_round_trip(self, test_db):
        with test_db.session_scope():
            kizami = test_db.kizamis.insert("task", started_at=T0)
            kizami.stopped_at = T0 + timedelta(hours=2)
            test_db.kizamis.update(kizami)

        with test_db.session_scope():
            stored = test_db.kizamis.find_by_id(kizami.id)

        assert stored.stopped_at == T0 + timedelta(hours=2)
        assert stored.stopped_at.tzinfo is not None


class TestKizamiModel:
    """Tests for Kizami computed properties."""

    def test_state_running(self):
        kizami = Kizami(id=1, desc="task", started_at=T0, stopped_at=None)
        assert kizami.state == KizamiState.RUNNING
        assert kizami.is_running is True

    def test_state_stopped(self):
        kizami = Kizami(id=1, desc="task", started_at=T0, stopped_at=T0)
        assert kizami.state == KizamiState.STOPPED
        assert kizami.is_running is False

    def test_elapsed_stopped(self):
        kizami = Kizami(
            id=1, desc="task", started_at=T0, stopped_at=T0 + timedelta(minutes=90)
        )
        assert kizami.elapsed() == timedelta(minutes=90)

    def test_elapsed_running_uses_now(self):
        kizami = Kizami(id=1, desc="task", started_at=T0, stopped_at=None)
        assert kizami.elapsed(T0 + timedelta(seconds=42)) == timedelta(seconds=42)

    def test_sentinel_constant_matches_text(self):
        assert format_stored_timestamp(SENTINEL) == SENTINEL_TEXT


class TestTagModel:
    """Tests for Tag computed properties."""

    def test_name_strips_marker(self):
        assert Tag(id=1, label="#docs").name == "docs"

    def test_str_is_label(self):
        assert str(Tag(id=1, label="#docs")) == "#docs"

    @pytest.mark.parametrize(
        "label,expected",
        [("#docs", "docs"), ("docs", "docs"), ("##x", "#x"), ("#", "")],
    )
    def test_strip_marker(self, label, expected):
        assert strip_marker(label) == expected
