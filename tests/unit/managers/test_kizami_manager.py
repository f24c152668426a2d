"""
test_kizami_manager.py
----------------------
Tests for the kizami repository contract.

Every test runs against KizamiManager (SQLite) and MemoryKizamiRepository
through the parametrized ``repositories`` fixture.
"""
import pytest
from datetime import datetime, timedelta, timezone

from kokizami.core.exceptions import NotFoundError, ValidationError
from kokizami.database.models import KizamiState

T0 = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


class TestKizamiInsert:
    """Test KizamiRepository.insert()."""

    def test_insert_assigns_increasing_ids(self, repositories):
        """Ids are assigned in insertion order starting at 1."""
        kizamis, _ = repositories
        first = kizamis.insert("first", started_at=T0)
        second = kizamis.insert("second", started_at=T0)

        assert first.id == 1
        assert second.id == 2

    def test_insert_creates_running_kizami(self, repositories):
        """A new kizami has no stop time."""
        kizamis, _ = repositories
        kizami = kizamis.insert("write spec #docs", started_at=T0)

        assert kizami.stopped_at is None
        assert kizami.state == KizamiState.RUNNING
        assert kizami.started_at == T0

    def test_insert_defaults_start_to_now(self, repositories):
        """Without a start time the current UTC time is used."""
        kizamis, _ = repositories
        before = datetime.now(timezone.utc).replace(microsecond=0)
        kizami = kizamis.insert("now")

        assert kizami.started_at >= before
        assert kizami.started_at.microsecond == 0

    def test_insert_empty_desc_raises(self, repositories):
        """Empty descriptions are rejected without creating a row."""
        kizamis, _ = repositories

        with pytest.raises(ValidationError):
            kizamis.insert("", started_at=T0)

        assert kizamis.find_all() == []


class TestKizamiFind:
    """Test KizamiRepository lookups."""

    def test_find_by_id(self, repositories):
        kizamis, _ = repositories
        created = kizamis.insert("task", started_at=T0)

        found = kizamis.find_by_id(created.id)
        assert found.id == created.id
        assert found.desc == "task"
        assert found.started_at == T0

    def test_find_by_id_unknown_raises(self, repositories):
        """Unknown ids raise NotFoundError carrying the id."""
        kizamis, _ = repositories

        with pytest.raises(NotFoundError) as exc_info:
            kizamis.find_by_id(99)

        assert exc_info.value.entity_id == 99

    def test_find_all_ordered_by_id(self, repositories):
        kizamis, _ = repositories
        for desc in ("a", "b", "c"):
            kizamis.insert(desc, started_at=T0)

        assert [k.desc for k in kizamis.find_all()] == ["a", "b", "c"]

    def test_find_all_empty(self, repositories):
        kizamis, _ = repositories
        assert kizamis.find_all() == []

    def test_find_running(self, repositories):
        """find_by_stopped_at(None) returns exactly the running kizami."""
        kizamis, _ = repositories
        running = kizamis.insert("running", started_at=T0)
        stopped = kizamis.insert("stopped", started_at=T0)
        stopped.stopped_at = T0 + timedelta(hours=1)
        kizamis.update(stopped)

        assert [k.id for k in kizamis.find_by_stopped_at(None)] == [running.id]

    def test_find_by_stop_time(self, repositories):
        kizamis, _ = repositories
        stop = T0 + timedelta(minutes=30)
        kizami = kizamis.insert("task", started_at=T0)
        kizamis.insert("other", started_at=T0)
        kizami.stopped_at = stop
        kizamis.update(kizami)

        assert [k.id for k in kizamis.find_by_stopped_at(stop)] == [kizami.id]

    def test_find_started_between_is_half_open(self, repositories):
        """The range includes its start and excludes its end."""
        kizamis, _ = repositories
        start = datetime(2024, 5, 1, tzinfo=timezone.utc)
        end = datetime(2024, 6, 1, tzinfo=timezone.utc)

        kizamis.insert("before", started_at=start - timedelta(seconds=1))
        kizamis.insert("first second", started_at=start)
        kizamis.insert("last second", started_at=end - timedelta(seconds=1))
        kizamis.insert("after", started_at=end)

        found = kizamis.find_started_between(start, end)
        assert [k.desc for k in found] == ["first second", "last second"]


class TestKizamiUpdate:
    """Test KizamiRepository.update()."""

    def test_update_overwrites_fields(self, repositories):
        kizamis, _ = repositories
        kizami = kizamis.insert("old", started_at=T0)

        kizami.desc = "new"
        kizami.started_at = T0 - timedelta(hours=1)
        kizami.stopped_at = T0
        kizamis.update(kizami)

        stored = kizamis.find_by_id(kizami.id)
        assert stored.desc == "new"
        assert stored.started_at == T0 - timedelta(hours=1)
        assert stored.stopped_at == T0
        assert stored.state == KizamiState.STOPPED

    def test_update_to_running(self, repositories):
        """Clearing the stop time makes the kizami running again."""
        kizamis, _ = repositories
        kizami = kizamis.insert("task", started_at=T0)
        kizami.stopped_at = T0 + timedelta(hours=1)
        kizamis.update(kizami)

        kizami.stopped_at = None
        kizamis.update(kizami)

        assert kizamis.find_by_id(kizami.id).is_running
        assert [k.id for k in kizamis.find_by_stopped_at(None)] == [kizami.id]

    def test_update_unknown_raises(self, repositories):
        kizamis, _ = repositories
        kizami = kizamis.insert("task", started_at=T0)
        kizamis.delete(kizami.id)

        with pytest.raises(NotFoundError):
            kizamis.update(kizami)


class TestKizamiDelete:
    """Test KizamiRepository.delete()."""

    def test_delete_removes_kizami(self, repositories):
        kizamis, _ = repositories
        kizami = kizamis.insert("task", started_at=T0)

        kizamis.delete(kizami.id)

        with pytest.raises(NotFoundError):
            kizamis.find_by_id(kizami.id)

    def test_delete_removes_relation_rows(self, repositories):
        """Deleted kizami leave no tag relations behind."""
        kizamis, tags = repositories
        kizami = kizamis.insert("task #a", started_at=T0)
        tags.insert_many(["#a"])
        kizamis.tag(kizami.id, [tag.id for tag in tags.find_all()])

        kizamis.delete(kizami.id)

        assert tags.find_by_kizami_id(kizami.id) == []
        assert [tag.label for tag in tags.find_all()] == ["#a"]

    def test_delete_unknown_raises(self, repositories):
        kizamis, _ = repositories

        with pytest.raises(NotFoundError):
            kizamis.delete(1)


class TestKizamiTagging:
    """Test KizamiRepository.tag() and untag()."""

    def test_tag_relates_tags(self, repositories):
        kizamis, tags = repositories
        kizami = kizamis.insert("task", started_at=T0)
        tags.insert_many(["#a", "#b"])
        tag_ids = [tag.id for tag in tags.find_all()]

        kizamis.tag(kizami.id, tag_ids)

        assert [t.label for t in tags.find_by_kizami_id(kizami.id)] == ["#a", "#b"]

    def test_tag_ignores_duplicate_ids(self, repositories):
        """The same tag id twice yields a single relation."""
        kizamis, tags = repositories
        kizami = kizamis.insert("task", started_at=T0)
        tags.insert_many(["#a"])
        tag_id = tags.find_all()[0].id

        kizamis.tag(kizami.id, [tag_id, tag_id])

        assert len(tags.find_by_kizami_id(kizami.id)) == 1

    def test_tag_unknown_tag_raises(self, repositories):
        kizamis, _ = repositories
        kizami = kizamis.insert("task", started_at=T0)

        with pytest.raises(NotFoundError):
            kizamis.tag(kizami.id, [42])

    def test_tag_unknown_kizami_raises(self, repositories):
        kizamis, tags = repositories
        tags.insert_many(["#a"])

        with pytest.raises(NotFoundError):
            kizamis.tag(7, [tags.find_all()[0].id])

    def test_untag_removes_all_relations(self, repositories):
        kizamis, tags = repositories
        kizami = kizamis.insert("task", started_at=T0)
        other = kizamis.insert("other", started_at=T0)
        tags.insert_many(["#a", "#b"])
        tag_ids = [tag.id for tag in tags.find_all()]
        kizamis.tag(kizami.id, tag_ids)
        kizamis.tag(other.id, tag_ids)

        kizamis.untag(kizami.id)

        assert tags.find_by_kizami_id(kizami.id) == []
        assert len(tags.find_by_kizami_id(other.id)) == 2

    def test_untag_without_relations_is_noop(self, repositories):
        kizamis, tags = repositories
        kizami = kizamis.insert("task", started_at=T0)

        kizamis.untag(kizami.id)
        kizamis.untag(999)

        assert tags.find_by_kizami_id(kizami.id) == []
