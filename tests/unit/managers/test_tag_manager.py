"""
test_tag_manager.py
-------------------
Tests for the tag repository contract.

Tags are the simplest entity: a unique label with a many-to-many
relation to kizami. Runs against TagManager and MemoryTagRepository.
"""
import pytest
from datetime import datetime, timezone

from kokizami.core.exceptions import NotFoundError

T0 = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


class TestTagInsertMany:
    """Test TagRepository.insert_many()."""

    def test_insert_many_stores_labels(self, repositories):
        _, tags = repositories
        tags.insert_many(["#docs", "#work"])

        assert [t.label for t in tags.find_all()] == ["#docs", "#work"]

    def test_insert_many_skips_existing_labels(self, repositories):
        """Labels are unique: inserting a stored label is a no-op."""
        _, tags = repositories
        tags.insert_many(["#docs"])
        tags.insert_many(["#docs", "#work"])

        assert [t.label for t in tags.find_all()] == ["#docs", "#work"]

    def test_insert_many_dedups_batch(self, repositories):
        _, tags = repositories
        tags.insert_many(["#a", "#a", "#b", "#a"])

        assert [t.label for t in tags.find_all()] == ["#a", "#b"]

    def test_insert_many_empty_batch(self, repositories):
        _, tags = repositories
        tags.insert_many([])

        assert tags.find_all() == []


class TestTagFind:
    """Test TagRepository lookups."""

    def test_find_by_id(self, repositories):
        _, tags = repositories
        tags.insert_many(["#docs"])
        tag_id = tags.find_all()[0].id

        tag = tags.find_by_id(tag_id)
        assert tag.label == "#docs"
        assert tag.name == "docs"

    def test_find_by_id_unknown_raises(self, repositories):
        _, tags = repositories

        with pytest.raises(NotFoundError):
            tags.find_by_id(5)

    def test_find_by_labels_ordered_by_id(self, repositories):
        """Results follow tag id order, not the order of the request."""
        _, tags = repositories
        tags.insert_many(["#a", "#b", "#c"])

        found = tags.find_by_labels(["#c", "#a"])
        assert [t.label for t in found] == ["#a", "#c"]

    def test_find_by_labels_ignores_unknown(self, repositories):
        _, tags = repositories
        tags.insert_many(["#a"])

        assert [t.label for t in tags.find_by_labels(["#a", "#zzz"])] == ["#a"]
        assert tags.find_by_labels([]) == []

    def test_find_by_kizami_id(self, repositories):
        kizamis, tags = repositories
        kizami = kizamis.insert("task", started_at=T0)
        tags.insert_many(["#a", "#b", "#c"])
        a, _, c = tags.find_all()
        kizamis.tag(kizami.id, [c.id, a.id])

        assert [t.label for t in tags.find_by_kizami_id(kizami.id)] == ["#a", "#c"]

    def test_find_by_kizami_id_unknown_is_empty(self, repositories):
        _, tags = repositories
        assert tags.find_by_kizami_id(123) == []


class TestTagDelete:
    """Test TagRepository.delete()."""

    def test_delete_removes_tag_and_relations(self, repositories):
        """No kizami keeps a relation to a deleted tag."""
        kizamis, tags = repositories
        kizami = kizamis.insert("task", started_at=T0)
        tags.insert_many(["#a", "#b"])
        a, b = tags.find_all()
        kizamis.tag(kizami.id, [a.id, b.id])

        tags.delete(a.id)

        assert [t.label for t in tags.find_all()] == ["#b"]
        assert [t.label for t in tags.find_by_kizami_id(kizami.id)] == ["#b"]

    def test_delete_unknown_raises(self, repositories):
        _, tags = repositories

        with pytest.raises(NotFoundError):
            tags.delete(1)
