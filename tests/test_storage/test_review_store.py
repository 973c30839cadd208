"""
Unit tests for ReviewCollection persistence and the ReviewStore data-access layer.
"""

import pytest
import json
import os
import tempfile
from datetime import datetime, timedelta
from unittest.mock import patch

from src.models.review import ValidationError
from src.storage.review_collection import ReviewCollection
from src.storage.review_store import ReviewStore, StorageError

NOW = datetime(2024, 6, 1, 12, 0)


def add_review(store, title="Ottimo pranzo", review_date=None, rating=5):
    return store.create(
        title=title,
        rating=rating,
        place_description="Locale accogliente nel cuore della città.",
        experience="Servizio impeccabile e piatti deliziosi.",
        user_name="Giulia",
        review_date=review_date
    )


def test_create_returns_populated_record():
    store = ReviewStore.in_memory(clock=lambda: NOW)

    record = add_review(store, title="  Ottimo pranzo  ")

    assert record.id
    assert record.title == "Ottimo pranzo"
    assert record.created_at == NOW
    assert record.review_date == NOW
    assert store.count() == 1
    assert store.fetch_by_id(record.id) is record


def test_create_validation_error_writes_nothing():
    store = ReviewStore.in_memory()

    with pytest.raises(ValidationError):
        add_review(store, title="ab")

    assert store.count() == 0


def test_fetch_all_newest_review_date_first():
    store = ReviewStore.in_memory(clock=lambda: NOW)
    older = add_review(store, title="Prima visita", review_date=NOW - timedelta(days=3))
    newest = add_review(store, title="Terza visita", review_date=NOW)
    middle = add_review(store, title="Seconda visita", review_date=NOW - timedelta(days=1))

    reviews = store.fetch_all()

    assert [r.id for r in reviews] == [newest.id, middle.id, older.id]

    ascending = store.fetch_all(order_by="review_date", descending=False)
    assert ascending[0].id == older.id


def test_fetch_all_rejects_unknown_sort_key():
    store = ReviewStore.in_memory()

    with pytest.raises(ValueError, match="Invalid sort key"):
        store.fetch_all(order_by="password")


def test_fetch_by_id_missing_returns_none():
    store = ReviewStore.in_memory()
    assert store.fetch_by_id("does-not-exist") is None


def test_delete_removes_record():
    store = ReviewStore.in_memory()
    record = add_review(store)

    store.delete(record)

    assert store.fetch_by_id(record.id) is None
    assert store.fetch_all() == []

    with pytest.raises(ValueError, match="not found"):
        store.delete(record)


def test_flush_persists_updates():
    with tempfile.TemporaryDirectory() as tmpdir:
        store_path = os.path.join(tmpdir, "reviews.json")
        store = ReviewStore.open(store_path, clock=lambda: NOW)
        record = add_review(store)

        assert not store.collection.has_changes

        record.update(
            title="Pranzo di lavoro",
            rating=4,
            place_description=record.place_description,
            experience=record.experience,
            user_name=record.user_name,
            now=NOW + timedelta(hours=1)
        )
        assert store.collection.has_changes

        store.flush()
        assert not store.collection.has_changes

        reopened = ReviewStore.open(store_path)
        assert reopened.fetch_by_id(record.id).title == "Pranzo di lavoro"


def test_flush_without_changes_is_noop():
    store = ReviewStore.in_memory()

    with patch.object(store.collection, "save") as mock_save:
        store.flush()

    mock_save.assert_not_called()


def test_save_and_load():
    """Records survive a reopen of the same file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store_path = os.path.join(tmpdir, "reviews.json")

        store1 = ReviewStore.open(store_path, clock=lambda: NOW)
        record = add_review(store1)

        store2 = ReviewStore.open(store_path)
        loaded = store2.fetch_all()

        assert len(loaded) == 1
        assert loaded[0] == record


def test_create_storage_failure_rolls_back():
    store = ReviewStore.in_memory()

    with patch.object(store.collection, "save", side_effect=OSError("disk full")):
        with pytest.raises(StorageError, match="disk full"):
            add_review(store)

    assert store.count() == 0


def test_delete_storage_failure_keeps_record():
    store = ReviewStore.in_memory()
    record = add_review(store)

    with patch.object(store.collection, "save", side_effect=OSError("read-only")):
        with pytest.raises(StorageError):
            store.delete(record)

    assert store.fetch_by_id(record.id) is record


def test_unreadable_store_raises_storage_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        store_path = os.path.join(tmpdir, "reviews.json")
        with open(store_path, 'w') as f:
            f.write("not json{{{")

        store = ReviewStore.open(store_path)

        with pytest.raises(StorageError):
            store.fetch_all()


def test_corrupted_store_restored_from_backup():
    with tempfile.TemporaryDirectory() as tmpdir:
        store_path = os.path.join(tmpdir, "reviews.json")
        store = ReviewStore.open(store_path, clock=lambda: NOW)
        first = add_review(store, title="Prima visita")
        add_review(store, title="Seconda visita")  # Backup now holds only the first review

        with open(store_path, 'w') as f:
            f.write("corrupted")

        restored = ReviewStore.open(store_path).fetch_all()

        assert [r.id for r in restored] == [first.id]
        with open(store_path) as f:
            assert json.load(f)["reviews"][0]["id"] == first.id


def test_collection_file_format():
    with tempfile.TemporaryDirectory() as tmpdir:
        store_path = os.path.join(tmpdir, "nested", "reviews.json")
        store = ReviewStore.open(store_path, clock=lambda: NOW)
        add_review(store, title="Cena perfetta")

        with open(store_path, encoding='utf-8') as f:
            data = json.load(f)

        assert data["version"] == "1.0.0"
        assert data["reviews"][0]["title"] == "Cena perfetta"
        assert data["reviews"][0]["created_at"] == NOW.isoformat()
        assert not os.path.exists(f"{store_path}.tmp")


def test_collection_rejects_duplicate_ids():
    collection = ReviewCollection.in_memory()
    store = ReviewStore(collection)
    record = add_review(store)

    with pytest.raises(ValueError, match="already exists"):
        collection.insert(record)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
