"""
Tests for batched Firestore writes.
"""

from unittest.mock import MagicMock

import pytest

from common.batch_writer import BatchWriter, chunked
from common.exceptions import StorageException


@pytest.fixture
def mock_db():
    """Firestore client whose batch() hands out a fresh mock batch each time."""
    db = MagicMock()
    db.batches = []

    def new_batch():
        batch = MagicMock()
        db.batches.append(batch)
        return batch

    db.batch.side_effect = new_batch
    return db


def documents(count):
    return [(f"doc-{i}", {"n": i}) for i in range(count)]


def test_chunked():
    assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 2)) == []


def test_1200_documents_commit_as_500_500_200(mock_db):
    writer = BatchWriter(mock_db)

    sizes = writer.write("leads", documents(1200))

    assert sizes == [500, 500, 200]
    assert [b.set.call_count for b in mock_db.batches] == [500, 500, 200]
    for batch in mock_db.batches:
        batch.commit.assert_called_once()


def test_documents_are_keyed_by_id_in_order(mock_db):
    collection = mock_db.collection.return_value
    writer = BatchWriter(mock_db, batch_size=2)

    writer.write("campaigns", documents(3))

    mock_db.collection.assert_called_with("campaigns")
    doc_ids = [c.args[0] for c in collection.document.call_args_list]
    assert doc_ids == ["doc-0", "doc-1", "doc-2"]
    first_batch = mock_db.batches[0]
    assert first_batch.set.call_args_list[0].args[1] == {"n": 0}


def test_empty_input_commits_nothing(mock_db):
    assert BatchWriter(mock_db).write("leads", []) == []
    mock_db.batch.assert_not_called()


def test_failed_commit_aborts_remaining_batches(mock_db):
    def new_batch():
        batch = MagicMock()
        if len(mock_db.batches) == 1:
            batch.commit.side_effect = RuntimeError("deadline exceeded")
        mock_db.batches.append(batch)
        return batch

    mock_db.batch.side_effect = new_batch
    writer = BatchWriter(mock_db)

    with pytest.raises(StorageException) as exc_info:
        writer.write("leads", documents(1200))

    assert exc_info.value.committed_batches == 1
    assert len(mock_db.batches) == 2


def test_batch_size_is_bounded():
    with pytest.raises(ValueError):
        BatchWriter(MagicMock(), batch_size=501)
    with pytest.raises(ValueError):
        BatchWriter(MagicMock(), batch_size=0)
