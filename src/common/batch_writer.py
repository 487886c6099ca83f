"""
Batched Firestore writes.

Documents are split into consecutive chunks of at most batch_size (Firestore
caps a write batch at 500 operations) and each chunk is committed atomically,
one after another. A failed commit aborts the remaining chunks; chunks that
were already committed stay committed.
"""

import logging
from typing import Iterable, Iterator, List, Tuple

from common.config import MAX_BATCH_SIZE
from common.exceptions import StorageException

logger = logging.getLogger(__name__)


def chunked(items: List, size: int) -> Iterator[List]:
    """Yield consecutive slices of at most size items."""
    for start in range(0, len(items), size):
        yield items[start : start + size]


class BatchWriter:
    """Writes (document_id, body) pairs to a collection in atomic batches."""

    def __init__(self, db, batch_size: int = MAX_BATCH_SIZE):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self.db = db
        self.batch_size = batch_size

    def write(self, collection: str, documents: Iterable[Tuple[str, dict]]) -> List[int]:
        """
        Set every document in collection, batch by batch.

        Args:
            collection: Target collection name
            documents: (document_id, body) pairs in write order

        Returns:
            Sizes of the committed batches, in commit order

        Raises:
            StorageException: If a commit fails; committed_batches tells how
                many batches were written before the failure
        """
        documents = list(documents)
        chunks = list(chunked(documents, self.batch_size))
        collection_ref = self.db.collection(collection)
        committed = []

        for index, chunk in enumerate(chunks, start=1):
            batch = self.db.batch()
            for doc_id, body in chunk:
                batch.set(collection_ref.document(doc_id), body)

            try:
                batch.commit()
            except Exception as e:
                logger.error(
                    "Batch %d/%d to %s failed after %d committed batches: %s",
                    index,
                    len(chunks),
                    collection,
                    len(committed),
                    e,
                    exc_info=True,
                )
                raise StorageException(
                    f"Failed to commit batch {index}/{len(chunks)} to {collection}: {e}",
                    committed_batches=len(committed),
                    details={"collection": collection, "batch": index},
                )

            committed.append(len(chunk))
            logger.info(
                "Committed batch %d/%d to %s (%d documents)",
                index,
                len(chunks),
                collection,
                len(chunk),
            )

        return committed
