"""
Review Store - data-access layer for restaurant reviews.

Owns the review collection and translates persistence failures
into StorageError. Never retries.
"""

import logging
from typing import Callable, List, Optional
from datetime import datetime

from src.models.review import ReviewRecord
from src.storage.review_collection import ReviewCollection, SORT_KEYS

logger = logging.getLogger(__name__)

# File I/O, JSON decoding and unreadable record data
STORE_ERRORS = (OSError, ValueError, KeyError, TypeError)


class StorageError(RuntimeError):
    """The review collection could not be read or durably written."""


class ReviewStore:
    """
    Create/read/delete access to persisted reviews.

    Single owner of the collection; callers receive ReviewRecord
    instances and never touch the collection directly.
    """

    def __init__(
        self,
        collection: ReviewCollection,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize review store.

        Args:
            collection: Persistence collaborator holding the records
            clock: Returns the current timestamp for new records
        """
        self.collection = collection
        self.clock = clock

        location = "memory" if collection.is_in_memory else collection.path
        logger.info(f"Initialized ReviewStore backed by {location}")

    @classmethod
    def in_memory(cls, clock: Callable[[], datetime] = datetime.now) -> "ReviewStore":
        """Store with a non-persistent collection, for tests and previews."""
        return cls(ReviewCollection.in_memory(), clock=clock)

    @classmethod
    def open(cls, path: str, clock: Callable[[], datetime] = datetime.now) -> "ReviewStore":
        return cls(ReviewCollection(path), clock=clock)

    def create(
        self,
        title: str,
        rating: int,
        place_description: str,
        experience: str,
        user_name: str,
        review_date: Optional[datetime] = None
    ) -> ReviewRecord:
        """
        Validate, insert and persist a new review.

        Returns:
            The stored record with generated id and timestamps

        Raises:
            ValidationError: If any field is out of bounds (nothing is written)
            StorageError: If the record could not be durably saved
        """
        record = ReviewRecord.create(
            title=title,
            rating=rating,
            place_description=place_description,
            experience=experience,
            user_name=user_name,
            now=self.clock(),
            review_date=review_date
        )

        try:
            self.collection.insert(record)
        except STORE_ERRORS as e:
            logger.error(f"Failed to open review store for insert: {e}")
            raise StorageError(f"Could not read review store: {e}") from e

        try:
            self.collection.save()
        except STORE_ERRORS as e:
            self.collection.delete(record)
            logger.error(f"Failed to persist review {record.id}: {e}")
            raise StorageError(f"Could not save review: {e}") from e

        logger.info(f"Created review {record.id} ({record.rating} stars)")
        return record

    def fetch_all(self, order_by: str = "review_date", descending: bool = True) -> List[ReviewRecord]:
        """
        Fetch every review, most recent review_date first by default.

        Raises:
            ValueError: If order_by is not a sortable field
            StorageError: If the store cannot be read
        """
        if order_by not in SORT_KEYS:
            raise ValueError(f"Invalid sort key: {order_by}. Must be one of {SORT_KEYS}")

        try:
            reviews = self.collection.query(sort_key=order_by, descending=descending)
        except STORE_ERRORS as e:
            logger.error(f"Failed to fetch reviews: {e}")
            raise StorageError(f"Could not read review store: {e}") from e

        logger.debug(f"Fetched {len(reviews)} reviews ordered by {order_by}")
        return reviews

    def fetch_by_id(self, review_id: str) -> Optional[ReviewRecord]:
        """Point lookup. Returns None if no review has this id."""
        try:
            return self.collection.get(review_id)
        except STORE_ERRORS as e:
            logger.error(f"Failed to fetch review {review_id}: {e}")
            raise StorageError(f"Could not read review store: {e}") from e

    def delete(self, record: ReviewRecord) -> None:
        """
        Remove a review and persist the deletion.

        Raises:
            ValueError: If the review is not in the store
            StorageError: If the deletion could not be saved
        """
        if self.fetch_by_id(record.id) is None:
            raise ValueError(f"Review not found: {record.id}")

        self.collection.delete(record)

        try:
            self.collection.save()
        except STORE_ERRORS as e:
            self.collection.insert(record)
            logger.error(f"Failed to persist deletion of review {record.id}: {e}")
            raise StorageError(f"Could not delete review: {e}") from e

        logger.info(f"Deleted review {record.id}")

    def flush(self) -> None:
        """Persist buffered changes, e.g. after ReviewRecord.update(). No-op if clean."""
        if not self.collection.has_changes:
            logger.debug("No pending review changes to flush")
            return

        try:
            self.collection.save()
        except STORE_ERRORS as e:
            logger.error(f"Failed to flush review store: {e}")
            raise StorageError(f"Could not save pending changes: {e}") from e

        logger.info("Flushed pending review changes")

    def count(self) -> int:
        """Number of stored reviews."""
        try:
            return len(self.collection)
        except STORE_ERRORS as e:
            logger.error(f"Failed to count reviews: {e}")
            raise StorageError(f"Could not read review store: {e}") from e
