"""
Review List Workflow.

Backs the home screen: restaurant profile plus the list of stored
reviews mapped to display-ready items.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import config.settings as settings
from src.models.restaurant import Restaurant
from src.storage.review_store import ReviewStore, StorageError
from src.utils import messages
from src.utils.formatting import DateFormatter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewItem:
    """Display copy of a stored review; no link back to the store."""
    id: str
    title: str
    rating: int
    place_description: str
    experience: str
    user_name: str
    formatted_date: str


class ReviewListWorkflow:
    """
    Loads reviews newest first and exposes loading, error and empty states.
    """

    def __init__(
        self,
        store: ReviewStore,
        formatter: Optional[DateFormatter] = None,
        restaurant: Optional[Restaurant] = None
    ):
        """
        Initialize review list.

        Args:
            store: Review store to read from
            formatter: Date formatter, defaults to settings.LOCALE
            restaurant: Restaurant profile, defaults to the one in settings
        """
        self.store = store
        self.formatter = formatter or DateFormatter(settings.LOCALE)
        self.restaurant = restaurant or Restaurant.from_settings()

        self.reviews: List[ReviewItem] = []
        self.is_loading = False
        self.error_message: Optional[str] = None

        self._listeners: List[Callable[["ReviewListWorkflow"], None]] = []

    @property
    def is_empty(self) -> bool:
        """True once loaded successfully with nothing to show."""
        return not self.is_loading and self.error_message is None and not self.reviews

    def refresh(self) -> None:
        """
        Reload all reviews from the store.
        On failure the previously loaded items stay visible.
        """
        self.is_loading = True
        self.error_message = None
        self._notify()

        try:
            records = self.store.fetch_all()
            self.reviews = [
                ReviewItem(
                    id=record.id,
                    title=record.title,
                    rating=record.rating,
                    place_description=record.place_description,
                    experience=record.experience,
                    user_name=record.user_name,
                    formatted_date=self.formatter.format_date(record.review_date)
                )
                for record in records
            ]
            logger.info(f"Loaded {len(self.reviews)} reviews")
        except StorageError as e:
            logger.error(f"Failed to load reviews: {e}")
            self.error_message = messages.REVIEWS_LOADING_ERROR
        finally:
            self.is_loading = False

        self._notify()

    def delete_review(self, review_id: str) -> bool:
        """
        Delete a review by id and reload the list.

        Returns:
            True if deleted, False if not found or the deletion failed
        """
        try:
            record = self.store.fetch_by_id(review_id)
            if record is None:
                logger.warning(f"Review {review_id} not found, nothing to delete")
                return False
            self.store.delete(record)
        except StorageError as e:
            logger.error(f"Failed to delete review {review_id}: {e}")
            self.error_message = messages.REVIEW_DELETE_ERROR
            self._notify()
            return False

        self.refresh()
        return True

    def weekday_name(self, weekday: int) -> str:
        """Localized name for an opening-hours weekday (1 = Sunday)."""
        return self.formatter.weekday_name(weekday)

    def subscribe(self, listener: Callable[["ReviewListWorkflow"], None]) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
