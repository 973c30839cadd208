"""
Review data model.

Represents a restaurant review written by the app user and persisted
in the local review store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import uuid

from src.models.validation import FieldErrorKind, sanitize, validate_review_fields


class ValidationError(ValueError):
    """A review field failed its validation rule."""

    def __init__(self, field: str, kind: FieldErrorKind):
        super().__init__(kind.description)
        self.field = field
        self.kind = kind


def _sanitized_fields(
    title: str,
    rating: int,
    place_description: str,
    experience: str,
    user_name: str
) -> dict:
    """Validate raw field values and return them trimmed, or raise ValidationError."""
    failure = validate_review_fields(title, rating, place_description, experience, user_name)
    if failure:
        raise ValidationError(*failure)

    return {
        "title": sanitize(title),
        "rating": rating,
        "place_description": sanitize(place_description),
        "experience": sanitize(experience),
        "user_name": sanitize(user_name),
    }


IMMUTABLE_FIELDS = ("id", "created_at")


@dataclass
class ReviewRecord:
    """
    A single persisted review.
    Text fields are always stored trimmed; an instance that violates
    a field bound cannot be constructed.
    """
    id: str  # UUID4, immutable
    title: str
    rating: int  # 1-5 stars
    place_description: str
    experience: str
    user_name: str
    review_date: datetime
    created_at: datetime
    updated_at: datetime

    def __setattr__(self, name, value):
        if name in IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"ReviewRecord.{name} cannot be changed after creation")
        super().__setattr__(name, value)

    def __post_init__(self):
        sanitized = _sanitized_fields(
            self.title,
            self.rating,
            self.place_description,
            self.experience,
            self.user_name
        )
        for name, value in sanitized.items():
            setattr(self, name, value)

    @classmethod
    def create(
        cls,
        title: str,
        rating: int,
        place_description: str,
        experience: str,
        user_name: str,
        now: datetime,
        review_date: Optional[datetime] = None
    ) -> "ReviewRecord":
        """
        Build a new review with a generated id and creation timestamps.

        Args:
            now: Current time from the clock collaborator
            review_date: Date of the visit, defaults to now

        Raises:
            ValidationError: If any field is out of bounds
        """
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            rating=rating,
            place_description=place_description,
            experience=experience,
            user_name=user_name,
            review_date=review_date or now,
            created_at=now,
            updated_at=now
        )

    def update(
        self,
        title: str,
        rating: int,
        place_description: str,
        experience: str,
        user_name: str,
        now: datetime,
        review_date: Optional[datetime] = None
    ) -> None:
        """
        Replace the editable fields and refresh updated_at.
        Validation runs before any attribute changes.

        Raises:
            ValidationError: If any field is out of bounds
        """
        sanitized = _sanitized_fields(title, rating, place_description, experience, user_name)

        for name, value in sanitized.items():
            setattr(self, name, value)
        self.review_date = review_date or now
        self.updated_at = now

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewRecord":
        """Create ReviewRecord from JSON dict."""
        return cls(
            id=data["id"],
            title=data["title"],
            rating=data["rating"],
            place_description=data["place_description"],
            experience=data["experience"],
            user_name=data["user_name"],
            review_date=datetime.fromisoformat(data["review_date"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"])
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "title": self.title,
            "rating": self.rating,
            "place_description": self.place_description,
            "experience": self.experience,
            "user_name": self.user_name,
            "review_date": self.review_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat()
        }
