"""
Review field validation rules.

Pure predicates shared by the review record constructor and the live
validation of the review editor.
"""

import unicodedata
from enum import Enum
from typing import Optional, Tuple

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 80
RATING_MIN = 1
RATING_MAX = 5
PLACE_DESCRIPTION_MIN_LENGTH = 10
PLACE_DESCRIPTION_MAX_LENGTH = 500
EXPERIENCE_MIN_LENGTH = 10
EXPERIENCE_MAX_LENGTH = 1000


class FieldErrorKind(Enum):
    """Reason a review field was rejected."""
    TITLE_LENGTH = "title_length"
    RATING_OUT_OF_RANGE = "rating_out_of_range"
    PLACE_DESCRIPTION_LENGTH = "place_description_length"
    EXPERIENCE_LENGTH = "experience_length"
    EMPTY_USER_NAME = "empty_user_name"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    FieldErrorKind.TITLE_LENGTH:
        f"Il titolo deve contenere tra {TITLE_MIN_LENGTH} e {TITLE_MAX_LENGTH} caratteri.",
    FieldErrorKind.RATING_OUT_OF_RANGE:
        f"La valutazione deve essere compresa tra {RATING_MIN} e {RATING_MAX} stelle.",
    FieldErrorKind.PLACE_DESCRIPTION_LENGTH:
        "La descrizione del locale deve contenere tra "
        f"{PLACE_DESCRIPTION_MIN_LENGTH} e {PLACE_DESCRIPTION_MAX_LENGTH} caratteri.",
    FieldErrorKind.EXPERIENCE_LENGTH:
        "L'esperienza deve contenere tra "
        f"{EXPERIENCE_MIN_LENGTH} e {EXPERIENCE_MAX_LENGTH} caratteri.",
    FieldErrorKind.EMPTY_USER_NAME: "Il nome utente non può essere vuoto.",
}


def sanitize(value: str) -> str:
    """
    Strip leading/trailing whitespace and newlines, in NFC form.

    Lengths are counted in code points after composition, so "città" counts
    5 whether the accent arrives precomposed or as a combining mark.
    """
    return unicodedata.normalize("NFC", value).strip()


def _length_between(value: str, low: int, high: int) -> bool:
    return low <= len(sanitize(value)) <= high


def validate_title(title: str) -> Optional[FieldErrorKind]:
    if _length_between(title, TITLE_MIN_LENGTH, TITLE_MAX_LENGTH):
        return None
    return FieldErrorKind.TITLE_LENGTH


def validate_rating(rating: int) -> Optional[FieldErrorKind]:
    # bool is an int subclass; True must not pass as a one-star rating
    if isinstance(rating, int) and not isinstance(rating, bool) and RATING_MIN <= rating <= RATING_MAX:
        return None
    return FieldErrorKind.RATING_OUT_OF_RANGE


def validate_place_description(place_description: str) -> Optional[FieldErrorKind]:
    if _length_between(place_description, PLACE_DESCRIPTION_MIN_LENGTH, PLACE_DESCRIPTION_MAX_LENGTH):
        return None
    return FieldErrorKind.PLACE_DESCRIPTION_LENGTH


def validate_experience(experience: str) -> Optional[FieldErrorKind]:
    if _length_between(experience, EXPERIENCE_MIN_LENGTH, EXPERIENCE_MAX_LENGTH):
        return None
    return FieldErrorKind.EXPERIENCE_LENGTH


def validate_user_name(user_name: str) -> Optional[FieldErrorKind]:
    if sanitize(user_name):
        return None
    return FieldErrorKind.EMPTY_USER_NAME


def validate_review_fields(
    title: str,
    rating: int,
    place_description: str,
    experience: str,
    user_name: str
) -> Optional[Tuple[str, FieldErrorKind]]:
    """
    Check every review field in a fixed order.

    Returns:
        (field_name, kind) for the first failing field, or None if all pass
    """
    checks = (
        ("title", validate_title(title)),
        ("rating", validate_rating(rating)),
        ("place_description", validate_place_description(place_description)),
        ("experience", validate_experience(experience)),
        ("user_name", validate_user_name(user_name)),
    )
    for field_name, kind in checks:
        if kind is not None:
            return field_name, kind
    return None
