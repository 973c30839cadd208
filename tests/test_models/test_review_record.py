"""
Unit tests for review validation rules and the ReviewRecord model.
"""

import pytest
from datetime import datetime

from src.models.review import ReviewRecord, ValidationError
from src.models.validation import (
    FieldErrorKind,
    sanitize,
    validate_experience,
    validate_place_description,
    validate_rating,
    validate_review_fields,
    validate_title,
    validate_user_name,
)

NOW = datetime(2024, 6, 1, 12, 30)


def make_record(**overrides):
    fields = {
        "title": "Ottimo pranzo",
        "rating": 5,
        "place_description": "Locale accogliente nel cuore della città.",
        "experience": "Servizio impeccabile e piatti deliziosi.",
        "user_name": "Giulia",
        "now": NOW,
    }
    fields.update(overrides)
    return ReviewRecord.create(**fields)


def test_title_bounds_use_trimmed_length():
    assert validate_title("abc") is None
    assert validate_title("a" * 80) is None
    assert validate_title("ab") == FieldErrorKind.TITLE_LENGTH
    assert validate_title("a" * 81) == FieldErrorKind.TITLE_LENGTH
    # Whitespace does not count towards the minimum
    assert validate_title("  ab  \n") == FieldErrorKind.TITLE_LENGTH


def test_rating_bounds():
    for rating in range(1, 6):
        assert validate_rating(rating) is None
    assert validate_rating(0) == FieldErrorKind.RATING_OUT_OF_RANGE
    assert validate_rating(6) == FieldErrorKind.RATING_OUT_OF_RANGE
    assert validate_rating(True) == FieldErrorKind.RATING_OUT_OF_RANGE


def test_text_bounds():
    assert validate_place_description("a" * 10) is None
    assert validate_place_description("a" * 9) == FieldErrorKind.PLACE_DESCRIPTION_LENGTH
    assert validate_place_description("a" * 501) == FieldErrorKind.PLACE_DESCRIPTION_LENGTH
    assert validate_experience("a" * 1000) is None
    assert validate_experience("  " + "a" * 9 + "  ") == FieldErrorKind.EXPERIENCE_LENGTH
    assert validate_user_name("Giulia") is None
    assert validate_user_name("   \n") == FieldErrorKind.EMPTY_USER_NAME


def test_validate_review_fields_reports_first_failure():
    failure = validate_review_fields("ab", 0, "short", "short", "")
    assert failure == ("title", FieldErrorKind.TITLE_LENGTH)

    assert validate_review_fields(
        "Ottimo pranzo", 4, "a" * 10, "b" * 10, "Giulia"
    ) is None


def test_create_trims_and_sets_timestamps():
    record = make_record(title="  Ottimo pranzo \n", user_name=" Giulia ")

    assert record.title == "Ottimo pranzo"
    assert record.user_name == "Giulia"
    assert record.review_date == NOW
    assert record.created_at == NOW
    assert record.updated_at == NOW
    assert len(record.id) == 36


def test_create_generates_unique_ids():
    assert make_record().id != make_record().id


def test_create_rejects_invalid_fields():
    with pytest.raises(ValidationError) as exc_info:
        make_record(rating=7)

    assert exc_info.value.field == "rating"
    assert exc_info.value.kind == FieldErrorKind.RATING_OUT_OF_RANGE
    assert "tra 1 e 5 stelle" in str(exc_info.value)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        make_record(user_name="  ")


def test_update_refreshes_updated_at_only():
    record = make_record()
    later = datetime(2024, 6, 2, 9, 0)

    record.update(
        title="Cena di compleanno",
        rating=4,
        place_description="Sala elegante e ben illuminata.",
        experience="Antipasti ottimi, dolce un po' troppo zuccherato.",
        user_name="Giulia",
        now=later
    )

    assert record.title == "Cena di compleanno"
    assert record.rating == 4
    assert record.created_at == NOW
    assert record.updated_at == later
    assert record.review_date == later


def test_update_validates_before_mutation():
    record = make_record()
    original = record.to_dict()

    with pytest.raises(ValidationError):
        record.update(
            title="Nuovo titolo valido",
            rating=3,
            place_description="troppo",  # Too short
            experience="Esperienza nella media, nulla di speciale.",
            user_name="Giulia",
            now=datetime(2024, 6, 3)
        )

    assert record.to_dict() == original


def test_record_serialization():
    record = make_record()

    restored = ReviewRecord.from_dict(record.to_dict())

    assert restored == record
    assert restored.review_date == NOW


def test_from_dict_rejects_invalid_data():
    data = make_record().to_dict()
    data["title"] = "x"

    with pytest.raises(ValidationError):
        ReviewRecord.from_dict(data)


def test_id_and_created_at_cannot_be_reassigned():
    record = make_record()

    with pytest.raises(AttributeError):
        record.id = "another-id"
    with pytest.raises(AttributeError):
        record.created_at = datetime(2030, 1, 1)

    record.updated_at = datetime(2024, 6, 2)
    assert record.updated_at == datetime(2024, 6, 2)


def test_decomposed_accents_count_as_one_character():
    decomposed = "citta\u0300"

    assert len(decomposed) == 6
    assert sanitize(decomposed) == "citt\u00e0"
    assert len(sanitize(decomposed)) == 5

    # 9 composed characters: below the 10 minimum despite 10 raw code points
    assert validate_experience("a" * 4 + decomposed) == FieldErrorKind.EXPERIENCE_LENGTH

    record = make_record(title="  citta\u0300 ")
    assert record.title == "citt\u00e0"


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
