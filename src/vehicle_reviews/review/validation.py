"""Submission validation for new reviews.

``validate_submission`` checks every field of an incoming payload, collects
all problems, and raises a single ``ValidationError`` mapping each bad field
to its messages. On success it returns the normalized values that
``Review.submit`` expects.
"""

from collections.abc import Mapping

from protean.exceptions import ValidationError

from vehicle_reviews.review.review import OwnershipDuration, PurchaseType

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
COMMENT_MIN_LENGTH = 20
COMMENT_MAX_LENGTH = 2000
MAX_LIST_ENTRIES = 10
MAX_LIST_ENTRY_LENGTH = 200


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _check_rating(value, errors):
    if value is None:
        errors.setdefault("rating", []).append("Rating is required")
        return None
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int | float):
        errors.setdefault("rating", []).append("Rating must be a whole number between 1 and 5")
        return None
    if isinstance(value, float) and not value.is_integer():
        errors.setdefault("rating", []).append("Rating must be a whole number between 1 and 5")
        return None
    rating = int(value)
    if rating < 1 or rating > 5:
        errors.setdefault("rating", []).append("Rating must be between 1 and 5")
        return None
    return rating


def _check_text(field, value, min_length, max_length, label, errors):
    if _is_blank(value):
        errors.setdefault(field, []).append(f"{label} is required")
        return None
    if not isinstance(value, str):
        errors.setdefault(field, []).append(f"{label} must be text")
        return None
    text = value.strip()
    if len(text) < min_length:
        errors.setdefault(field, []).append(f"{label} must be at least {min_length} characters")
    elif len(text) > max_length:
        errors.setdefault(field, []).append(f"{label} must be at most {max_length} characters")
    return text


def _check_string_list(field, value, errors):
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, list | tuple):
        errors.setdefault(field, []).append("Must be a list of strings")
        return []

    entries = []
    for item in value:
        if not isinstance(item, str):
            errors.setdefault(field, []).append("Every entry must be a string")
            return []
        stripped = item.strip()
        if stripped:
            entries.append(stripped)

    if len(entries) > MAX_LIST_ENTRIES:
        errors.setdefault(field, []).append(f"At most {MAX_LIST_ENTRIES} entries are allowed")
    if any(len(entry) > MAX_LIST_ENTRY_LENGTH for entry in entries):
        errors.setdefault(field, []).append(f"Entries must be at most {MAX_LIST_ENTRY_LENGTH} characters")
    return entries


def _check_boolean(field, value, required, errors):
    if value is None:
        if required:
            errors.setdefault(field, []).append("This field is required")
        return False
    if not isinstance(value, bool):
        errors.setdefault(field, []).append("Must be true or false")
        return False
    return value


def _check_choice(field, value, enum_cls, errors):
    allowed = [member.value for member in enum_cls]
    if _is_blank(value):
        errors.setdefault(field, []).append("This field is required")
        return None
    if value not in allowed:
        errors.setdefault(field, []).append(f"Must be one of: {', '.join(allowed)}")
        return None
    return value


def _check_reference(field, value, errors):
    if _is_blank(value):
        errors.setdefault(field, []).append("This field is required")
        return None
    return str(value).strip()


def validate_submission(payload: Mapping) -> dict:
    """Validate and normalize a review submission.

    Raises:
        ValidationError: with messages for every invalid field.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError({"_entity": ["Review submission must be an object"]})

    errors: dict[str, list[str]] = {}

    cleaned = {
        "vehicle_id": _check_reference("vehicle_id", payload.get("vehicle_id"), errors),
        "author_id": _check_reference("author_id", payload.get("author_id"), errors),
        "rating": _check_rating(payload.get("rating"), errors),
        "title": _check_text(
            "title", payload.get("title"), TITLE_MIN_LENGTH, TITLE_MAX_LENGTH, "Title", errors
        ),
        "comment": _check_text(
            "comment", payload.get("comment"), COMMENT_MIN_LENGTH, COMMENT_MAX_LENGTH, "Review", errors
        ),
        "pros": _check_string_list("pros", payload.get("pros"), errors),
        "cons": _check_string_list("cons", payload.get("cons"), errors),
        "recommend": _check_boolean("recommend", payload.get("recommend"), True, errors),
        "purchase_type": _check_choice("purchase_type", payload.get("purchase_type"), PurchaseType, errors),
        "ownership_duration": _check_choice(
            "ownership_duration", payload.get("ownership_duration"), OwnershipDuration, errors
        ),
        "verified_purchase": _check_boolean("verified_purchase", payload.get("verified_purchase"), False, errors),
    }

    if errors:
        raise ValidationError(errors)

    return cleaned
