"""Rating aggregation for directory records."""

from datetime import datetime, timezone

from ..repositories.types import RatingEntry, StoredRecord
from .errors import RecordValidationError

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    """Return the rating if it is an integer in [1, 5], else raise."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise RecordValidationError("Rating must be an integer")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise RecordValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


def apply_rating(record: StoredRecord, user_id: str, rating: int) -> StoredRecord:
    """
    Record one rater's rating and refresh the aggregate.

    A rater who already rated the record has their entry overwritten in
    place; anyone else is appended. The average is recomputed over the full
    list every time.

    Args:
        record: Record to update in place
        user_id: Identity of the rater
        rating: Validated rating value

    Returns:
        The same record, updated
    """
    for entry in record.ratings:
        if entry.user_id == user_id:
            entry.rating = rating
            break
    else:
        record.ratings.append(RatingEntry(user_id=user_id, rating=rating))

    record.rating_count = len(record.ratings)
    record.average_rating = average(record.ratings)
    record.updated_at = datetime.now(timezone.utc)
    return record


def average(ratings: list[RatingEntry]) -> float:
    if not ratings:
        return 0.0
    return sum(entry.rating for entry in ratings) / len(ratings)
