"""
Mapping between domain entries and storage records.

Decoding is lenient: rows written by older clients may lack fields or carry
the wrong types, and those fall back to empty defaults instead of failing
the whole load. A row without an id cannot be decoded and raises
StoreUnavailable.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ulid import ULID

from spacelearn.domain.errors import StoreUnavailable
from spacelearn.domain.models import Difficulty, LearningEntry, Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Columns:
    """Storage column name for each LearningEntry field."""

    id: str = "id"
    sequence_number: str = "sequence_number"
    content: str = "content"
    context: str = "context"
    tags: str = "tags"
    created_at: str = "created_at"
    step: str = "step"
    reviews: str = "reviews"
    last_reviewed_at: str = "last_reviewed_at"


LOCAL_COLUMNS = Columns()

# Schema of the hosted `revisoes` table
SUPABASE_COLUMNS = Columns(
    sequence_number="numero_id",
    content="conteudo",
    context="contexto",
    created_at="data_criacao",
    reviews="revisoes",
    last_reviewed_at="data_ultima_revisao",
)


def now() -> datetime:
    return datetime.now().astimezone()


def generate_entry_id() -> str:
    """Generate a stable entry ID using ULID."""
    return f"entry_{ULID()}"


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def parse_timestamp(value: Any, fallback: datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable timestamp {value!r}, using {fallback.isoformat()}")
    return fallback


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    return int(value)


def _as_strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    return tuple(str(v) for v in value)


def review_to_record(review: Review) -> dict[str, Any]:
    record: dict[str, Any] = {
        "date": format_timestamp(review.date),
        "questions": list(review.questions),
        "answers": list(review.answers),
        "step": review.step,
    }
    if review.difficulty is not None:
        record["difficulty"] = review.difficulty.value
    return record


def review_from_record(item: Any, fallback_date: datetime) -> Review:
    if not isinstance(item, dict):
        item = {}

    difficulty = None
    raw = item.get("difficulty")
    if raw is not None:
        try:
            difficulty = Difficulty(raw)
        except ValueError:
            logger.debug(f"Ignoring unknown difficulty {raw!r}")

    return Review(
        date=parse_timestamp(item.get("date"), fallback_date),
        questions=_as_strings(item.get("questions")),
        answers=_as_strings(item.get("answers")),
        step=as_int(item.get("step")),
        difficulty=difficulty,
    )


def reviews_to_records(reviews: tuple[Review, ...] | list[Review]) -> list[dict[str, Any]]:
    return [review_to_record(r) for r in reviews]


def entry_to_record(entry: LearningEntry, columns: Columns = LOCAL_COLUMNS) -> dict[str, Any]:
    return {
        columns.id: entry.id,
        columns.sequence_number: entry.sequence_number,
        columns.content: entry.content,
        columns.context: entry.context,
        columns.tags: list(entry.tags),
        columns.created_at: format_timestamp(entry.created_at),
        columns.step: entry.step,
        columns.reviews: reviews_to_records(entry.reviews),
        columns.last_reviewed_at: format_timestamp(entry.last_reviewed_at),
    }


def entry_from_record(row: dict[str, Any], columns: Columns = LOCAL_COLUMNS) -> LearningEntry:
    if not isinstance(row, dict) or not row.get(columns.id):
        raise StoreUnavailable(f"Stored record has no {columns.id!r}: {row!r}")
    fallback = now()
    raw_reviews = row.get(columns.reviews)
    if not isinstance(raw_reviews, list):
        raw_reviews = []

    return LearningEntry(
        id=str(row[columns.id]),
        sequence_number=as_int(row.get(columns.sequence_number)),
        content=str(row.get(columns.content) or ""),
        context=row.get(columns.context) or None,
        tags=_as_strings(row.get(columns.tags)),
        created_at=parse_timestamp(row.get(columns.created_at), fallback),
        step=as_int(row.get(columns.step)),
        reviews=tuple(review_from_record(item, fallback) for item in raw_reviews),
    )
