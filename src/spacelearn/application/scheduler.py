"""
Spaced-repetition scheduler.

Pure functions over entry snapshots: which entries are due on a given day,
and what an entry looks like after one more completed review. No I/O and no
shared state, so they are safe to call from any number of readers.

Due-ness is always measured from the entry's creation day. The anchor does
not move when a review is completed, so an entry at the last step stays due
every day once the last threshold has passed.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date, datetime

from spacelearn.domain.models import Difficulty, LearningEntry, Review
from spacelearn.domain.policy import DEFAULT_POLICY, IntervalPolicy


def local_day(moment: date | datetime) -> date:
    """
    Truncate a moment to its local calendar day.

    Aware datetimes are converted to the local time zone first; naive
    datetimes are taken to already be local.
    """
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone()
        return moment.date()
    return moment


def elapsed_days(created_at: datetime, today: date | datetime) -> int:
    """Whole calendar days from the creation day to ``today``. Negative for future entries."""
    return (local_day(today) - local_day(created_at)).days


def is_due(
    entry: LearningEntry,
    today: date | datetime,
    policy: IntervalPolicy = DEFAULT_POLICY,
) -> bool:
    return elapsed_days(entry.created_at, today) >= policy.threshold(entry.step)


def compute_due_entries(
    entries: Iterable[LearningEntry],
    today: date | datetime | None = None,
    policy: IntervalPolicy = DEFAULT_POLICY,
) -> list[LearningEntry]:
    """
    Select the entries due for review on ``today``.

    Args:
        entries: Current entry snapshot.
        today: Reference day; defaults to now.
        policy: Interval ladder to apply.

    Returns:
        The due entries, in input order.
    """
    day = local_day(today if today is not None else datetime.now())
    return [entry for entry in entries if is_due(entry, day, policy)]


def entries_created_on(
    entries: Iterable[LearningEntry],
    day: date | datetime | None = None,
) -> list[LearningEntry]:
    """Entries whose creation falls on ``day`` (defaults to today), in input order."""
    target = local_day(day if day is not None else datetime.now())
    return [entry for entry in entries if local_day(entry.created_at) == target]


def complete_review(
    entry: LearningEntry,
    questions: Sequence[str] | None = None,
    answers: Sequence[str] | None = None,
    difficulty: Difficulty | None = None,
    now: datetime | None = None,
    policy: IntervalPolicy = DEFAULT_POLICY,
) -> LearningEntry:
    """
    Advance an entry by one completed review.

    The step moves one rung up the ladder (clamped at the top) and exactly one
    Review is appended. Identity, content and ``created_at`` are unchanged.
    ``difficulty`` is recorded on the review but does not affect the step.
    """
    new_step = policy.next_step(entry.step)
    review = Review(
        date=now or datetime.now().astimezone(),
        questions=tuple(questions or ()),
        answers=tuple(answers or ()),
        step=new_step,
        difficulty=difficulty,
    )
    return replace(entry, step=new_step, reviews=entry.reviews + (review,))
