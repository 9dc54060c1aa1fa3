"""
Daily summary aggregation.

The dailySummary row is a cache of the day's entries. It is always rebuilt
from scratch (never patched with deltas), so it equals the sum of the
entries as of the last recompute.
"""
import logging
from datetime import date, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from calcount.core.timezones import day_key
from calcount.models.daily_summary import DailySummary
from calcount.models.food_entry import FoodEntry
from calcount.schemas.summary import DailySummaryRead
from calcount.services import entry_store

logger = logging.getLogger(__name__)

MAX_HISTORY_DAYS = 366


def sum_entries(entries: Iterable[FoodEntry]) -> Dict[str, float]:
    totals = {
        "total_calories": 0,
        "total_protein": 0.0,
        "total_carbs": 0.0,
        "total_fats": 0.0,
    }
    for entry in entries:
        totals["total_calories"] += int(entry.calories or 0)
        totals["total_protein"] += float(entry.protein or 0)
        totals["total_carbs"] += float(entry.carbs or 0)
        totals["total_fats"] += float(entry.fats or 0)
    return totals


def _find_row(db: Session, user_id: int, day: date) -> Optional[DailySummary]:
    return (
        db.query(DailySummary)
        .filter(DailySummary.user_id == user_id, DailySummary.date == day_key(day))
        .first()
    )


def _to_read(user_id: int, day: date, row: Optional[DailySummary]) -> DailySummaryRead:
    if row is None:
        return DailySummaryRead(user_id=user_id, date=day)
    return DailySummaryRead(
        user_id=user_id,
        date=day,
        total_calories=row.total_calories or 0,
        total_protein=row.total_protein or 0.0,
        total_carbs=row.total_carbs or 0.0,
        total_fats=row.total_fats or 0.0,
    )


def recompute(db: Session, user_id: int, day: date, tz: tzinfo) -> DailySummaryRead:
    """
    Sum every entry of (user_id, day) and upsert the summary row.
    Must run after each add / edit / delete / analysis touching the day.
    """
    totals = sum_entries(entry_store.entries_for_day(db, user_id, day, tz))

    row = _find_row(db, user_id, day)
    if row is None:
        row = DailySummary(user_id=user_id, date=day_key(day), **totals)
        db.add(row)
    else:
        for field, value in totals.items():
            setattr(row, field, value)

    try:
        db.commit()
    except IntegrityError:
        # a concurrent request inserted the row first; last write wins
        db.rollback()
        row = _find_row(db, user_id, day)
        if row is None:
            raise
        for field, value in totals.items():
            setattr(row, field, value)
        db.commit()

    logger.info(
        f"[SUMMARY] Recomputed user_id={user_id} day={day.isoformat()} "
        f"calories={totals['total_calories']}"
    )
    return _to_read(user_id, day, row)


def get_summary(db: Session, user_id: int, day: date) -> DailySummaryRead:
    """Stored summary for the day, or an all-zero one. Never creates a row."""
    return _to_read(user_id, day, _find_row(db, user_id, day))


def summaries_between(db: Session, user_id: int, start: date, end: date) -> List[DailySummaryRead]:
    """One summary per calendar day in [start, end]; days without a row are zeros."""
    if end < start:
        raise ValueError("end must not be before start")
    span = (end - start).days + 1
    if span > MAX_HISTORY_DAYS:
        raise ValueError(f"range must not exceed {MAX_HISTORY_DAYS} days")

    rows = (
        db.query(DailySummary)
        .filter(
            DailySummary.user_id == user_id,
            DailySummary.date >= day_key(start),
            DailySummary.date <= day_key(end),
        )
        .all()
    )
    by_day = {row.date.date(): row for row in rows}

    return [
        _to_read(user_id, start + timedelta(days=offset), by_day.get(start + timedelta(days=offset)))
        for offset in range(span)
    ]
