"""
Entry mutations followed by a summary recompute of every day they touch.

Entry write and recompute are separate commits. A concurrent edit can leave
the summary stale until the next mutation of that day recomputes it.
"""
from datetime import tzinfo
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from calcount.core.timezones import local_day
from calcount.models.food_entry import FoodEntry
from calcount.services import daily_summary, entry_store


def log_entry(db: Session, user_id: int, fields: Dict[str, Any], tz: tzinfo) -> FoodEntry:
    entry = entry_store.add_entry(db, user_id, fields, tz)
    daily_summary.recompute(db, user_id, local_day(entry.date, tz), tz)
    return entry


def edit_entry(
    db: Session,
    entry_id: int,
    user_id: int,
    fields: Dict[str, Any],
    tz: tzinfo,
) -> Optional[FoodEntry]:
    existing = entry_store.get_entry(db, entry_id, user_id)
    if existing is None:
        return None
    previous_day = local_day(existing.date, tz)

    entry = entry_store.update_entry(db, entry_id, user_id, fields, tz)
    if entry is None:
        return None

    new_day = local_day(entry.date, tz)
    daily_summary.recompute(db, user_id, new_day, tz)
    if new_day != previous_day:
        daily_summary.recompute(db, user_id, previous_day, tz)
    return entry


def remove_entry(db: Session, entry_id: int, user_id: int, tz: tzinfo) -> Optional[FoodEntry]:
    entry = entry_store.delete_entry(db, entry_id, user_id)
    if entry is not None:
        daily_summary.recompute(db, user_id, local_day(entry.date, tz), tz)
    return entry
