"""
Food entry persistence.

Every read and write is scoped by user_id: a row owned by another user is
treated exactly like a missing row.
"""
import logging
from datetime import date, tzinfo
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from calcount.core.timezones import day_window, to_storage
from calcount.models.food_entry import FoodEntry

logger = logging.getLogger(__name__)

ENTRY_DEFAULTS: Dict[str, Any] = {"quantity": 1.0, "unit": "serving"}

# columns that may never be set to NULL by a partial update
_REQUIRED_FIELDS = {
    "food_name",
    "meal_time",
    "calories",
    "protein",
    "carbs",
    "fats",
    "quantity",
    "unit",
    "source",
    "date",
}
_UPDATABLE_FIELDS = _REQUIRED_FIELDS | {"image_url", "barcode"}


def add_entry(db: Session, user_id: int, fields: Dict[str, Any], tz: tzinfo) -> FoodEntry:
    """
    Insert a food entry for user_id.
    quantity/unit fall back to 1 / "serving" when omitted or None.
    """
    values = dict(ENTRY_DEFAULTS)
    values.update({key: value for key, value in fields.items() if value is not None})
    values["date"] = to_storage(values["date"], tz)

    entry = FoodEntry(user_id=user_id, **values)
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info(
        f"[ENTRIES] Added entry id={entry.id} user_id={user_id} "
        f"source={entry.source} calories={entry.calories}"
    )
    return entry


def entries_for_day(db: Session, user_id: int, day: date, tz: tzinfo) -> List[FoodEntry]:
    """Entries whose date falls inside the calendar day in tz, in creation order."""
    start, end = day_window(day, tz)
    return (
        db.query(FoodEntry)
        .filter(
            FoodEntry.user_id == user_id,
            FoodEntry.date >= start,
            FoodEntry.date <= end,
        )
        .order_by(FoodEntry.created_at.asc(), FoodEntry.id.asc())
        .all()
    )


def get_entry(db: Session, entry_id: int, user_id: int) -> Optional[FoodEntry]:
    return (
        db.query(FoodEntry)
        .filter(FoodEntry.id == entry_id, FoodEntry.user_id == user_id)
        .first()
    )


def recent_entries(db: Session, user_id: int, limit: int = 10) -> List[FoodEntry]:
    return (
        db.query(FoodEntry)
        .filter(FoodEntry.user_id == user_id)
        .order_by(FoodEntry.date.desc(), FoodEntry.id.desc())
        .limit(limit)
        .all()
    )


def update_entry(
    db: Session,
    entry_id: int,
    user_id: int,
    fields: Dict[str, Any],
    tz: tzinfo,
) -> Optional[FoodEntry]:
    """
    Partial update. Returns None (and writes nothing) when the entry does not
    exist or belongs to someone else.
    """
    entry = get_entry(db, entry_id, user_id)
    if entry is None:
        logger.info(f"[ENTRIES] Update skipped: entry id={entry_id} not owned by user_id={user_id}")
        return None

    for key, value in fields.items():
        if key not in _UPDATABLE_FIELDS:
            continue
        if value is None and key in _REQUIRED_FIELDS:
            continue
        if key == "date":
            value = to_storage(value, tz)
        setattr(entry, key, value)

    db.commit()
    db.refresh(entry)
    logger.info(f"[ENTRIES] Updated entry id={entry_id} user_id={user_id}")
    return entry


def delete_entry(db: Session, entry_id: int, user_id: int) -> Optional[FoodEntry]:
    """
    Delete an owned entry and return it (detached). A foreign or missing id
    is a silent no-op returning None.
    """
    entry = get_entry(db, entry_id, user_id)
    if entry is None:
        return None

    db.delete(entry)
    db.commit()
    logger.info(f"[ENTRIES] Deleted entry id={entry_id} user_id={user_id}")
    return entry
