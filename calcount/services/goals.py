"""
Per-user nutrition goals.

A user without a userGoals row has the default goals. Reading never creates
a row; the first update inserts it and later updates merge into it.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from calcount.models.user_goals import ACTIVITY_LEVELS, GENDERS, UserGoals
from calcount.schemas.goals import UserGoalsRead
from calcount.schemas.summary import DailySummaryRead, GoalProgress, NutrientProgress

logger = logging.getLogger(__name__)

DEFAULT_GOALS: Dict[str, Any] = {
    "daily_calories": 2000,
    "daily_protein": 150.0,
    "daily_carbs": 250.0,
    "daily_fats": 65.0,
}

GOAL_LIMITS = {
    "daily_calories": (500, 10000),
    "daily_protein": (0, 500),
    "daily_carbs": (0, 1000),
    "daily_fats": (0, 500),
}

# names used in error messages, matching the stored column names
FIELD_LABELS = {
    "daily_calories": "dailyCalories",
    "daily_protein": "dailyProtein",
    "daily_carbs": "dailyCarbs",
    "daily_fats": "dailyFats",
    "activity_level": "activityLevel",
}


class GoalValidationError(ValueError):
    pass


def _label(field: str) -> str:
    return FIELD_LABELS.get(field, field)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_goal_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check a partial goals update. Returns the fields to write (None values
    mean "not supplied" and are dropped). Raises GoalValidationError naming
    the first violated bound.
    """
    cleaned: Dict[str, Any] = {}
    for field, value in fields.items():
        if value is None:
            continue

        if field in GOAL_LIMITS:
            low, high = GOAL_LIMITS[field]
            if not _is_number(value):
                raise GoalValidationError(f"{_label(field)} must be a number")
            if field == "daily_calories" and int(value) != value:
                raise GoalValidationError("dailyCalories must be an integer")
            if value < low:
                raise GoalValidationError(f"{_label(field)} must be >= {low}")
            if value > high:
                raise GoalValidationError(f"{_label(field)} must be <= {high}")
            cleaned[field] = int(value) if field == "daily_calories" else float(value)

        elif field in ("height", "weight", "age"):
            if not _is_number(value) or value <= 0:
                raise GoalValidationError(f"{field} must be > 0")
            cleaned[field] = int(value) if field == "age" else float(value)

        elif field == "gender":
            if value not in GENDERS:
                raise GoalValidationError(f"gender must be one of {', '.join(GENDERS)}")
            cleaned[field] = value

        elif field == "activity_level":
            if value not in ACTIVITY_LEVELS:
                raise GoalValidationError(
                    f"activityLevel must be one of {', '.join(ACTIVITY_LEVELS)}"
                )
            cleaned[field] = value

        else:
            raise GoalValidationError(f"Unknown goal field: {field}")

    return cleaned


def _find_row(db: Session, user_id: int) -> Optional[UserGoals]:
    return db.query(UserGoals).filter(UserGoals.user_id == user_id).first()


def default_goals(user_id: int) -> UserGoalsRead:
    return UserGoalsRead(user_id=user_id, **DEFAULT_GOALS)


def get_goals(db: Session, user_id: int) -> UserGoalsRead:
    row = _find_row(db, user_id)
    if row is None:
        return default_goals(user_id)
    return UserGoalsRead.model_validate(row)


def update_goals(db: Session, user_id: int, fields: Dict[str, Any]) -> UserGoalsRead:
    """Validate first, then upsert the supplied subset of fields."""
    cleaned = validate_goal_fields(fields)

    row = _find_row(db, user_id)
    if row is None:
        row = UserGoals(user_id=user_id, **DEFAULT_GOALS)
        db.add(row)
    for field, value in cleaned.items():
        setattr(row, field, value)

    try:
        db.commit()
    except IntegrityError:
        # concurrent first insert for the same user; merge into the winner
        db.rollback()
        row = _find_row(db, user_id)
        if row is None:
            raise
        for field, value in cleaned.items():
            setattr(row, field, value)
        db.commit()

    db.refresh(row)
    logger.info(f"[GOALS] Updated goals user_id={user_id} fields={sorted(cleaned)}")
    return UserGoalsRead.model_validate(row)


def _progress(consumed: float, goal: float) -> NutrientProgress:
    percent = (consumed / goal * 100) if goal else 0.0
    return NutrientProgress(
        consumed=round(consumed, 1),
        goal=goal,
        remaining=round(goal - consumed, 1),
        percent=round(percent, 1),
    )


def goal_progress(summary: DailySummaryRead, goals: UserGoalsRead) -> GoalProgress:
    """Dashboard numbers: consumed vs goal for each nutrient."""
    return GoalProgress(
        date=summary.date,
        calories=_progress(summary.total_calories, goals.daily_calories),
        protein=_progress(summary.total_protein, goals.daily_protein),
        carbs=_progress(summary.total_carbs, goals.daily_carbs),
        fats=_progress(summary.total_fats, goals.daily_fats),
    )
