import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from calcount.models.custom_food import CustomFood

logger = logging.getLogger(__name__)


def add_custom_food(db: Session, user_id: int, fields: Dict[str, Any]) -> CustomFood:
    food = CustomFood(user_id=user_id, **fields)
    db.add(food)
    db.commit()
    db.refresh(food)
    logger.info(f"[CUSTOM] Saved custom food id={food.id} user_id={user_id}")
    return food


def list_custom_foods(db: Session, user_id: int) -> List[CustomFood]:
    return (
        db.query(CustomFood)
        .filter(CustomFood.user_id == user_id)
        .order_by(CustomFood.food_name.asc(), CustomFood.id.asc())
        .all()
    )


def delete_custom_food(db: Session, food_id: int, user_id: int) -> bool:
    deleted = (
        db.query(CustomFood)
        .filter(CustomFood.id == food_id, CustomFood.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(deleted)
