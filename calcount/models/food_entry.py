from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    Float,
    String,
    Enum,
)

from calcount.db.base import Base

MEAL_TIMES = ("morning", "noon", "evening", "lateNight")
ENTRY_SOURCES = ("manual", "image", "barcode")


class FoodEntry(Base):
    __tablename__ = "foodEntries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column("userId", Integer, nullable=False, index=True)

    food_name = Column("foodName", String(255), nullable=False)
    meal_time = Column("mealTime", Enum(*MEAL_TIMES, name="meal_time"), nullable=False)

    calories = Column(Integer, nullable=False)
    protein = Column(Float, nullable=False)  # grams
    carbs = Column(Float, nullable=False)
    fats = Column(Float, nullable=False)

    quantity = Column(Float, default=1)
    unit = Column(String(50), default="serving")  # grams, ml, piece, ...

    image_url = Column("imageUrl", String(512), nullable=True)
    barcode = Column(String(100), nullable=True)
    source = Column(Enum(*ENTRY_SOURCES, name="entry_source"), nullable=False)

    created_at = Column("createdAt", DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        "updatedAt",
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # moment of consumption (naive UTC); decides the day bucket, not createdAt
    date = Column(DateTime, nullable=False, index=True)
