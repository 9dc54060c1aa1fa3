from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Float

from calcount.db.base import Base


class CustomFood(Base):
    __tablename__ = "customFoods"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column("userId", Integer, nullable=False, index=True)
    food_name = Column("foodName", String(255), nullable=False)

    calories = Column(Integer, nullable=False)
    protein = Column(Float, nullable=False)
    carbs = Column(Float, nullable=False)
    fats = Column(Float, nullable=False)
    unit = Column(String(50), default="serving")

    created_at = Column("createdAt", DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        "updatedAt",
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
