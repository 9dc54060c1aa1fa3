from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, Float, Enum

from calcount.db.base import Base

GENDERS = ("male", "female", "other")
ACTIVITY_LEVELS = ("sedentary", "light", "moderate", "active", "veryActive")


class UserGoals(Base):
    __tablename__ = "userGoals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column("userId", Integer, nullable=False, unique=True)

    # BMI calculator inputs
    height = Column(Float, nullable=True)  # cm
    weight = Column(Float, nullable=True)  # kg
    age = Column(Integer, nullable=True)
    gender = Column(Enum(*GENDERS, name="gender"), nullable=True)
    activity_level = Column(
        "activityLevel", Enum(*ACTIVITY_LEVELS, name="activity_level"), nullable=True
    )

    # daily targets
    daily_calories = Column("dailyCalories", Integer, default=2000)
    daily_protein = Column("dailyProtein", Float, default=150)  # grams
    daily_carbs = Column("dailyCarbs", Float, default=250)
    daily_fats = Column("dailyFats", Float, default=65)

    created_at = Column("createdAt", DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        "updatedAt",
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
