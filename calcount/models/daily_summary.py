from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, Float, UniqueConstraint

from calcount.db.base import Base


class DailySummary(Base):
    __tablename__ = "dailySummary"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column("userId", Integer, nullable=False, index=True)

    # calendar day at 00:00
    date = Column(DateTime, nullable=False)

    total_calories = Column("totalCalories", Integer, default=0)
    total_protein = Column("totalProtein", Float, default=0)
    total_carbs = Column("totalCarbs", Float, default=0)
    total_fats = Column("totalFats", Float, default=0)

    created_at = Column("createdAt", DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        "updatedAt",
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("userId", "date", name="uq_dailySummary_userId_date"),
    )
