from datetime import date
from typing import List

from pydantic import BaseModel


class DailySummaryRead(BaseModel):
    user_id: int
    date: date
    total_calories: int = 0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0


class SummaryHistory(BaseModel):
    start: date
    end: date
    days: List[DailySummaryRead]


class NutrientProgress(BaseModel):
    consumed: float
    goal: float
    remaining: float
    percent: float


class GoalProgress(BaseModel):
    date: date
    calories: NutrientProgress
    protein: NutrientProgress
    carbs: NutrientProgress
    fats: NutrientProgress
