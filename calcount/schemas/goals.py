from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Gender = Literal["male", "female", "other"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "veryActive"]
GoalType = Literal["lose", "maintain", "gain"]


class UserGoalsUpdate(BaseModel):
    """Any subset of fields; ranges are checked by the goals service."""
    height: Optional[float] = None
    weight: Optional[float] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None
    daily_calories: Optional[int] = None
    daily_protein: Optional[float] = None
    daily_carbs: Optional[float] = None
    daily_fats: Optional[float] = None


class UserGoalsRead(BaseModel):
    user_id: int
    height: Optional[float] = None
    weight: Optional[float] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None
    daily_calories: int
    daily_protein: float
    daily_carbs: float
    daily_fats: float

    model_config = ConfigDict(from_attributes=True)


class RecommendationRequest(BaseModel):
    height: float = Field(..., gt=0, description="cm")
    weight: float = Field(..., gt=0, description="kg")
    age: int = Field(..., gt=0)
    gender: Gender
    activity_level: ActivityLevel = "moderate"
    goal: GoalType = "maintain"
    # persist profile + recommended goals only when the user confirms
    apply: bool = False


class RecommendationRead(BaseModel):
    bmi: float
    bmi_category: str
    bmr: float
    tdee: float
    goal: GoalType
    daily_calories: int
    daily_protein: int
    daily_carbs: int
    daily_fats: int
    applied: bool = False
