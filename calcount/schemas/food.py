from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MealTime = Literal["morning", "noon", "evening", "lateNight"]
EntrySource = Literal["manual", "image", "barcode"]


def _as_utc(value: datetime) -> datetime:
    # stored timestamps are naive UTC
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class FoodEntryCreate(BaseModel):
    food_name: str = Field(..., min_length=1, max_length=255)
    meal_time: MealTime
    calories: int = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fats: float = Field(..., ge=0)
    quantity: float = Field(1, gt=0)
    unit: str = Field("serving", min_length=1, max_length=50)
    image_url: Optional[str] = Field(None, max_length=512)
    barcode: Optional[str] = Field(None, max_length=100)
    source: EntrySource
    # naive values are read as wall-clock time in the request timezone
    date: datetime


class FoodEntryUpdate(BaseModel):
    food_name: Optional[str] = Field(None, min_length=1, max_length=255)
    meal_time: Optional[MealTime] = None
    calories: Optional[int] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    image_url: Optional[str] = Field(None, max_length=512)
    barcode: Optional[str] = Field(None, max_length=100)
    source: Optional[EntrySource] = None
    date: Optional[datetime] = None


class FoodEntryRead(BaseModel):
    id: int
    user_id: int
    food_name: str
    meal_time: MealTime
    calories: int
    protein: float
    carbs: float
    fats: float
    quantity: float
    unit: str
    image_url: Optional[str] = None
    barcode: Optional[str] = None
    source: EntrySource
    date: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def _utc_timestamps(cls, value: datetime) -> datetime:
        return _as_utc(value)


class FoodEntriesResponse(BaseModel):
    date: str
    timezone: str
    count: int
    entries: List[FoodEntryRead]


class CustomFoodCreate(BaseModel):
    food_name: str = Field(..., min_length=1, max_length=255)
    calories: int = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fats: float = Field(..., ge=0)
    unit: str = Field("serving", min_length=1, max_length=50)


class CustomFoodRead(BaseModel):
    id: int
    food_name: str
    calories: int
    protein: float
    carbs: float
    fats: float
    unit: str

    model_config = ConfigDict(from_attributes=True)
