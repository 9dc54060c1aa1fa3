from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from calcount.schemas.food import FoodEntryRead, MealTime


class MacroRequest(BaseModel):
    """Live-typing macro suggestion request."""
    food_name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(1, gt=0)
    unit: str = "serving"


class MacroEstimate(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


class NutritionEstimate(BaseModel):
    food_name: str
    calories: float
    protein: float
    carbs: float
    fats: float
    quantity: Optional[float] = None
    unit: Optional[str] = None
    source_provider: str = "LLM_ESTIMATE"


class AnalyzeImageRequest(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=512)
    meal_time: MealTime
    date: datetime


class AnalyzeBarcodeRequest(BaseModel):
    barcode: str = Field(..., min_length=1, max_length=100)
    meal_time: MealTime
    date: datetime


class AnalysisResponse(BaseModel):
    success: bool = True
    analysis: NutritionEstimate
    entry: FoodEntryRead


class ImageUploadResponse(BaseModel):
    url: str
