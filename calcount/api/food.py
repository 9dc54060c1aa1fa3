"""
Food log endpoints: entries, summaries, estimates and custom foods.
All routes require X-Internal-Token and X-User-Id.
"""
import logging
from datetime import date, datetime, tzinfo
from typing import List, Optional

from anyio import to_thread
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from calcount.deps import (
    get_current_user_id,
    get_db,
    get_estimator,
    get_image_store,
    get_timezone,
    verify_internal_token,
)
from calcount.schemas.ai import (
    AnalysisResponse,
    AnalyzeBarcodeRequest,
    AnalyzeImageRequest,
    ImageUploadResponse,
    MacroEstimate,
    MacroRequest,
    NutritionEstimate,
)
from calcount.schemas.food import (
    CustomFoodCreate,
    CustomFoodRead,
    FoodEntriesResponse,
    FoodEntryCreate,
    FoodEntryRead,
    FoodEntryUpdate,
)
from calcount.schemas.summary import DailySummaryRead, GoalProgress, SummaryHistory
from calcount.services import custom_foods, daily_summary, entry_store, food_log, goals
from calcount.services.body_metrics import round_half_up
from calcount.services.image_store import ImageStore, ImageStoreError
from calcount.services.nutrition_estimator import EstimatorError, NutritionEstimator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/food", tags=["food"], dependencies=[Depends(verify_internal_token)])

ENTRY_NOT_FOUND = "Entry not found"


def _parse_day(value: Optional[str], tz: tzinfo, field: str = "date") -> date:
    """YYYY-MM-DD, or today in tz when omitted."""
    if not value:
        return datetime.now(tz).date()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid {field} format. Use YYYY-MM-DD",
        )


def _zone_name(tz: tzinfo) -> str:
    return getattr(tz, "zone", None) or str(tz)


# ---------- entries ----------

@router.post("/entries", response_model=FoodEntryRead, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: FoodEntryCreate,
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    return food_log.log_entry(db, user_id, payload.model_dump(), tz)


@router.get("/entries", response_model=FoodEntriesResponse)
def list_entries(
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today in tz"),
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    day = _parse_day(date_str, tz)
    entries = entry_store.entries_for_day(db, user_id, day, tz)
    return FoodEntriesResponse(
        date=day.isoformat(),
        timezone=_zone_name(tz),
        count=len(entries),
        entries=[FoodEntryRead.model_validate(entry) for entry in entries],
    )


@router.get("/entries/recent", response_model=List[FoodEntryRead])
def list_recent_entries(
    limit: int = Query(10, ge=1, le=100),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return entry_store.recent_entries(db, user_id, limit=limit)


@router.get("/entries/{entry_id}", response_model=FoodEntryRead)
def read_entry(
    entry_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    entry = entry_store.get_entry(db, entry_id, user_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ENTRY_NOT_FOUND)
    return entry


@router.patch("/entries/{entry_id}", response_model=FoodEntryRead)
def patch_entry(
    entry_id: int,
    payload: FoodEntryUpdate,
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    entry = food_log.edit_entry(db, entry_id, user_id, payload.model_dump(exclude_unset=True), tz)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ENTRY_NOT_FOUND)
    return entry


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_entry(
    entry_id: int,
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    if food_log.remove_entry(db, entry_id, user_id, tz) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ENTRY_NOT_FOUND)


# ---------- summaries ----------

@router.get("/summary", response_model=DailySummaryRead)
def read_summary(
    date_str: Optional[str] = Query(None, alias="date"),
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    return daily_summary.get_summary(db, user_id, _parse_day(date_str, tz))


@router.get("/history", response_model=SummaryHistory)
def read_history(
    start: str = Query(..., description="YYYY-MM-DD"),
    end: str = Query(..., description="YYYY-MM-DD"),
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    start_day = _parse_day(start, tz, "start")
    end_day = _parse_day(end, tz, "end")
    try:
        days = daily_summary.summaries_between(db, user_id, start_day, end_day)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return SummaryHistory(start=start_day, end=end_day, days=days)


@router.get("/progress", response_model=GoalProgress)
def read_progress(
    date_str: Optional[str] = Query(None, alias="date"),
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
):
    summary = daily_summary.get_summary(db, user_id, _parse_day(date_str, tz))
    return goals.goal_progress(summary, goals.get_goals(db, user_id))


# ---------- estimates ----------

@router.post("/macros", response_model=MacroEstimate)
async def suggest_macros(
    payload: MacroRequest,
    user_id: int = Depends(get_current_user_id),
    estimator: NutritionEstimator = Depends(get_estimator),
):
    """
    Live-typing suggestion. Never fails on estimator errors: the form just
    shows zeros.
    """
    try:
        return await estimator.estimate_text(payload.food_name, payload.quantity, payload.unit)
    except EstimatorError as e:
        logger.warning(f"[ESTIMATOR] Macro suggestion degraded to zeros for user_id={user_id}: {e}")
        return MacroEstimate()


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    image: UploadFile = File(...),
    user_id: int = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    data = await image.read()
    try:
        url = await to_thread.run_sync(store.put, data, image.content_type or "", user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except ImageStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return ImageUploadResponse(url=url)


def _entry_fields(analysis: NutritionEstimate, meal_time: str, moment: datetime, source: str) -> dict:
    return {
        "food_name": analysis.food_name,
        "meal_time": meal_time,
        "calories": round_half_up(analysis.calories),
        "protein": analysis.protein,
        "carbs": analysis.carbs,
        "fats": analysis.fats,
        "quantity": analysis.quantity,
        "unit": analysis.unit,
        "source": source,
        "date": moment,
    }


def _log_analysis(db: Session, user_id: int, fields: dict, tz: tzinfo) -> FoodEntryRead:
    # blocking DB work; called from async routes through a worker thread
    entry = food_log.log_entry(db, user_id, fields, tz)
    return FoodEntryRead.model_validate(entry)


@router.post("/analyze/image", response_model=AnalysisResponse, status_code=status.HTTP_201_CREATED)
async def analyze_image(
    payload: AnalyzeImageRequest,
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
    estimator: NutritionEstimator = Depends(get_estimator),
    store: ImageStore = Depends(get_image_store),
):
    """Estimate a photographed meal and log it as an image entry."""
    llm_url = payload.image_url
    if store.is_local(payload.image_url):
        llm_url = await to_thread.run_sync(store.as_data_url, payload.image_url, user_id)
        if llm_url is None:
            # another user's image looks exactly like a missing one
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

    try:
        analysis = await estimator.estimate_image(llm_url)
    except EstimatorError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    fields = _entry_fields(analysis, payload.meal_time, payload.date, "image")
    fields["image_url"] = payload.image_url
    entry = await to_thread.run_sync(_log_analysis, db, user_id, fields, tz)
    return AnalysisResponse(analysis=analysis, entry=entry)


@router.post("/analyze/barcode", response_model=AnalysisResponse, status_code=status.HTTP_201_CREATED)
async def analyze_barcode(
    payload: AnalyzeBarcodeRequest,
    user_id: int = Depends(get_current_user_id),
    tz: tzinfo = Depends(get_timezone),
    db: Session = Depends(get_db),
    estimator: NutritionEstimator = Depends(get_estimator),
):
    """Look up a scanned barcode and log it as a barcode entry."""
    try:
        analysis = await estimator.estimate_barcode(payload.barcode)
    except EstimatorError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    fields = _entry_fields(analysis, payload.meal_time, payload.date, "barcode")
    fields["barcode"] = payload.barcode.strip()
    entry = await to_thread.run_sync(_log_analysis, db, user_id, fields, tz)
    return AnalysisResponse(analysis=analysis, entry=entry)


# ---------- custom foods ----------

@router.post("/custom", response_model=CustomFoodRead, status_code=status.HTTP_201_CREATED)
def create_custom_food(
    payload: CustomFoodCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return custom_foods.add_custom_food(db, user_id, payload.model_dump())


@router.get("/custom", response_model=List[CustomFoodRead])
def list_custom_foods(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return custom_foods.list_custom_foods(db, user_id)


@router.delete("/custom/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_custom_food(
    food_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not custom_foods.delete_custom_food(db, food_id, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Custom food not found")
