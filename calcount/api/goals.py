import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from calcount.deps import get_current_user_id, get_db, verify_internal_token
from calcount.schemas.goals import (
    RecommendationRead,
    RecommendationRequest,
    UserGoalsRead,
    UserGoalsUpdate,
)
from calcount.services import goals
from calcount.services.body_metrics import recommend_goals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(verify_internal_token)])


@router.get("", response_model=UserGoalsRead)
def read_goals(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return goals.get_goals(db, user_id)


@router.patch("", response_model=UserGoalsRead)
def patch_goals(
    payload: UserGoalsUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return goals.update_goals(db, user_id, payload.model_dump(exclude_unset=True))
    except goals.GoalValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/recommendation", response_model=RecommendationRead)
def recommend(
    payload: RecommendationRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    BMI / TDEE calculator. The result is only saved as the user's goals
    (together with the profile inputs) when apply is true.
    """
    recommendation = recommend_goals(
        height_cm=payload.height,
        weight_kg=payload.weight,
        age=payload.age,
        gender=payload.gender,
        activity_level=payload.activity_level,
        goal=payload.goal,
    )
    result = RecommendationRead(
        bmi=recommendation.bmi,
        bmi_category=recommendation.bmi_category,
        bmr=recommendation.bmr,
        tdee=recommendation.tdee,
        goal=recommendation.goal,
        daily_calories=recommendation.daily_calories,
        daily_protein=recommendation.macros.protein_g,
        daily_carbs=recommendation.macros.carbs_g,
        daily_fats=recommendation.macros.fats_g,
    )

    if payload.apply:
        try:
            goals.update_goals(
                db,
                user_id,
                {
                    "height": payload.height,
                    "weight": payload.weight,
                    "age": payload.age,
                    "gender": payload.gender,
                    "activity_level": payload.activity_level,
                    "daily_calories": result.daily_calories,
                    "daily_protein": result.daily_protein,
                    "daily_carbs": result.daily_carbs,
                    "daily_fats": result.daily_fats,
                },
            )
        except goals.GoalValidationError as e:
            # e.g. a recommendation below the 500 kcal floor
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        result.applied = True
        logger.info(f"[GOALS] Applied recommendation user_id={user_id} calories={result.daily_calories}")

    return result
