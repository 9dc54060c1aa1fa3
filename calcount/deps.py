from collections.abc import Generator
from datetime import tzinfo
from typing import Optional

from fastapi import Header, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from calcount.core.config import Settings
from calcount.core.timezones import resolve_timezone
from calcount.services.image_store import ImageStore
from calcount.services.nutrition_estimator import NutritionEstimator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def verify_internal_token(
    request: Request,
    x_internal_token: Optional[str] = Header(None, alias="X-Internal-Token"),
) -> str:
    """
    Dependency to verify X-Internal-Token header for API endpoints.
    Raises 401 if token is missing or invalid.
    """
    expected = request.app.state.settings.internal_api_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal API token not configured"
        )

    if x_internal_token != expected:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-Internal-Token"
        )

    return x_internal_token


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> int:
    """
    Authenticated user id, set by the auth proxy in front of the API.
    """
    try:
        user_id = int(x_user_id) if x_user_id is not None else 0
    except ValueError:
        user_id = 0
    if user_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-User-Id"
        )
    return user_id


def get_timezone(
    request: Request,
    tz: Optional[str] = Query(None, description="IANA timezone of the day buckets, e.g. Europe/Berlin"),
) -> tzinfo:
    try:
        return resolve_timezone(tz, request.app.state.settings.default_timezone)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


def get_estimator(request: Request) -> NutritionEstimator:
    return request.app.state.estimator


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store
