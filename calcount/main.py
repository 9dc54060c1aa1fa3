import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import OperationalError

from calcount.api import food, goals
from calcount.core.config import Settings
from calcount.db.session import create_db_engine, create_session_factory
from calcount.services.image_store import ImageStore
from calcount.services.llm_client import LLMClient
from calcount.services.nutrition_estimator import NutritionEstimator

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API. Engine, session factory, estimator and image store are
    created here once and shared through app.state.

    Run with: uvicorn calcount.main:create_app --factory
    """
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Calcount API")

    engine = create_db_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.estimator = NutritionEstimator(
        LLMClient(settings.openai_api_key, settings.openai_model),
        openfoodfacts_base_url=settings.openfoodfacts_base_url,
    )
    app.state.image_store = ImageStore(
        Path(settings.media_root),
        url_prefix=settings.media_url_prefix,
        max_bytes=settings.max_upload_mb * 1024 * 1024,
    )

    if not settings.internal_api_token:
        logger.warning("[CONFIG] INTERNAL_API_TOKEN is not set, protected routes will answer 500")
    if not settings.openai_api_key:
        logger.warning("[CONFIG] OPENAI_API_KEY is not set, estimates will fail with 502")

    @app.exception_handler(OperationalError)
    async def storage_unavailable(request: Request, exc: OperationalError):
        logger.error(f"[DB] Storage unavailable on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage unavailable"},
        )

    @app.get("/health")
    async def health_check():
        return {
            "status": "ok",
            "app": "Calcount",
            "db_url_present": bool(settings.database_url),
        }

    app.include_router(food.router)
    app.include_router(goals.router)
    app.mount(
        settings.media_url_prefix,
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="media",
    )

    return app

