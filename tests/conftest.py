from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from calcount.core.config import Settings
from calcount.core.timezones import resolve_timezone
from calcount.deps import get_estimator
from calcount.main import create_app
from calcount.models import Base
from calcount.schemas.ai import MacroEstimate, NutritionEstimate
from calcount.services.nutrition_estimator import EstimatorError

USER_A = 1
USER_B = 2


class FakeEstimator:
    """Stands in for the LLM / Open Food Facts backed estimator."""

    def __init__(self):
        self.fail = False
        self.text_result = MacroEstimate(calories=95, protein=0.5, carbs=25, fats=0.3)
        self.analysis = NutritionEstimate(
            food_name="Chicken salad",
            calories=420.6,
            protein=35.0,
            carbs=12.5,
            fats=24.0,
            quantity=1,
            unit="bowl",
            source_provider="LLM_IMAGE",
        )
        self.image_urls = []
        self.barcodes = []

    def _check(self):
        if self.fail:
            raise EstimatorError("Nutrition estimator unavailable: boom")

    async def estimate_text(self, food_name: str, quantity: float = 1, unit: str = "serving") -> MacroEstimate:
        self._check()
        return self.text_result

    async def estimate_image(self, image_url: str) -> NutritionEstimate:
        self._check()
        self.image_urls.append(image_url)
        return self.analysis

    async def estimate_barcode(self, barcode: str) -> NutritionEstimate:
        self._check()
        self.barcodes.append(barcode)
        return self.analysis


class ConflictingSession:
    """Session whose commit always hits a unique constraint."""

    def __init__(self):
        self.rolled_back = False

    def add(self, obj):
        pass

    def commit(self):
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    def rollback(self):
        self.rolled_back = True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        internal_api_token="test-token",
        openai_api_key=None,
        default_timezone="UTC",
        media_root=str(tmp_path / "media"),
        max_upload_mb=1,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    Base.metadata.create_all(app.state.engine)
    yield app
    Base.metadata.drop_all(app.state.engine)
    app.state.engine.dispose()


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def utc():
    return resolve_timezone("UTC")


@pytest.fixture
def berlin():
    return resolve_timezone("Europe/Berlin")


@pytest.fixture
def fake_estimator(app):
    estimator = FakeEstimator()
    app.dependency_overrides[get_estimator] = lambda: estimator
    yield estimator
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, fake_estimator):
    with TestClient(app, headers={"X-Internal-Token": "test-token", "X-User-Id": str(USER_A)}) as c:
        yield c


@pytest.fixture
def entry_fields():
    """Factory for a valid add_entry payload."""

    def make(
        calories: int = 300,
        when: Optional[datetime] = None,
        **overrides,
    ) -> dict:
        fields = {
            "food_name": "Oatmeal",
            "meal_time": "morning",
            "calories": calories,
            "protein": 10.0,
            "carbs": 50.0,
            "fats": 5.0,
            "source": "manual",
            "date": when or datetime(2026, 3, 10, 8, 0),
        }
        fields.update(overrides)
        return fields

    return make
