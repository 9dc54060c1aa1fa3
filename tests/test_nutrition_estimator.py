import asyncio
import json

import pytest

from calcount.schemas.ai import NutritionEstimate
from calcount.services.nutrition_estimator import EstimatorError, NutritionEstimator


class FakeLLM:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.messages = []

    async def chat_completion(self, messages, temperature=0.3, json_mode=False):
        self.messages.append(messages)
        if self.error:
            raise self.error
        return self.reply


def _no_product():
    async def lookup(barcode, base_url):
        return None

    return lookup


class TestEstimateText:
    def test_parses_and_clamps(self):
        llm = FakeLLM(json.dumps({"calories": "95", "protein": -2, "carbs": 25.1, "fat": 0.3}))
        estimator = NutritionEstimator(llm)

        result = asyncio.run(estimator.estimate_text("apple", 1, "piece"))

        assert result.calories == 95
        assert result.protein == 0
        assert result.carbs == 25.1
        assert result.fats == 0.3
        assert "1 piece of apple" in llm.messages[0][1]["content"]

    def test_code_fenced_json(self):
        llm = FakeLLM('```json\n{"calories": 200, "protein": 5, "carbs": 30, "fats": 6}\n```')
        result = asyncio.run(NutritionEstimator(llm).estimate_text("rice"))
        assert result.calories == 200

    def test_non_json_reply(self):
        estimator = NutritionEstimator(FakeLLM("I think about 200 kcal"))
        with pytest.raises(EstimatorError, match="non-JSON"):
            asyncio.run(estimator.estimate_text("rice"))

    def test_llm_failure(self):
        estimator = NutritionEstimator(FakeLLM(error=RuntimeError("OpenAI API key is not configured")))
        with pytest.raises(EstimatorError, match="not configured"):
            asyncio.run(estimator.estimate_text("rice"))


class TestEstimateImage:
    def test_normalizes_item(self):
        reply = {"foodName": "Pasta carbonara", "calories": 650.4, "protein": 25, "carbs": 70, "fats": 28, "quantity": 1, "unit": "plate"}
        llm = FakeLLM(json.dumps(reply))

        result = asyncio.run(NutritionEstimator(llm).estimate_image("data:image/png;base64,AAAA"))

        assert result.food_name == "Pasta carbonara"
        assert result.calories == 650.4
        assert result.unit == "plate"
        assert result.source_provider == "LLM_IMAGE"
        image_part = llm.messages[0][1]["content"][1]
        assert image_part["image_url"]["url"] == "data:image/png;base64,AAAA"

    def test_missing_name_gets_fallback(self):
        llm = FakeLLM(json.dumps({"calories": 300}))
        result = asyncio.run(NutritionEstimator(llm).estimate_image("https://img.test/a.jpg"))

        assert result.food_name == "Food from photo"
        assert result.quantity is None

    def test_json_array_rejected(self):
        with pytest.raises(EstimatorError, match="unexpected JSON"):
            asyncio.run(NutritionEstimator(FakeLLM("[1, 2]")).estimate_image("https://img.test/a.jpg"))


class TestEstimateBarcode:
    def test_open_food_facts_first(self):
        found = NutritionEstimate(food_name="Oats", calories=372, protein=13, carbs=60, fats=7, source_provider="OPENFOODFACTS")

        async def lookup(barcode, base_url):
            return found

        llm = FakeLLM(error=AssertionError("LLM must not be called"))
        result = asyncio.run(NutritionEstimator(llm, barcode_lookup=lookup).estimate_barcode(" 123 "))

        assert result is found
        assert llm.messages == []

    def test_llm_fallback_for_unknown_product(self):
        llm = FakeLLM(json.dumps({"foodName": "Energy drink", "calories": 110, "protein": 0, "carbs": 27, "fats": 0}))
        result = asyncio.run(NutritionEstimator(llm, barcode_lookup=_no_product()).estimate_barcode("9002490100070"))

        assert result.food_name == "Energy drink"
        assert result.source_provider == "LLM_ESTIMATE"
        assert "9002490100070" in llm.messages[0][1]["content"]

    def test_lookup_error_falls_back(self):
        async def lookup(barcode, base_url):
            raise ConnectionError("offline")

        llm = FakeLLM(json.dumps({"calories": 50}))
        result = asyncio.run(NutritionEstimator(llm, barcode_lookup=lookup).estimate_barcode("123"))

        assert result.food_name == "Product 123"
