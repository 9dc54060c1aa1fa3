"""
Nutrition estimates from an LLM (text, image) and Open Food Facts (barcode).

Collaborator output is untrusted: numbers are coerced, negatives clamped to
zero, and anything unusable raises EstimatorError for the caller to map.
"""
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from calcount.external.openfoodfacts_client import OPENFOODFACTS_API_BASE
from calcount.schemas.ai import MacroEstimate, NutritionEstimate
from calcount.services.llm_client import LLMClient
from calcount.services.nutrition_lookup import to_float, lookup_barcode

logger = logging.getLogger(__name__)

BarcodeLookup = Callable[[str, str], Awaitable[Optional[NutritionEstimate]]]

_ITEM_FIELDS = (
    "- foodName: short name of the food\n"
    "- calories: number, total kcal for the portion\n"
    "- protein: number, grams\n"
    "- carbs: number, grams\n"
    "- fats: number, grams\n"
    "- quantity: number, portion size\n"
    "- unit: string, portion unit (serving, g, ml, piece, ...)\n"
)

IMAGE_SYSTEM_PROMPT = (
    "You are a nutrition expert. Analyze the food image and provide accurate "
    "nutritional information.\n\n"
    "Output STRICTLY a JSON object with the fields:\n"
    + _ITEM_FIELDS
    + "\nDo not output anything except this JSON."
)

BARCODE_SYSTEM_PROMPT = (
    "You are a nutrition expert. Given a product barcode (EAN/UPC), identify the "
    "product and provide nutritional information for one serving.\n\n"
    "Output STRICTLY a JSON object with the fields:\n"
    + _ITEM_FIELDS
    + "\nDo not output anything except this JSON."
)

MACROS_SYSTEM_PROMPT = (
    "You are a nutrition expert. Given a food name, quantity and unit, estimate "
    "the nutrition of that amount.\n\n"
    "Output STRICTLY a JSON object with the fields:\n"
    "- calories: number, kcal\n"
    "- protein: number, grams\n"
    "- carbs: number, grams\n"
    "- fats: number, grams\n"
    "\nDo not output anything except this JSON."
)


class EstimatorError(RuntimeError):
    """The estimator could not produce a usable estimate."""


def _parse_json_object(raw: str) -> Dict[str, Any]:
    text = (raw or "").strip()
    # some models still wrap JSON in a markdown fence
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        raise EstimatorError(f"LLM returned non-JSON response: {raw!r}")
    if not isinstance(data, dict):
        raise EstimatorError(f"LLM returned unexpected JSON: {raw!r}")
    return data


def _non_negative(data: Dict[str, Any], *keys: str) -> float:
    for key in keys:
        value = to_float(data.get(key))
        if value is not None:
            return max(value, 0.0)
    return 0.0


def _normalize_estimate(data: Dict[str, Any], fallback_name: str, provider: str) -> NutritionEstimate:
    name = str(data.get("foodName") or data.get("food_name") or "").strip() or fallback_name
    quantity = to_float(data.get("quantity", data.get("servingSize")))
    unit = data.get("unit") or data.get("servingUnit")
    return NutritionEstimate(
        food_name=name[:255],
        calories=_non_negative(data, "calories"),
        protein=_non_negative(data, "protein", "protein_g"),
        carbs=_non_negative(data, "carbs", "carbs_g"),
        fats=_non_negative(data, "fats", "fat", "fat_g"),
        quantity=quantity if quantity and quantity > 0 else None,
        unit=str(unit).strip()[:50] if unit else None,
        source_provider=provider,
    )


class NutritionEstimator:
    def __init__(
        self,
        llm: LLMClient,
        openfoodfacts_base_url: str = OPENFOODFACTS_API_BASE,
        barcode_lookup: BarcodeLookup = lookup_barcode,
    ):
        self.llm = llm
        self.openfoodfacts_base_url = openfoodfacts_base_url
        self._barcode_lookup = barcode_lookup

    async def _ask(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            raw = await self.llm.chat_completion(messages, json_mode=True)
        except Exception as e:
            logger.error(f"[ESTIMATOR] LLM call failed: {e}")
            raise EstimatorError(f"Nutrition estimator unavailable: {e}")
        return _parse_json_object(raw)

    async def estimate_text(self, food_name: str, quantity: float = 1, unit: str = "serving") -> MacroEstimate:
        messages = [
            {"role": "system", "content": MACROS_SYSTEM_PROMPT},
            {"role": "user", "content": f"Calculate nutrition for: {quantity:g} {unit} of {food_name}"},
        ]
        data = await self._ask(messages)
        return MacroEstimate(
            calories=_non_negative(data, "calories"),
            protein=_non_negative(data, "protein", "protein_g"),
            carbs=_non_negative(data, "carbs", "carbs_g"),
            fats=_non_negative(data, "fats", "fat", "fat_g"),
        )

    async def estimate_image(self, image_url: str) -> NutritionEstimate:
        """image_url may be an http(s) URL or a data: URL."""
        messages = [
            {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Analyze this food image and provide nutritional information."},
                    {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                ],
            },
        ]
        data = await self._ask(messages)
        estimate = _normalize_estimate(data, "Food from photo", "LLM_IMAGE")
        logger.info(f"[ESTIMATOR] Image estimate: {estimate.food_name} {estimate.calories:.0f} kcal")
        return estimate

    async def estimate_barcode(self, barcode: str) -> NutritionEstimate:
        """Open Food Facts first; LLM estimate when the product is unknown there."""
        barcode = barcode.strip()
        try:
            found = await self._barcode_lookup(barcode, self.openfoodfacts_base_url)
        except Exception as e:
            logger.warning(f"[ESTIMATOR] Open Food Facts lookup failed: {e}, falling back to LLM")
            found = None

        if found is not None:
            logger.info(f"[ESTIMATOR] Barcode {barcode} resolved by Open Food Facts")
            return found

        messages = [
            {"role": "system", "content": BARCODE_SYSTEM_PROMPT},
            {"role": "user", "content": f"Look up nutrition for barcode: {barcode}"},
        ]
        data = await self._ask(messages)
        return _normalize_estimate(data, f"Product {barcode}", "LLM_ESTIMATE")
