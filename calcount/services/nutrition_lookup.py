"""
Barcode lookup through Open Food Facts.

Converts an Open Food Facts product to a NutritionEstimate. Portion
priority: declared serving, then whole package, then 100 g.
"""
import logging
import re
from typing import Optional

from calcount.external import openfoodfacts_client
from calcount.schemas.ai import NutritionEstimate

logger = logging.getLogger(__name__)


def to_float(value) -> Optional[float]:
    """
    Lenient float conversion: int, float, or a string with "," or "." decimals.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return float(value)

    if isinstance(value, str):
        cleaned = value.replace(",", ".").strip()
        try:
            return float(cleaned)
        except (ValueError, TypeError):
            return None

    return None


def _extract_package_weight(product: dict) -> Optional[float]:
    """
    Package weight in grams from product_quantity or quantity ("500 g",
    "0.5 kg", "330 ml"). Millilitres count as grams.
    """
    product_quantity = to_float(product.get("product_quantity"))
    if product_quantity:
        return product_quantity

    quantity = product.get("quantity")
    if quantity and isinstance(quantity, str):
        match = re.search(r"(\d+(?:[.,]\d+)?)\s*(kg|g|ml|cl|l)\b", quantity, re.IGNORECASE)
        if match:
            value = float(match.group(1).replace(",", "."))
            unit = match.group(2).lower()
            if unit == "kg" or unit == "l":
                return value * 1000
            if unit == "cl":
                return value * 10
            return value

    return None


def _calories_per_100g(nutriments: dict) -> Optional[float]:
    # energy_100g is in kJ
    if "energy-kcal_100g" in nutriments:
        return to_float(nutriments["energy-kcal_100g"])
    kj = to_float(nutriments.get("energy_100g"))
    if kj is not None:
        return kj / 4.184
    return None


def product_to_estimate(product: dict, barcode: str) -> Optional[NutritionEstimate]:
    nutriments = product.get("nutriments") or {}
    name = (
        product.get("product_name")
        or product.get("product_name_en")
        or f"Product {barcode}"
    ).strip()
    brands = product.get("brands") or ""
    brand = brands.split(",")[0].strip()
    if brand and brand.lower() not in name.lower():
        name = f"{name} ({brand})"

    serving_kcal = to_float(nutriments.get("energy-kcal_serving"))
    if serving_kcal is not None:
        return NutritionEstimate(
            food_name=name,
            calories=serving_kcal,
            protein=to_float(nutriments.get("proteins_serving")) or 0.0,
            carbs=to_float(nutriments.get("carbohydrates_serving")) or 0.0,
            fats=to_float(nutriments.get("fat_serving")) or 0.0,
            quantity=1.0,
            unit=(product.get("serving_size") or "serving").strip()[:50],
            source_provider="OPENFOODFACTS",
        )

    calories_100g = _calories_per_100g(nutriments)
    if calories_100g is None:
        return None

    portion_grams = _extract_package_weight(product) or 100.0
    factor = portion_grams / 100.0

    return NutritionEstimate(
        food_name=name,
        calories=calories_100g * factor,
        protein=(to_float(nutriments.get("proteins_100g")) or 0.0) * factor,
        carbs=(to_float(nutriments.get("carbohydrates_100g")) or 0.0) * factor,
        fats=(to_float(nutriments.get("fat_100g")) or 0.0) * factor,
        quantity=portion_grams,
        unit="g",
        source_provider="OPENFOODFACTS",
    )


async def lookup_barcode(barcode: str, base_url: str) -> Optional[NutritionEstimate]:
    """None when the product is unknown or carries no usable nutrition data."""
    product = await openfoodfacts_client.fetch_product_by_barcode(barcode, base_url=base_url)
    if not product:
        logger.debug(f"[OFF] Product not found by barcode: {barcode}")
        return None

    estimate = product_to_estimate(product, barcode)
    if estimate is None:
        logger.debug(f"[OFF] Product {barcode} has no usable nutrition data")
    return estimate
