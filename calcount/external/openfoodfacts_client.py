"""
Open Food Facts API client: product lookup by barcode.
"""
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

OPENFOODFACTS_API_BASE = "https://world.openfoodfacts.org/api/v2"


def _has_calories(product: dict) -> bool:
    nutriments = product.get("nutriments") or {}
    return (
        nutriments.get("energy-kcal_100g") is not None
        or nutriments.get("energy_100g") is not None
        or nutriments.get("energy-kcal_serving") is not None
    )


async def fetch_product_by_barcode(
    barcode: str,
    base_url: str = OPENFOODFACTS_API_BASE,
) -> Optional[dict]:
    """
    Fetch a product by barcode.

    Returns the product dict, or None when it is unknown, has no calorie data,
    or the request failed. Failures are logged, never raised: the caller
    falls back to the LLM estimate.
    """
    if not barcode or not barcode.strip():
        return None

    url = f"{base_url.rstrip('/')}/product/{barcode.strip()}"

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.get(url)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
    except Exception as e:
        logger.warning(f"[OFF] Error fetching product by barcode {barcode}: {e}")
        return None

    product = data.get("product")
    if not product:
        return None

    if not _has_calories(product):
        logger.debug(f"[OFF] Product {barcode} found but no calories data")
        return None

    return product
