"""Open Food Facts lookups and product normalization."""

import logging
import re
from dataclasses import dataclass

import httpx

from health_insight.adapters.openfoodfacts_client import OpenFoodFactsClient
from health_insight.domain.nutrition import (
    FoodProduct,
    MacroProfile,
    normalize_barcode,
)
from health_insight.services.cache import Cache

DEFAULT_SERVING_AMOUNT = 100.0

_SERVING_PATTERN = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(kg|mg|ml|g|lbs|lb|l|fl\s*oz|oz|cup|tbsp|tsp)",
    re.IGNORECASE,
)

# unit token -> (multiplier, canonical unit)
_UNIT_CONVERSIONS: dict[str, tuple[float, str]] = {
    "kg": (1000.0, "g"),
    "g": (1.0, "g"),
    "mg": (0.001, "g"),
    "ml": (1.0, "ml"),
    "l": (1000.0, "ml"),
    "oz": (29.5735, "ml"),
    "floz": (29.5735, "ml"),
    "lb": (453.592, "g"),
    "lbs": (453.592, "g"),
    "cup": (240.0, "ml"),
    "tbsp": (15.0, "ml"),
    "tsp": (5.0, "ml"),
}

# MacroProfile field -> (per-100g nutriment key, multiplier applied after scaling)
_NUTRIENT_KEYS: dict[str, tuple[str, float]] = {
    "protein_g": ("proteins_100g", 1.0),
    "carbs_g": ("carbohydrates_100g", 1.0),
    "fat_g": ("fat_100g", 1.0),
    "fiber_g": ("fiber_100g", 1.0),
    "sugar_g": ("sugars_100g", 1.0),
    "sodium_mg": ("sodium_100g", 1000.0),
    "cholesterol_mg": ("cholesterol_100g", 1000.0),
    "saturated_fat_g": ("saturated-fat_100g", 1.0),
    "trans_fat_g": ("trans-fat_100g", 1.0),
    "potassium_mg": ("potassium_100g", 1000.0),
}

_logger = logging.getLogger(__name__)


def parse_serving_descriptor(text: str | None) -> tuple[float, str] | None:
    """Extract a serving amount in grams or millilitres from free text.

    Handles strings such as ``"30 g"``, ``"1 cup (240ml)"`` or ``"2,5 oz"``;
    the first quantity followed by a known unit wins.
    """
    if not text:
        return None
    match = _SERVING_PATTERN.search(text)
    if match is None:
        return None
    try:
        value = float(match.group(1).replace(",", "."))
    except ValueError:
        return None
    if value <= 0:
        return None
    token = re.sub(r"\s+", "", match.group(2).lower())
    conversion = _UNIT_CONVERSIONS.get(token)
    if conversion is None:
        return None
    multiplier, unit = conversion
    return value * multiplier, unit


def infer_serving_unit(text: str | None) -> str:
    """Guess a serving unit from loose substrings."""
    if not text:
        return "g"
    lowered = text.lower()
    if "ml" in lowered or "l" in lowered:
        return "ml"
    if "oz" in lowered:
        return "oz"
    if "cup" in lowered:
        return "cup"
    return "g"


def normalize_remote_product(raw: dict[str, object]) -> FoodProduct | None:
    """Map an Open Food Facts product record to a per-serving FoodProduct.

    Source nutriments are per 100 g/ml. The serving comes from
    ``serving_size``, then ``quantity``, then a 100 g default, and every
    nutrient is scaled to it.
    """
    name = raw.get("product_name")
    if not isinstance(name, str) or not name.strip():
        return None
    nutriments = raw.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}

    serving_text = _optional_str(raw.get("serving_size")) or _optional_str(
        raw.get("quantity")
    )
    parsed = parse_serving_descriptor(serving_text)
    amount = parsed[0] if parsed else DEFAULT_SERVING_AMOUNT
    unit = parsed[1] if parsed else infer_serving_unit(serving_text)
    scale = amount / 100.0

    energy_100g = _nutrient(nutriments, "energy-kcal_100g")
    if energy_100g is None:
        energy_serving = _nutrient(nutriments, "energy-kcal_serving")
        energy_100g = energy_serving / scale if energy_serving is not None else 0.0

    values = {
        field_name: (_nutrient(nutriments, key) or 0.0) * scale * multiplier
        for field_name, (key, multiplier) in _NUTRIENT_KEYS.items()
    }
    macros = MacroProfile(calories=energy_100g * scale, **values)

    return FoodProduct(
        name=name.strip(),
        brand=_first_brand(raw.get("brands")),
        barcode=normalize_barcode(_optional_str(raw.get("code"))),
        serving_size=amount,
        serving_unit=unit,
        serving_description=serving_text or f"{int(amount)}g",
        macros=macros,
        is_custom=False,
        user_id=None,
        image_url=_optional_str(raw.get("image_front_thumb_url")),
    )


def merge_search_results(
    local: list[FoodProduct], remote: list[FoodProduct]
) -> list[FoodProduct]:
    """Return local results first, then remote ones with unseen barcodes."""
    local_barcodes = {
        barcode
        for barcode in (normalize_barcode(item.barcode) for item in local)
        if barcode is not None
    }
    merged = list(local)
    for item in remote:
        barcode = normalize_barcode(item.barcode)
        if barcode is not None and barcode in local_barcodes:
            continue
        merged.append(item)
    return merged


@dataclass
class NutritionService:
    """Remote catalog lookups with caching.

    Network failures are reported as "not found"; callers decide whether to
    fall back to the local catalog.
    """

    client: OpenFoodFactsClient
    cache: Cache
    search_ttl_seconds: int = 3600
    product_ttl_seconds: int = 86400

    async def search(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> list[FoodProduct]:
        """Search Open Food Facts by product name."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"off:search:{cleaned.lower()}:{page}:{page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        try:
            payload = await self.client.search_products(
                cleaned, page=page, page_size=page_size
            )
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Open Food Facts search failed: query=%s: %s", cleaned, exc)
            return []

        if not isinstance(payload, dict):
            return []
        raw_products = payload.get("products")
        products = [
            product
            for product in (
                normalize_remote_product(raw)
                for raw in (raw_products if isinstance(raw_products, list) else [])
                if isinstance(raw, dict)
            )
            if product is not None
        ]
        self.cache.set(cache_key, products, ttl_seconds=self.search_ttl_seconds)
        _logger.info(
            "Open Food Facts search: query=%s results=%s", cleaned, len(products)
        )
        return products

    async def lookup_barcode(self, barcode: str) -> FoodProduct | None:
        """Look up one product by barcode."""
        normalized = normalize_barcode(barcode)
        if normalized is None:
            return None
        cache_key = f"off:product:{normalized}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodProduct):
            return cached

        try:
            payload = await self.client.get_product(normalized)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning(
                "Open Food Facts lookup failed: barcode=%s: %s", normalized, exc
            )
            return None

        if not isinstance(payload, dict):
            return None
        raw = payload.get("product")
        if payload.get("status") != 1 or not isinstance(raw, dict):
            return None
        product = normalize_remote_product(raw)
        if product is not None:
            self.cache.set(cache_key, product, ttl_seconds=self.product_ttl_seconds)
        return product


def _nutrient(nutriments: dict[str, object], key: str) -> float | None:
    value = nutriments.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return max(0.0, float(value))
    if isinstance(value, str):
        try:
            return max(0.0, float(value.replace(",", ".")))
        except ValueError:
            return None
    return None


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_brand(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    first = value.split(",")[0].strip()
    return first or None
