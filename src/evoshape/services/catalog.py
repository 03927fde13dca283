"""Food and exercise catalog lookups with TTL caching."""

import logging
import math
import re
from dataclasses import dataclass

from evoshape.adapters.fdc_client import FdcClient
from evoshape.adapters.open_food_facts_client import OpenFoodFactsClient
from evoshape.adapters.wger_client import WgerClient
from evoshape.domain.catalog import ExerciseSummary, FoodDetails, FoodSummary
from evoshape.domain.errors import UpstreamError
from evoshape.services.cache import Cache

CACHE_TTL_SECONDS = 12 * 60 * 60
MIN_QUERY_LENGTH = 2
_ENERGY_NUMBER = "208"
_ENERGY_ID = 1008
_SERVING_PATTERN = re.compile(r"([0-9.]+)\s*([a-zA-Z]+)")

_logger = logging.getLogger(__name__)


@dataclass
class FoodCatalogService:
    """Looks up foods in FoodData Central and Open Food Facts."""

    fdc_client: FdcClient
    off_client: OpenFoodFactsClient
    cache: Cache
    detail_ttl_seconds: float = CACHE_TTL_SECONDS

    async def search(self, query: str, limit: int = 8) -> list[FoodSummary]:
        """Search FDC foods; short queries return nothing."""
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        payload = await self.fdc_client.search_foods(query, page_size=limit)
        return [
            FoodSummary(
                fdc_id=food["fdcId"],
                description=food.get("description", ""),
                brand_owner=food.get("brandOwner"),
                data_type=food.get("dataType"),
            )
            for food in payload.get("foods") or []
        ]

    async def get_food(self, fdc_id: int) -> FoodDetails:
        """Return calorie details for an FDC food."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        food = await self.fdc_client.get_food(fdc_id)
        energy = _energy_nutrient(food.get("foodNutrients") or [])
        energy_amount = _number(energy.get("amount")) if energy else None
        energy_unit = ""
        if energy:
            nutrient_info = energy.get("nutrient") or {}
            energy_unit = str(nutrient_info.get("unitName") or energy.get("unitName") or "")
        energy_kcal = energy_amount if energy_unit.lower() == "kcal" else None

        label_calories = _number(
            ((food.get("labelNutrients") or {}).get("calories") or {}).get("value")
        )
        serving_size = _number(food.get("servingSize"))
        serving_unit = food.get("servingSizeUnit")

        per_serving = label_calories if label_calories is not None else energy_kcal
        per_100g = None
        if (
            serving_size is not None
            and serving_size > 0
            and str(serving_unit or "").lower() == "g"
            and per_serving is not None
        ):
            per_100g = per_serving / serving_size * 100
        elif energy_kcal is not None:
            per_100g = energy_kcal

        details = FoodDetails(
            source="fdc",
            fdc_id=food.get("fdcId") or fdc_id,
            description=food.get("description") or "",
            brand_owner=food.get("brandOwner"),
            data_type=food.get("dataType"),
            serving_size=serving_size,
            serving_size_unit=serving_unit,
            calories_per_serving=per_serving,
            calories_per_100g=per_100g,
        )
        self.cache.set(cache_key, details, ttl_seconds=self.detail_ttl_seconds)
        return details

    async def lookup_barcode(self, code: str) -> FoodDetails | None:
        """Return Open Food Facts details for a barcode, or None when unknown."""
        payload = await self.off_client.get_product(code)
        product = payload.get("product")
        if payload.get("status") != 1 or not product:
            return None
        nutriments = product.get("nutriments") or {}
        serving_size, serving_unit = _parse_serving(product.get("serving_size"))
        return FoodDetails(
            source="off",
            description=product.get("product_name") or "",
            brand_owner=product.get("brands"),
            calories_per_100g=_number(nutriments.get("energy-kcal_100g")),
            calories_per_serving=_number(nutriments.get("energy-kcal_serving")),
            serving_size=serving_size,
            serving_size_unit=serving_unit,
        )


@dataclass
class ExerciseCatalogService:
    """Searches the wger exercise catalog, fetched once per TTL."""

    client: WgerClient
    cache: Cache
    ttl_seconds: float = CACHE_TTL_SECONDS
    max_fetch: int = 500
    page_size: int = 200

    async def search(self, query: str, limit: int = 8) -> list[ExerciseSummary]:
        """Return exercises whose name contains the query."""
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        query_lower = query.lower()
        results = []
        for item in await self._exercises():
            translations = item.get("translations") or []
            if not any(
                query_lower in str(translation.get("name") or "").lower()
                for translation in translations
            ):
                continue
            results.append(
                ExerciseSummary(
                    id=item["id"],
                    name=_pick_translation(translations, query_lower),
                    category=(item.get("category") or {}).get("name"),
                    equipment=[
                        equipment["name"]
                        for equipment in item.get("equipment") or []
                        if equipment.get("name")
                    ],
                )
            )
            if len(results) >= limit:
                break
        return results

    async def _exercises(self) -> list[dict[str, object]]:
        cached = self.cache.get("wger:exercises")
        if isinstance(cached, list):
            return cached

        items: list[dict[str, object]] = []
        next_url: str | None = self.client.first_page_url(self.page_size)
        while next_url and len(items) < self.max_fetch:
            try:
                page = await self.client.fetch_page(next_url)
            except UpstreamError as exc:
                _logger.warning(
                    "wger page fetch failed: status=%s url=%s", exc.status_code, next_url
                )
                break
            items.extend(page.get("results") or [])
            next_url = page.get("next")

        self.cache.set("wger:exercises", items, ttl_seconds=self.ttl_seconds)
        return items


def _energy_nutrient(nutrients: list[dict[str, object]]) -> dict[str, object] | None:
    for nutrient in nutrients:
        info = nutrient.get("nutrient") or {}
        if (
            info.get("number") == _ENERGY_NUMBER
            or nutrient.get("nutrientNumber") == _ENERGY_NUMBER
            or info.get("id") == _ENERGY_ID
            or nutrient.get("nutrientId") == _ENERGY_ID
            or info.get("name") == "Energy"
            or nutrient.get("nutrientName") == "Energy"
        ):
            return nutrient
    return None


def _pick_translation(translations: list[dict[str, object]], query_lower: str) -> str:
    if not translations:
        return ""
    for translation in translations:
        name = str(translation.get("name") or "")
        if query_lower in name.lower():
            return name
    return str(translations[0].get("name") or "")


def _parse_serving(raw: object) -> tuple[float | None, str | None]:
    if not raw:
        return None, None
    match = _SERVING_PATTERN.search(str(raw).replace(",", "."))
    if not match:
        return None, None
    return _number(match.group(1)), match.group(2)


def _number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
