"""Food and exercise search endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from evoshape.api.dependencies import get_container
from evoshape.config import parse_limit
from evoshape.containers import AppContainer
from evoshape.domain.catalog import FoodDetails

MISSING_FDC_KEY_ERROR = "Missing USDA_FDC_API_KEY"
DEFAULT_LIMIT = 8
MAX_LIMIT = 20

router = APIRouter(tags=["catalog"])


def _require_fdc_key(container: AppContainer = Depends(get_container)) -> None:
    if not container.settings.fdc_api_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=MISSING_FDC_KEY_ERROR,
        )


@router.get("/food/search", dependencies=[Depends(_require_fdc_key)])
async def search_foods(
    q: str = "",
    limit: str | None = None,
    container: AppContainer = Depends(get_container),
) -> dict[str, list[dict[str, object]]]:
    """Search USDA FoodData Central."""
    foods = await container.food_catalog_service.search(
        q, parse_limit(limit, DEFAULT_LIMIT, MAX_LIMIT)
    )
    return {
        "foods": [
            {
                "fdcId": food.fdc_id,
                "description": food.description,
                "brandOwner": food.brand_owner,
                "dataType": food.data_type,
            }
            for food in foods
        ]
    }


@router.get("/food/barcode")
async def lookup_barcode(
    code: str = "",
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Look up a packaged product on Open Food Facts."""
    code = code.strip()
    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing barcode"
        )
    details = await container.food_catalog_service.lookup_barcode(code)
    if details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return _food_details(details)


@router.get("/food/{fdc_id}", dependencies=[Depends(_require_fdc_key)])
async def food_details(
    fdc_id: int,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return _food_details(await container.food_catalog_service.get_food(fdc_id))


@router.get("/activity/search")
async def search_exercises(
    q: str = "",
    limit: str | None = None,
    container: AppContainer = Depends(get_container),
) -> dict[str, list[dict[str, object]]]:
    """Search the wger exercise catalog."""
    items = await container.exercise_catalog_service.search(
        q, parse_limit(limit, DEFAULT_LIMIT, MAX_LIMIT)
    )
    return {
        "items": [
            {
                "id": item.id,
                "name": item.name,
                "category": item.category,
                "equipment": item.equipment,
            }
            for item in items
        ]
    }


def _food_details(details: FoodDetails) -> dict[str, object]:
    payload: dict[str, object] = {
        "source": details.source,
        "description": details.description,
        "brandOwner": details.brand_owner,
        "servingSize": details.serving_size,
        "servingSizeUnit": details.serving_size_unit,
        "caloriesPerServing": details.calories_per_serving,
        "caloriesPer100g": details.calories_per_100g,
    }
    if details.source == "fdc":
        payload["fdcId"] = details.fdc_id
        payload["dataType"] = details.data_type
    return payload
