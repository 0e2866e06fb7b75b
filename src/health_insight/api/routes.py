"""Token-protected API endpoints."""

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from health_insight.api.models import (
    CreateFoodRequest,
    MealRequest,
    SleepSamplesRequest,
)
from health_insight.api.serializers import (
    day_summary_to_dict,
    meal_to_dict,
    product_to_dict,
    scores_to_dict,
    sleep_to_dict,
    tdee_to_dict,
    weekly_summary_to_dict,
)

if TYPE_CHECKING:
    from health_insight.containers import AppContainer

PRODUCT_NOT_FOUND = "Product not found. Try searching by name."


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(dependencies=[Depends(require_api_token)])


@router.get("/foods/search")
async def search_foods(
    request: Request, q: str = Query(default="")
) -> dict[str, object]:
    """Search the remote and local catalogs, local results first."""
    container: AppContainer = request.app.state.container
    products = await container.food_lookup_service.search(q)
    return {"results": [product_to_dict(product) for product in products]}


@router.get("/foods/barcode/{barcode}")
async def lookup_barcode(barcode: str, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    product = await container.food_lookup_service.lookup_barcode(barcode)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND
        )
    return product_to_dict(product)


@router.post("/foods", status_code=status.HTTP_201_CREATED)
def create_food(payload: CreateFoodRequest, request: Request) -> dict[str, object]:
    """Resolve a product against the catalog, inserting it when new."""
    container: AppContainer = request.app.state.container
    product = container.catalog_service.resolve_or_create(
        payload.to_domain(), owner_id=payload.user_id
    )
    return product_to_dict(product)


@router.post("/users/{user_id}/meals", status_code=status.HTTP_201_CREATED)
def save_meal(
    user_id: UUID, payload: MealRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    entry = container.meal_service.save_meal(payload.to_domain(user_id))
    return meal_to_dict(entry)


@router.get("/users/{user_id}/meals")
def list_meals(
    user_id: UUID,
    request: Request,
    day: date | None = None,
    tz: str = "UTC",
) -> dict[str, object]:
    """Return the day's meals and progress against the user's goals."""
    container: AppContainer = request.app.state.container
    profile = container.insights_service.get_profile(user_id)
    try:
        summary = container.meal_service.day_summary(profile, day or _today(), tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {tz}",
        ) from exc
    return day_summary_to_dict(summary)


@router.post("/users/{user_id}/sleep", status_code=status.HTTP_201_CREATED)
def record_sleep(
    user_id: UUID, payload: SleepSamplesRequest, request: Request
) -> dict[str, object]:
    """Store one night built from platform sleep samples."""
    container: AppContainer = request.app.state.container
    record = container.insights_service.record_sleep_samples(
        user_id, payload.to_domain()
    )
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No usable sleep samples.",
        )
    return sleep_to_dict(record)


@router.post("/users/{user_id}/insights/refresh")
def refresh_insights(
    user_id: UUID, request: Request, day: date | None = None
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    scores = container.insights_service.refresh_day(user_id, day or _today())
    return scores_to_dict(scores)


@router.get("/users/{user_id}/insights")
def weekly_insights(
    user_id: UUID, request: Request, days: int = Query(default=7, ge=1, le=90)
) -> dict[str, object]:
    """Return stored scores for recent days, newest first."""
    container: AppContainer = request.app.state.container
    summary = container.insights_service.weekly_summary(user_id, _today(), days)
    return weekly_summary_to_dict(summary)


@router.get("/users/{user_id}/energy")
def energy_breakdown(
    user_id: UUID, request: Request, day: date | None = None
) -> dict[str, float]:
    container: AppContainer = request.app.state.container
    breakdown = container.insights_service.energy_breakdown(user_id, day or _today())
    return tdee_to_dict(breakdown)


def _today() -> date:
    return datetime.now(tz=UTC).date()
