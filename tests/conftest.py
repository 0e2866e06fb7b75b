"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import UUID

import httpx
import pytest

from health_insight.adapters.openfoodfacts_client import OpenFoodFactsClient
from health_insight.config import Settings
from health_insight.containers import AppContainer
from health_insight.domain.activity import DailyActivity, UserProfile
from health_insight.domain.insights import DailyInsightScores
from health_insight.domain.nutrition import (
    FoodProduct,
    LoggedMealItem,
    MacroProfile,
    MealEntry,
)
from health_insight.domain.sleep import DailySleepRecord
from health_insight.services.cache import InMemoryCache
from health_insight.services.catalog import (
    CatalogConflictError,
    CatalogRepository,
    CatalogService,
    FoodLookupService,
)
from health_insight.services.insights import (
    DailyLogRepository,
    InsightScoresRepository,
    InsightsService,
    ProfileRepository,
    SleepRepository,
)
from health_insight.services.meals import MealRepository, MealService
from health_insight.services.nutrition import NutritionService
from health_insight.services.search import DebouncedSearch

NUTELLA = {
    "code": "3017620422003",
    "product_name": "Nutella",
    "brands": "Ferrero, Nutella",
    "serving_size": "15 g",
    "nutriments": {
        "energy-kcal_100g": 540,
        "proteins_100g": 6.0,
        "carbohydrates_100g": 58.0,
        "fat_100g": 31.0,
        "sugars_100g": 56.0,
        "sodium_100g": 0.04,
        "saturated-fat_100g": 10.0,
    },
    "image_front_thumb_url": "https://images.example/nutella.jpg",
}


def make_product(  # noqa: PLR0913
    name: str = "Rolled oats",
    barcode: str | None = None,
    calories: float = 150.0,
    protein_g: float = 5.0,
    is_custom: bool = False,
    user_id: UUID | None = None,
) -> FoodProduct:
    return FoodProduct(
        name=name,
        barcode=barcode,
        serving_size=40.0,
        serving_unit="g",
        serving_description="40 g",
        macros=MacroProfile(calories=calories, protein_g=protein_g),
        is_custom=is_custom,
        user_id=user_id,
    )


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog; enforces one row per barcode."""

    products: dict[UUID, FoodProduct] = field(default_factory=dict)
    racing_product: FoodProduct | None = None
    inserts: int = 0

    def get_by_barcode(self, barcode: str) -> FoodProduct | None:
        for product in self.products.values():
            if product.barcode == barcode:
                return product
        return None

    def get_by_id(self, product_id: UUID) -> FoodProduct | None:
        return self.products.get(product_id)

    def search(self, query: str, limit: int) -> list[FoodProduct]:
        lowered = query.lower()
        matches = [
            product
            for product in self.products.values()
            if lowered in product.name.lower()
        ]
        return matches[:limit]

    def insert(self, product: FoodProduct) -> FoodProduct:
        if self.racing_product is not None:
            # Another writer lands the same barcode between read and insert.
            self.products[self.racing_product.id] = self.racing_product
            self.racing_product = None
        if product.barcode is not None and self.get_by_barcode(product.barcode):
            raise CatalogConflictError(product.barcode)
        self.inserts += 1
        self.products[product.id] = product
        return product


@dataclass
class InMemoryMealRepository(MealRepository):
    meals: dict[UUID, MealEntry] = field(default_factory=dict)
    items: dict[UUID, list[LoggedMealItem]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def upsert_meal(self, entry: MealEntry) -> None:
        self.calls.append("upsert_meal")
        self.meals[entry.id] = replace(entry, items=[])

    def delete_meal_items(self, meal_id: UUID) -> None:
        self.calls.append("delete_meal_items")
        self.items.pop(meal_id, None)

    def insert_meal_items(self, meal_id: UUID, items: list[LoggedMealItem]) -> None:
        self.calls.append("insert_meal_items")
        self.items[meal_id] = list(items)

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealEntry]:
        meals = [
            replace(meal, items=self.items.get(meal.id, []))
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.logged_at < end
        ]
        return sorted(meals, key=lambda meal: meal.logged_at)

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)
        self.items.pop(meal_id, None)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)


@dataclass
class InMemorySleepRepository(SleepRepository):
    records: list[DailySleepRecord] = field(default_factory=list)

    def save_sleep(self, record: DailySleepRecord) -> None:
        self.records = [item for item in self.records if item.id != record.id]
        self.records.append(record)

    def get_latest_sleep(
        self, user_id: UUID, ended_before: datetime
    ) -> DailySleepRecord | None:
        candidates = [
            record
            for record in self.records
            if record.user_id == user_id and record.end_time < ended_before
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda record: record.end_time)


@dataclass
class InMemoryDailyLogRepository(DailyLogRepository):
    activities: dict[tuple[UUID, date], DailyActivity] = field(default_factory=dict)
    water_ml: dict[tuple[UUID, date], float] = field(default_factory=dict)

    def get_daily_activity(self, user_id: UUID, day: date) -> DailyActivity | None:
        return self.activities.get((user_id, day))

    def get_water_total_ml(self, user_id: UUID, day: date) -> float:
        return self.water_ml.get((user_id, day), 0.0)


@dataclass
class InMemoryInsightsRepository(InsightScoresRepository):
    rows: dict[tuple[UUID, date], DailyInsightScores] = field(default_factory=dict)

    def upsert_scores(self, scores: DailyInsightScores) -> None:
        self.rows[(scores.user_id, scores.day)] = scores

    def list_scores(self, user_id: UUID, since: date) -> list[DailyInsightScores]:
        scores = [
            item
            for (owner, day), item in self.rows.items()
            if owner == user_id and day >= since
        ]
        return sorted(scores, key=lambda item: item.day, reverse=True)


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with canned payloads."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {"count": 1, "products": [NUTELLA]}
    )
    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {NUTELLA["code"]: NUTELLA}
    )
    error: Exception | None = None
    search_calls: int = 0
    product_calls: int = 0

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> dict[str, object]:
        self.search_calls += 1
        if self.error is not None:
            raise self.error
        return self.search_payload

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.product_calls += 1
        if self.error is not None:
            raise self.error
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "status_verbose": "product not found"}
        return {"status": 1, "product": product}


def connect_error() -> httpx.ConnectError:
    return httpx.ConnectError(
        "offline", request=httpx.Request("GET", "https://off.example/cgi/search.pl")
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token="api-token",
        search_debounce_seconds=0.01,
    )


@pytest.fixture
def off_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def nutrition_service(off_client: FakeOpenFoodFactsClient) -> NutritionService:
    return NutritionService(client=off_client, cache=InMemoryCache())


@pytest.fixture
def catalog_service(catalog_repository: InMemoryCatalogRepository) -> CatalogService:
    return CatalogService(catalog_repository)


@pytest.fixture
def meal_service(
    meal_repository: InMemoryMealRepository, catalog_service: CatalogService
) -> MealService:
    return MealService(repository=meal_repository, catalog_service=catalog_service)


@pytest.fixture
def insights_service(meal_service: MealService) -> InsightsService:
    return InsightsService(
        profile_repository=InMemoryProfileRepository(),
        sleep_repository=InMemorySleepRepository(),
        daily_log_repository=InMemoryDailyLogRepository(),
        scores_repository=InMemoryInsightsRepository(),
        meal_service=meal_service,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    nutrition_service: NutritionService,
    catalog_service: CatalogService,
    meal_service: MealService,
    insights_service: InsightsService,
) -> AppContainer:
    food_lookup_service = FoodLookupService(
        nutrition_service=nutrition_service,
        catalog_service=catalog_service,
        remote_page_size=settings.search_page_size,
        local_limit=settings.local_search_limit,
    )
    food_search = DebouncedSearch(
        search=food_lookup_service.search,
        delay_seconds=settings.search_debounce_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        catalog_service=catalog_service,
        food_lookup_service=food_lookup_service,
        food_search=food_search,
        meal_service=meal_service,
        insights_service=insights_service,
        close_resources=close_resources,
    )
