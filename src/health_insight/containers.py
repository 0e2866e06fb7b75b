"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from health_insight.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from health_insight.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from health_insight.adapters.supabase_daily_log_repository import (
    SupabaseDailyLogRepository,
)
from health_insight.adapters.supabase_insights_repository import (
    SupabaseInsightsRepository,
)
from health_insight.adapters.supabase_meal_repository import SupabaseMealRepository
from health_insight.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from health_insight.adapters.supabase_sleep_repository import SupabaseSleepRepository
from health_insight.config import Settings
from health_insight.services.cache import InMemoryCache
from health_insight.services.catalog import CatalogService, FoodLookupService
from health_insight.services.insights import InsightsService
from health_insight.services.meals import MealService
from health_insight.services.nutrition import NutritionService
from health_insight.services.search import DebouncedSearch


@dataclass
class AppContainer:
    """Holds application-wide dependencies.

    ``food_search`` debounces queries for callers that embed the services in a
    single interactive session, such as a search box. The HTTP routes call
    ``food_lookup_service`` directly because one debouncer shared by every
    request would let one caller cancel another caller's search.
    """

    settings: Settings
    nutrition_service: NutritionService
    catalog_service: CatalogService
    food_lookup_service: FoodLookupService
    food_search: DebouncedSearch
    meal_service: MealService
    insights_service: InsightsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout_seconds=resolved_settings.off_timeout_seconds,
    )
    nutrition_service = NutritionService(client=off_client, cache=InMemoryCache())
    catalog_service = CatalogService(SupabaseCatalogRepository(supabase_client))
    food_lookup_service = FoodLookupService(
        nutrition_service=nutrition_service,
        catalog_service=catalog_service,
        remote_page_size=resolved_settings.search_page_size,
        local_limit=resolved_settings.local_search_limit,
    )
    food_search = DebouncedSearch(
        search=food_lookup_service.search,
        delay_seconds=resolved_settings.search_debounce_seconds,
    )
    meal_service = MealService(
        repository=SupabaseMealRepository(supabase_client),
        catalog_service=catalog_service,
    )
    insights_service = InsightsService(
        profile_repository=SupabaseProfileRepository(supabase_client),
        sleep_repository=SupabaseSleepRepository(supabase_client),
        daily_log_repository=SupabaseDailyLogRepository(supabase_client),
        scores_repository=SupabaseInsightsRepository(supabase_client),
        meal_service=meal_service,
    )

    async def close_resources() -> None:
        food_search.cancel()
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        catalog_service=catalog_service,
        food_lookup_service=food_lookup_service,
        food_search=food_search,
        meal_service=meal_service,
        insights_service=insights_service,
        close_resources=close_resources,
    )
