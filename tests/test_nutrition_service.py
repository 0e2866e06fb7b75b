"""Tests for the remote catalog service."""

import asyncio

from health_insight.services.cache import InMemoryCache
from health_insight.services.nutrition import NutritionService
from tests.conftest import FakeOpenFoodFactsClient, connect_error


def test_search_normalizes_and_caches() -> None:
    client = FakeOpenFoodFactsClient()
    service = NutritionService(client=client, cache=InMemoryCache())

    first = asyncio.run(service.search("Nutella"))
    second = asyncio.run(service.search("  nutella "))

    assert [product.name for product in first] == ["Nutella"]
    assert second == first
    assert client.search_calls == 1


def test_search_skips_unusable_products() -> None:
    client = FakeOpenFoodFactsClient(
        search_payload={
            "products": [
                {"product_name": ""},
                "not-a-product",
                {"product_name": "Apple", "nutriments": {"energy-kcal_100g": 52}},
            ]
        }
    )
    service = NutritionService(client=client, cache=InMemoryCache())

    results = asyncio.run(service.search("apple"))

    assert [product.name for product in results] == ["Apple"]


def test_search_blank_query_does_not_call_remote() -> None:
    client = FakeOpenFoodFactsClient()
    service = NutritionService(client=client, cache=InMemoryCache())

    assert asyncio.run(service.search("   ")) == []
    assert client.search_calls == 0


def test_search_network_error_returns_empty() -> None:
    client = FakeOpenFoodFactsClient(error=connect_error())
    service = NutritionService(client=client, cache=InMemoryCache())

    assert asyncio.run(service.search("nutella")) == []
    assert client.search_calls == 1


def test_lookup_barcode_found_and_cached() -> None:
    client = FakeOpenFoodFactsClient()
    service = NutritionService(client=client, cache=InMemoryCache())

    first = asyncio.run(service.lookup_barcode(" 3017620422003 "))
    second = asyncio.run(service.lookup_barcode("3017620422003"))

    assert first is not None
    assert first.barcode == "3017620422003"
    assert second is first
    assert client.product_calls == 1


def test_lookup_barcode_not_found() -> None:
    client = FakeOpenFoodFactsClient()
    service = NutritionService(client=client, cache=InMemoryCache())

    assert asyncio.run(service.lookup_barcode("0000000000000")) is None
    assert asyncio.run(service.lookup_barcode("  ")) is None
    assert client.product_calls == 1


def test_lookup_barcode_network_error_is_not_found() -> None:
    client = FakeOpenFoodFactsClient(error=connect_error())
    service = NutritionService(client=client, cache=InMemoryCache())

    assert asyncio.run(service.lookup_barcode("3017620422003")) is None


def test_in_memory_cache_expiry_and_eviction() -> None:
    cache = InMemoryCache(max_entries=2)
    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=120)
    cache.set("c", 3, ttl_seconds=180)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3

    cache.set("expired", 4, ttl_seconds=0)
    assert cache.get("expired") is None
