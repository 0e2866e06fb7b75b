"""Tests for serving parsing, product normalization and result merging."""

import pytest

from health_insight.services.nutrition import (
    infer_serving_unit,
    merge_search_results,
    normalize_remote_product,
    parse_serving_descriptor,
)
from tests.conftest import NUTELLA, make_product


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("30 g", (30.0, "g")),
        ("1 cup (240ml)", (240.0, "ml")),
        ("250 ml", (250.0, "ml")),
        ("1,5 L", (1500.0, "ml")),
        ("2 tbsp", (30.0, "ml")),
        ("500mg", (0.5, "g")),
        ("12 fl oz", (354.882, "ml")),
    ],
)
def test_parse_serving_descriptor(text: str, expected: tuple[float, str]) -> None:
    amount, unit = parse_serving_descriptor(text)

    assert amount == pytest.approx(expected[0])
    assert unit == expected[1]


def test_parse_serving_descriptor_pounds() -> None:
    amount, unit = parse_serving_descriptor("1.5 lb")

    assert amount == pytest.approx(680.388)
    assert unit == "g"


@pytest.mark.parametrize("text", [None, "", "a handful", "0 g", "serving"])
def test_parse_serving_descriptor_rejects_unparseable(text: str | None) -> None:
    assert parse_serving_descriptor(text) is None


def test_infer_serving_unit() -> None:
    assert infer_serving_unit(None) == "g"
    assert infer_serving_unit("1 bottle (ml)") == "ml"
    assert infer_serving_unit("one cup") == "cup"
    assert infer_serving_unit("piece") == "g"


def test_normalize_remote_product_scales_to_serving() -> None:
    product = normalize_remote_product(NUTELLA)

    assert product is not None
    assert product.name == "Nutella"
    assert product.brand == "Ferrero"
    assert product.barcode == "3017620422003"
    assert product.serving_size == 15.0
    assert product.serving_unit == "g"
    assert product.serving_description == "15 g"
    assert product.macros.calories == pytest.approx(81.0)
    assert product.macros.protein_g == pytest.approx(0.9)
    assert product.macros.sodium_mg == pytest.approx(6.0)
    assert product.macros.saturated_fat_g == pytest.approx(1.5)
    assert product.macros.vitamin_c is None
    assert product.image_url == "https://images.example/nutella.jpg"
    assert not product.is_custom


def test_normalize_remote_product_defaults_to_100g() -> None:
    raw = {
        "code": "  ",
        "product_name": "Mystery bar",
        "nutriments": {"energy-kcal_100g": "250", "proteins_100g": -3},
    }

    product = normalize_remote_product(raw)

    assert product is not None
    assert product.barcode is None
    assert product.serving_size == 100.0
    assert product.serving_description == "100g"
    assert product.macros.calories == pytest.approx(250.0)
    assert product.macros.protein_g == 0.0


def test_normalize_remote_product_uses_serving_energy_fallback() -> None:
    raw = {
        "product_name": "Cola",
        "serving_size": "330 ml",
        "nutriments": {"energy-kcal_serving": 139},
    }

    product = normalize_remote_product(raw)

    assert product is not None
    assert product.serving_unit == "ml"
    assert product.macros.calories == pytest.approx(139.0)


def test_normalize_remote_product_is_scale_covariant() -> None:
    small = normalize_remote_product({**NUTELLA, "serving_size": "15 g"})
    large = normalize_remote_product({**NUTELLA, "serving_size": "30 g"})

    assert large.macros.calories == pytest.approx(small.macros.calories * 2)
    assert large.macros.fat_g == pytest.approx(small.macros.fat_g * 2)


@pytest.mark.parametrize("name", [None, "", "   ", 42])
def test_normalize_remote_product_requires_name(name: object) -> None:
    assert normalize_remote_product({**NUTELLA, "product_name": name}) is None


def test_merge_search_results_keeps_local_first() -> None:
    local = [make_product("Local oats", barcode="111"), make_product("Custom bowl")]
    remote = [
        make_product("Remote oats", barcode="111"),
        make_product("Remote granola", barcode="222"),
        make_product("Remote apple"),
    ]

    merged = merge_search_results(local, remote)

    assert [item.name for item in merged] == [
        "Local oats",
        "Custom bowl",
        "Remote granola",
        "Remote apple",
    ]


def test_merge_search_results_handles_empty_sides() -> None:
    remote = [make_product("Remote granola", barcode="222")]

    assert merge_search_results([], remote) == remote
    assert merge_search_results(remote, []) == remote
