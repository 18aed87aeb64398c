from decimal import Decimal

import pytest

from freshbasket.catalog import filtering
from freshbasket.catalog.types import FilterSpec, PriceRange, SortKey

from conftest import make_product


def spec(**kwargs):
    kwargs.setdefault("price_range", PriceRange(Decimal("0"), Decimal("100")))
    return FilterSpec(**kwargs)


def names(products):
    return [p.name for p in products]


def test_price_ascending(grocery):
    result = filtering.apply(grocery, spec(sort_key=SortKey.PRICE_ASC))
    assert names(result) == ["Green Lettuce", "Organic Tomatoes", "Fresh Apples"]


def test_price_descending(grocery):
    result = filtering.apply(grocery, spec(sort_key=SortKey.PRICE_DESC))
    assert names(result) == ["Fresh Apples", "Organic Tomatoes", "Green Lettuce"]


def test_search_narrows_to_match(grocery):
    result = filtering.apply(grocery, spec(search_query="organic"))
    assert names(result) == ["Organic Tomatoes"]


def test_name_descending(grocery):
    result = filtering.apply(grocery, spec(sort_key=SortKey.NAME_DESC))
    assert names(result) == ["Organic Tomatoes", "Green Lettuce", "Fresh Apples"]


def test_default_sort_is_name_ascending(grocery):
    assert names(filtering.apply(grocery, spec())) == ["Fresh Apples", "Green Lettuce", "Organic Tomatoes"]


def test_search_is_case_insensitive(grocery):
    assert names(filtering.apply(grocery, spec(search_query="apples"))) == ["Fresh Apples"]
    assert names(filtering.apply(grocery, spec(search_query="  APPLES "))) == ["Fresh Apples"]


def test_search_matches_description(grocery):
    assert names(filtering.apply(grocery, spec(search_query="vine"))) == ["Organic Tomatoes"]


def test_missing_description_does_not_match_or_raise(grocery):
    # Green Lettuce has no description
    assert filtering.apply(grocery, spec(search_query="crunchy")) == []


def test_blank_search_keeps_everything(grocery):
    assert len(filtering.apply(grocery, spec(search_query="   "))) == 3


def test_category_is_exact_match(grocery):
    result = filtering.apply(grocery, spec(category_id="veg"))
    assert names(result) == ["Green Lettuce", "Organic Tomatoes"]
    assert filtering.apply(grocery, spec(category_id="ve")) == []


def test_uncategorized_products_only_show_without_category_filter():
    items = [make_product("Mystery Box", "1.00"), make_product("Kale", "2.00", category_id="veg")]
    assert names(filtering.apply(items, spec())) == ["Kale", "Mystery Box"]
    assert names(filtering.apply(items, spec(category_id="veg"))) == ["Kale"]


def test_price_bounds_are_inclusive(grocery):
    result = filtering.apply(grocery, spec(price_range=PriceRange(Decimal("2.99"), Decimal("3.99"))))
    assert names(result) == ["Green Lettuce", "Organic Tomatoes"]


def test_inverted_range_is_empty_not_error(grocery):
    assert filtering.apply(grocery, spec(price_range=PriceRange(Decimal("50"), Decimal("10")))) == []


def test_empty_input():
    assert filtering.apply([], spec(search_query="x", category_id="veg", sort_key=SortKey.PRICE_DESC)) == []


def test_unknown_sort_key_falls_back_to_name_ascending(grocery):
    result = filtering.apply(grocery, spec(sort_key="by-popularity"))
    assert names(result) == ["Fresh Apples", "Green Lettuce", "Organic Tomatoes"]


def test_filters_apply_in_sequence(grocery):
    result = filtering.apply(
        grocery,
        spec(search_query="e", category_id="veg", price_range=PriceRange(Decimal("3"), Decimal("5")),
             sort_key=SortKey.PRICE_DESC),
    )
    assert names(result) == ["Organic Tomatoes"]


def test_ties_keep_input_order():
    items = [
        make_product("Carrots", "1.50", id="a"),
        make_product("Beets", "1.50", id="b"),
        make_product("Onions", "1.50", id="c"),
    ]
    for key in (SortKey.PRICE_ASC, SortKey.PRICE_DESC):
        assert [p.id for p in filtering.apply(items, spec(sort_key=key))] == ["a", "b", "c"]


def test_name_ties_keep_input_order_descending():
    items = [make_product("Kale", "1", id="first"), make_product("kale", "2", id="second")]
    assert [p.id for p in filtering.apply(items, spec(sort_key=SortKey.NAME_DESC))] == ["first", "second"]


def test_name_sort_ignores_case():
    items = [make_product("banana", "1"), make_product("Apple", "1"), make_product("cherry", "1")]
    assert names(filtering.apply(items, spec())) == ["Apple", "banana", "cherry"]


def test_input_is_not_mutated(grocery):
    before = list(grocery)
    result = filtering.apply(grocery, spec(sort_key=SortKey.PRICE_ASC))
    assert grocery == before
    assert result is not grocery


@pytest.mark.parametrize("sort_key", list(SortKey))
def test_result_is_subset_and_idempotent(grocery, sort_key):
    s = spec(search_query="e", sort_key=sort_key)
    once = filtering.apply(grocery, s)
    assert all(p in grocery for p in once)
    assert filtering.apply(once, s) == once


def test_default_price_range_uses_ceiling_of_max_price(grocery):
    assert filtering.default_price_range(grocery) == PriceRange(Decimal("0"), Decimal("5"))


def test_default_price_range_whole_number_max():
    assert filtering.default_price_range([make_product("Melon", "7")]).max_price == Decimal("7")


def test_default_price_range_empty_collection():
    assert filtering.default_price_range([]) == PriceRange(Decimal("0"), Decimal("0"))


def test_default_spec_shows_whole_collection(grocery):
    s = filtering.default_spec(grocery)
    assert s.search_query == "" and s.category_id is None
    assert s.sort_key is SortKey.NAME_ASC
    assert len(filtering.apply(grocery, s)) == len(grocery)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("price_asc", SortKey.PRICE_ASC),
        ("price-desc", SortKey.PRICE_DESC),
        ("name-descending", SortKey.NAME_DESC),
        ("PRICE-ASCENDING", SortKey.PRICE_ASC),
        ("popular", SortKey.NAME_ASC),
        (None, SortKey.NAME_ASC),
    ],
)
def test_sort_key_parse(raw, expected):
    assert SortKey.parse(raw) is expected


def test_with_changes_returns_new_spec(grocery):
    original = filtering.default_spec(grocery)
    changed = original.with_changes(sort_key="price-desc")
    assert changed.sort_key is SortKey.PRICE_DESC
    assert original.sort_key is SortKey.NAME_ASC
