"""Client-side catalog filter.

Pure functions over an already fetched product collection. Filters run in a
fixed order (search, category, price range) and the survivors are then
stable-sorted, so a given (products, spec) pair always yields the same list.
"""

from __future__ import annotations

import locale
import math
import unicodedata
from decimal import Decimal
from typing import Any, Iterable, List, Sequence

from freshbasket.catalog.types import ZERO, FilterSpec, PriceRange, Product, SortKey


def _name_key(product: Product) -> str:
    name = unicodedata.normalize("NFKD", product.name or "").casefold()
    return locale.strxfrm(name)


def _matches_query(product: Product, needle: str) -> bool:
    if needle in (product.name or "").casefold():
        return True
    return product.description is not None and needle in product.description.casefold()


def sort_products(products: Iterable[Product], sort_key: Any = SortKey.NAME_ASC) -> List[Product]:
    key = SortKey.parse(sort_key)
    if key in (SortKey.PRICE_ASC, SortKey.PRICE_DESC):
        return sorted(products, key=lambda p: p.price, reverse=key is SortKey.PRICE_DESC)
    # sorted() keeps equal elements in input order even with reverse=True
    return sorted(products, key=_name_key, reverse=key is SortKey.NAME_DESC)


def apply(products: Sequence[Product], spec: FilterSpec) -> List[Product]:
    items = list(products)

    needle = (spec.search_query or "").strip().casefold()
    if needle:
        items = [p for p in items if _matches_query(p, needle)]

    if spec.category_id:
        items = [p for p in items if p.category_id == spec.category_id]

    price_range = spec.price_range
    if price_range.is_inverted:
        return []
    items = [p for p in items if price_range.contains(p.price)]

    return sort_products(items, spec.sort_key)


def default_price_range(products: Iterable[Product]) -> PriceRange:
    """[0, ceil(max price)] so the initial slider never clips real data."""
    prices = [p.price for p in products]
    if not prices:
        return PriceRange(ZERO, ZERO)
    return PriceRange(ZERO, Decimal(math.ceil(max(prices))))


def default_spec(products: Sequence[Product], **overrides: Any) -> FilterSpec:
    """Spec for a freshly loaded collection: everything visible, sorted by name."""
    overrides.setdefault("price_range", default_price_range(products))
    if "sort_key" in overrides:
        overrides["sort_key"] = SortKey.parse(overrides["sort_key"])
    return FilterSpec(**overrides)
