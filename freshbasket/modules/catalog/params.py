"""Query-string handling shared by the catalog API and the listing page."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional, Sequence

from freshbasket.app.common.errors import ApiError
from freshbasket.app.common.validation import decimal_arg
from freshbasket.catalog import filtering
from freshbasket.catalog.types import FilterSpec, PriceRange, Product


def _price_arg(args: Mapping[str, str], name: str, strict: bool) -> Optional[Decimal]:
    if strict:
        return decimal_arg(args, name)
    try:
        return decimal_arg(args, name)
    except ApiError:
        # pages ignore a malformed bound and fall back to the default
        return None


def filter_spec_from_args(args: Mapping[str, str], products: Sequence[Product], strict: bool = True) -> FilterSpec:
    """Build a FilterSpec from `q`, `category`, `min_price`, `max_price` and `sort`.

    Missing bounds come from the data-derived default range, so an
    untouched form shows the whole collection.
    """
    bounds = filtering.default_price_range(products)
    min_price = _price_arg(args, "min_price", strict)
    max_price = _price_arg(args, "max_price", strict)

    return filtering.default_spec(
        products,
        search_query=(args.get("q") or "").strip(),
        category_id=(args.get("category") or "").strip() or None,
        price_range=PriceRange(
            bounds.min_price if min_price is None else min_price,
            bounds.max_price if max_price is None else max_price,
        ),
        sort_key=args.get("sort"),
    )
