from __future__ import annotations

import logging

from flask import Blueprint, current_app, request

from freshbasket.app.common.errors import abort_json
from freshbasket.app.common.validation import bool_arg, int_arg
from freshbasket.catalog import filtering
from freshbasket.catalog.fetchers import FetchFailure, current_fetcher
from freshbasket.modules.catalog.params import filter_spec_from_args

logger = logging.getLogger(__name__)

bp = Blueprint("catalog", __name__)


def _fetch_failed(exc: FetchFailure, what: str) -> None:
    logger.warning("Error fetching %s: %s", what, exc)
    abort_json(502, "fetch_failed", f"Failed to load {what}")


@bp.get("/products")
def list_products():
    """GET /api/products - Search, filter and sort the catalog.

    Query params:
      - q: free-text search over name and description
      - category: category id
      - min_price, max_price: inclusive bounds (default: full observed range)
      - sort: name_asc | name_desc | price_asc | price_desc
      - featured: only featured products; limit caps how many
    """
    featured = bool_arg(request.args, "featured")
    limit = int_arg(request.args, "limit", current_app.config["FEATURED_LIMIT"] if featured else None)

    try:
        products = current_fetcher().list_products(featured_only=featured, limit=limit)
    except FetchFailure as exc:
        _fetch_failed(exc, "products")

    spec = filter_spec_from_args(request.args, products)
    items = filtering.apply(products, spec)

    return {
        "items": [p.to_dict() for p in items],
        "filters": spec.to_dict(),
        "price_bounds": filtering.default_price_range(products).to_dict(),
        "summary": {"count": len(items), "total": len(products), "empty": not items},
    }, 200


@bp.get("/products/<product_id>")
def get_product(product_id: str):
    """GET /api/products/<id> - Retrieve product details."""
    try:
        product = current_fetcher().get_product(product_id)
    except FetchFailure as exc:
        _fetch_failed(exc, "product details")

    if product is None:
        abort_json(404, "not_found", "Product not found")
    return product.to_dict(), 200


@bp.get("/categories")
def list_categories():
    try:
        categories = current_fetcher().list_categories()
    except FetchFailure as exc:
        _fetch_failed(exc, "categories")
    return {"items": [c.to_dict() for c in categories]}, 200
