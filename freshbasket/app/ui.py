"""Server-rendered storefront pages: landing, product listing, product detail."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, render_template, request

from freshbasket.app.common.notifications import NotificationChannel, flash_notifications
from freshbasket.catalog.fetchers import FetchFailure, current_fetcher
from freshbasket.catalog.listing import ProductListing
from freshbasket.catalog.types import SortKey
from freshbasket.modules.catalog.params import filter_spec_from_args

logger = logging.getLogger(__name__)

ui_bp = Blueprint("ui", __name__)

FEATURES = [
    {"title": "Fresh & Organic", "description": "Hand-picked fresh produce from local farmers"},
    {"title": "Fast Delivery", "description": "Same day delivery for your convenience"},
    {"title": "Best Prices", "description": "Competitive prices for premium quality"},
]

LAYOUTS = ("grid", "list")


@ui_bp.get("/")
def home():
    channel = NotificationChannel()
    featured = []
    try:
        featured = current_fetcher().list_products(featured_only=True, limit=current_app.config["FEATURED_LIMIT"])
    except FetchFailure as exc:
        logger.warning("Error fetching featured products: %s", exc)
        channel.error("Failed to load featured products")
    flash_notifications(channel)
    return render_template("pages/home.html", features=FEATURES, featured=featured)


@ui_bp.get("/products")
def products_page():
    channel = NotificationChannel()
    categories = []
    try:
        categories = current_fetcher().list_categories()
    except FetchFailure as exc:
        logger.warning("Error fetching categories: %s", exc)
        channel.error("Failed to load categories")

    with ProductListing(
        current_fetcher(), channel, debounce_wait=current_app.config["SEARCH_DEBOUNCE_SECONDS"]
    ) as listing:
        listing.load()
        listing.apply_spec(filter_spec_from_args(request.args, listing.products, strict=False))

    layout = request.args.get("view", "grid")
    if layout not in LAYOUTS:
        layout = "grid"

    flash_notifications(channel)
    return render_template(
        "pages/products.html",
        listing=listing,
        spec=listing.spec,
        categories=categories,
        sort_keys=list(SortKey),
        layout=layout,
    )


@ui_bp.get("/products/<product_id>")
def product_detail(product_id: str):
    channel = NotificationChannel()
    status = 404
    product = None
    try:
        product = current_fetcher().get_product(product_id)
    except FetchFailure as exc:
        logger.warning("Error fetching product %s: %s", product_id, exc)
        channel.error("Failed to load product details")
        status = 503

    flash_notifications(channel)
    if product is None:
        return render_template("pages/product_not_found.html"), status
    return render_template("pages/product_detail.html", product=product)


@ui_bp.get("/about")
def about_page():
    return render_template("pages/about.html", features=FEATURES)


@ui_bp.get("/cart")
def cart_page():
    return render_template("pages/cart.html")
