"""Backend access for the product table.

Everything that can fail on the way to the data raises `FetchFailure`; a
missing product is not a failure and comes back as `None`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from freshbasket.app.extensions import db
from freshbasket.app.models import Category as CategoryRow
from freshbasket.app.models import Product as ProductRow
from freshbasket.catalog.types import Category, Product

logger = logging.getLogger(__name__)

EXTENSION_KEY = "catalog_fetcher"


class FetchFailure(Exception):
    """The backend could not be reached or returned something unusable."""


class ProductFetcher(ABC):
    @abstractmethod
    def list_products(self, featured_only: bool = False, limit: Optional[int] = None) -> List[Product]:
        """Full collection ordered by name."""

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]:
        """`None` when no product has this id."""

    @abstractmethod
    def list_categories(self) -> List[Category]:
        """Categories ordered by name."""


class SqlProductFetcher(ProductFetcher):
    """Reads the tables through Flask-SQLAlchemy; needs an app context."""

    def list_products(self, featured_only: bool = False, limit: Optional[int] = None) -> List[Product]:
        q = ProductRow.query
        if featured_only:
            q = q.filter(ProductRow.is_featured.is_(True))
        q = q.order_by(ProductRow.name.asc(), ProductRow.id.asc())
        if limit is not None:
            q = q.limit(limit)
        try:
            return [row.to_entity() for row in q.all()]
        except SQLAlchemyError as exc:
            raise FetchFailure("could not load products") from exc

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            row = db.session.get(ProductRow, str(product_id))
        except SQLAlchemyError as exc:
            raise FetchFailure(f"could not load product {product_id}") from exc
        return row.to_entity() if row is not None else None

    def list_categories(self) -> List[Category]:
        try:
            rows = CategoryRow.query.order_by(CategoryRow.name.asc()).all()
        except SQLAlchemyError as exc:
            raise FetchFailure("could not load categories") from exc
        return [row.to_entity() for row in rows]


class SupabaseProductFetcher(ProductFetcher):
    """Reads the `products` and `categories` tables over the Supabase REST API."""

    def __init__(self, url: str, key: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the supabase backend")
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Accept": "application/json",
            }
        )

    def _select(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/{table}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise FetchFailure(f"request to {table} failed: {exc}") from exc
        except ValueError as exc:
            raise FetchFailure(f"{table} returned invalid JSON") from exc

        if not isinstance(data, list):
            raise FetchFailure(f"{table} returned an unexpected payload")
        return data

    def _rows_to(self, entity, rows: List[Dict[str, Any]]) -> list:
        try:
            return [entity.from_mapping(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchFailure(f"malformed {entity.__name__.lower()} row") from exc

    def list_products(self, featured_only: bool = False, limit: Optional[int] = None) -> List[Product]:
        params: Dict[str, Any] = {"select": "*", "order": "name.asc"}
        if featured_only:
            params["is_featured"] = "eq.true"
        if limit is not None:
            params["limit"] = int(limit)
        return self._rows_to(Product, self._select("products", params))

    def get_product(self, product_id: str) -> Optional[Product]:
        rows = self._select("products", {"select": "*", "id": f"eq.{product_id}", "limit": 1})
        if not rows:
            return None
        return self._rows_to(Product, rows[:1])[0]

    def list_categories(self) -> List[Category]:
        return self._rows_to(Category, self._select("categories", {"select": "*", "order": "name.asc"}))


def build_fetcher(config) -> ProductFetcher:
    backend = (config.get("CATALOG_BACKEND") or "sql").strip().lower()
    if backend == "supabase":
        logger.info("Catalog backend: supabase (%s)", config.get("SUPABASE_URL"))
        return SupabaseProductFetcher(
            config.get("SUPABASE_URL", ""),
            config.get("SUPABASE_KEY", ""),
            timeout=float(config.get("SUPABASE_TIMEOUT", 10.0)),
        )
    if backend != "sql":
        raise ValueError(f"unknown CATALOG_BACKEND: {backend!r}")
    logger.info("Catalog backend: sql")
    return SqlProductFetcher()


def current_fetcher() -> ProductFetcher:
    return current_app.extensions[EXTENSION_KEY]
