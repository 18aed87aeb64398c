"""State behind the product listing page.

Holds the fetched collection, the current FilterSpec and the filtered
results. Free-text search goes through a debouncer; category, price and
sort changes apply at once.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Any, List, Optional

from freshbasket.app.common.notifications import NotificationChannel
from freshbasket.catalog import filtering
from freshbasket.catalog.debounce import Debouncer
from freshbasket.catalog.fetchers import FetchFailure, ProductFetcher
from freshbasket.catalog.types import FilterSpec, PriceRange, Product

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load products"


class ProductListing:
    def __init__(
        self,
        fetcher: ProductFetcher,
        notifications: Optional[NotificationChannel] = None,
        debounce_wait: float = 0.3,
        timer_factory: Any = None,
    ):
        self._fetcher = fetcher
        self.notifications = notifications or NotificationChannel()
        self.products: List[Product] = []
        self.spec = FilterSpec()
        self.results: List[Product] = []
        self.loading = False
        self._lock = threading.RLock()
        # bumped by every search input; a debounced call carrying an older value is dropped
        self._search_token = 0

        debounce_kwargs = {"timer_factory": timer_factory} if timer_factory is not None else {}
        self._search = Debouncer(self._apply_search, wait=debounce_wait, **debounce_kwargs)

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.results

    @property
    def search_pending(self) -> bool:
        return self._search.pending

    def load(self) -> bool:
        """Fetch the whole collection. On failure the previous data stays."""
        self.loading = True
        try:
            products = self._fetcher.list_products()
        except FetchFailure as exc:
            logger.warning("Error fetching products: %s", exc)
            self.notifications.error(LOAD_FAILED_MESSAGE)
            return False
        else:
            with self._lock:
                self.products = products
                self.spec = filtering.default_spec(
                    products,
                    search_query=self.spec.search_query,
                    category_id=self.spec.category_id,
                    sort_key=self.spec.sort_key,
                )
            return True
        finally:
            self.loading = False
            self._refresh()

    def set_search_query(self, text: str) -> None:
        with self._lock:
            self._search_token += 1
            token = self._search_token
        self._search(text, token)

    def set_category(self, category_id: Optional[str]) -> None:
        self.update(category_id=category_id or None)

    def set_price_range(self, min_price: Decimal, max_price: Decimal) -> None:
        self.update(price_range=PriceRange(Decimal(min_price), Decimal(max_price)))

    def set_sort(self, sort_key: Any) -> None:
        self.update(sort_key=sort_key)

    def update(self, **changes: Any) -> None:
        if "search_query" in changes:
            self._search.cancel()
        with self._lock:
            if "search_query" in changes:
                self._search_token += 1
            self.spec = self.spec.with_changes(**changes)
            self._refresh()

    def apply_spec(self, spec: FilterSpec) -> None:
        """Replace the whole spec at once, e.g. from a submitted filter form."""
        self._search.cancel()
        with self._lock:
            self._search_token += 1
            self.spec = spec
            self._refresh()

    def flush(self) -> None:
        self._search.flush()

    def close(self) -> None:
        self._search.close()
        with self._lock:
            self._search_token += 1

    def __enter__(self) -> "ProductListing":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _apply_search(self, text: str, token: int) -> None:
        with self._lock:
            if token != self._search_token:
                logger.debug("Dropping stale search %r", text)
                return
            self.spec = self.spec.with_changes(search_query=text)
            self._refresh()

    def _refresh(self) -> None:
        with self._lock:
            self.results = filtering.apply(self.products, self.spec)
