from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Parse a backend price (float, int, str or Decimal) without float noise."""
    if value is None or value == "":
        return ZERO
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"invalid price: {value!r}") from exc
    if not price.is_finite() or price < ZERO:
        raise ValueError(f"price must be a non-negative number: {value!r}")
    return price


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal
    unit: str = "piece"
    description: Optional[str] = None
    category_id: Optional[str] = None
    stock_quantity: int = 0
    is_featured: bool = False
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Product":
        category_id = row.get("category_id")
        return cls(
            id=str(row["id"]),
            name=str(row.get("name") or ""),
            description=row.get("description"),
            price=to_decimal(row.get("price")),
            unit=row.get("unit") or "piece",
            category_id=str(category_id) if category_id is not None else None,
            stock_quantity=int(row.get("stock_quantity") or 0),
            is_featured=bool(row.get("is_featured", False)),
            image_url=row.get("image_url"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @property
    def price_display(self) -> str:
        return f"${self.price.quantize(CENTS)}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "price_display": self.price_display,
            "unit": self.unit,
            "category_id": self.category_id,
            "stock_quantity": self.stock_quantity,
            "is_featured": self.is_featured,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Category":
        return cls(id=str(row["id"]), name=str(row.get("name") or ""), description=row.get("description"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class PriceRange:
    """Closed price interval. An inverted range contains nothing."""

    min_price: Decimal = ZERO
    max_price: Decimal = ZERO

    @property
    def is_inverted(self) -> bool:
        return self.min_price > self.max_price

    def contains(self, price: Decimal) -> bool:
        return self.min_price <= price <= self.max_price

    def to_dict(self) -> Dict[str, float]:
        return {"min": float(self.min_price), "max": float(self.max_price)}


class SortKey(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"

    @classmethod
    def parse(cls, raw: Any) -> "SortKey":
        """Accept `price_asc`, `price-asc` or `price-ascending`; default to name ascending."""
        if isinstance(raw, cls):
            return raw
        key = str(raw or "").strip().lower().replace("-", "_")
        key = key.replace("_ascending", "_asc").replace("_descending", "_desc")
        try:
            return cls(key)
        except ValueError:
            return cls.NAME_ASC

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortKey.NAME_ASC: "Name (A-Z)",
    SortKey.NAME_DESC: "Name (Z-A)",
    SortKey.PRICE_ASC: "Price (low to high)",
    SortKey.PRICE_DESC: "Price (high to low)",
}


@dataclass(frozen=True)
class FilterSpec:
    search_query: str = ""
    category_id: Optional[str] = None
    price_range: PriceRange = field(default_factory=PriceRange)
    sort_key: SortKey = SortKey.NAME_ASC

    def with_changes(self, **changes: Any) -> "FilterSpec":
        if "sort_key" in changes:
            changes["sort_key"] = SortKey.parse(changes["sort_key"])
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "q": self.search_query,
            "category": self.category_id,
            "price_range": self.price_range.to_dict(),
            "sort": self.sort_key.value,
        }
