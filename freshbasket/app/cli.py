from __future__ import annotations

import csv
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click
from flask import Blueprint

from freshbasket.app.extensions import db
from freshbasket.app.models import Category, Product

logger = logging.getLogger(__name__)

cli_bp = Blueprint("cli", __name__, cli_group=None)

DEMO_CATEGORIES = {
    "Fruits": "Seasonal fruit from local orchards",
    "Vegetables": "Fresh-picked vegetables and greens",
    "Dairy": "Milk, cheese and eggs",
}

DEMO_PRODUCTS = [
    # name, category, price cents, unit, stock, featured, description
    ("Fresh Apples", "Fruits", 499, "kg", 120, True, "Crisp red apples, picked this week."),
    ("Organic Tomatoes", "Vegetables", 399, "kg", 80, True, "Vine-ripened organic tomatoes."),
    ("Green Lettuce", "Vegetables", 299, "piece", 60, True, "Crunchy green lettuce heads."),
    ("Bananas", "Fruits", 199, "kg", 150, False, "Sweet ripe bananas."),
    ("Free-Range Eggs", "Dairy", 549, "dozen", 40, False, None),
]


def parse_price_cents(raw: str | None) -> int:
    raw = (raw or "").strip().lstrip("$")
    if not raw:
        return 0
    try:
        return int((Decimal(raw) * 100).quantize(Decimal("1")))
    except InvalidOperation as exc:
        raise click.BadParameter(f"invalid price {raw!r}") from exc


def _truthy(raw: str | None) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "y"}


def _category(cache: dict[str, Category], name: str, description: str | None = None) -> Category:
    if name not in cache:
        cat = Category.query.filter_by(name=name).first()
        if cat is None:
            cat = Category(name=name, description=description)
            db.session.add(cat)
        cache[name] = cat
    return cache[name]


def seed_from_csv(csv_path: Path) -> int:
    categories: dict[str, Category] = {}
    count = 0
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            name = (row.get("ProductName") or "").strip()
            if not name:
                continue
            category_name = (row.get("Category") or "").strip()
            db.session.add(
                Product(
                    name=name,
                    description=(row.get("Description") or "").strip() or None,
                    price_cents=parse_price_cents(row.get("ProductPrice")),
                    unit=(row.get("Unit") or "").strip() or "piece",
                    stock_quantity=int((row.get("Stock") or "0").strip() or 0),
                    is_featured=_truthy(row.get("Featured")),
                    image_url=(row.get("Image_URL") or "").strip() or None,
                    category=_category(categories, category_name) if category_name else None,
                )
            )
            count += 1
    return count


def seed_demo() -> int:
    categories: dict[str, Category] = {}
    for name, description in DEMO_CATEGORIES.items():
        _category(categories, name, description)
    for name, category, price_cents, unit, stock, featured, description in DEMO_PRODUCTS:
        db.session.add(
            Product(
                name=name,
                description=description,
                price_cents=price_cents,
                unit=unit,
                stock_quantity=stock,
                is_featured=featured,
                category=categories[category],
            )
        )
    return len(DEMO_PRODUCTS)


@cli_bp.cli.command("init-db")
def init_db() -> None:
    """Create tables."""
    db.create_all()
    click.echo("DB initialized (tables created).")


@cli_bp.cli.command("seed")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Seed products from a CSV file instead of the demo data.")
def seed_data(csv_path: Path | None) -> None:
    """Seed categories and products.

    Safe to run multiple times; it will no-op if products exist.
    """
    db.create_all()
    if Product.query.count() > 0:
        click.echo("Products already exist; nothing to seed.")
        return

    if csv_path is not None:
        if not csv_path.exists():
            raise click.BadParameter(f"{csv_path} not found", param_hint="--csv")
        logger.info("Seeding from CSV: %s", csv_path)
        count = seed_from_csv(csv_path)
    else:
        count = seed_demo()

    db.session.commit()
    click.echo(f"Seeded {count} products.")
