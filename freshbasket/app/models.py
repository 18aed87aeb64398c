from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from freshbasket.app.extensions import db
from freshbasket.catalog import types


def _uuid() -> str:
    return str(uuid.uuid4())


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = db.relationship("Product", back_populates="category")

    def to_entity(self) -> types.Category:
        return types.Category(id=self.id, name=self.name, description=self.description)


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price_cents = db.Column(db.Integer, nullable=False)
    unit = db.Column(db.String(32), nullable=False, default="piece")  # kg | piece | bunch ...
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    image_url = db.Column(db.String(1024), nullable=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=True)
    category = db.relationship("Category", back_populates="products")

    def to_entity(self) -> types.Product:
        return types.Product(
            id=self.id,
            name=self.name,
            description=self.description,
            price=Decimal(self.price_cents) / 100,
            unit=self.unit,
            category_id=self.category_id,
            stock_quantity=self.stock_quantity,
            is_featured=self.is_featured,
            image_url=self.image_url,
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
