from __future__ import annotations

from decimal import Decimal
from enum import Enum

from ..extensions import db
from clubpos.time_utils import to_utc_z


class ProductCategory(str, Enum):
    FLOWER = "FLOWER"
    EXTRACT = "EXTRACT"
    EDIBLE = "EDIBLE"
    ACCESSORY = "ACCESSORY"
    DRINK = "DRINK"


class UnitKind(str, Enum):
    MASS = "MASS"    # tracked and priced per gram
    COUNT = "COUNT"  # tracked and priced per item


class StrainType(str, Enum):
    INDICA = "INDICA"
    SATIVA = "SATIVA"
    HYBRID = "HYBRID"


MASS_CATEGORIES = frozenset({ProductCategory.FLOWER, ProductCategory.EXTRACT})


def unit_kind_for(category: ProductCategory | str) -> UnitKind:
    """Flower and extracts are sold by weight; everything else by the piece."""
    return UnitKind.MASS if ProductCategory(category) in MASS_CATEGORIES else UnitKind.COUNT


class Product(db.Model):
    """
    Catalog entry sold against member wallets.

    STOCK: stock_quantity is grams for MASS products and items for COUNT
    products. It only goes down through a committed checkout; inventory
    edits may overwrite it.

    PRICE: price_cents is per gram or per item, matching the unit kind.
    Cart lines snapshot it, so later edits never reprice a cart.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
        db.Index("ix_products_category_name", "category", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(16), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    strain_type = db.Column(db.String(16), nullable=True)
    thc_percent = db.Column(db.Numeric(5, 2), nullable=True)
    cbd_percent = db.Column(db.Numeric(5, 2), nullable=True)

    stock_quantity = db.Column(db.Numeric(12, 3), nullable=False, default=Decimal("0"))
    price_cents = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    @property
    def unit_kind(self) -> UnitKind:
        return unit_kind_for(self.category)

    @property
    def unit_label(self) -> str:
        return "g" if self.unit_kind == UnitKind.MASS else "ud"

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} category={self.category}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit_kind": self.unit_kind.value,
            "description": self.description,
            "strain_type": self.strain_type,
            "thc_percent": float(self.thc_percent) if self.thc_percent is not None else None,
            "cbd_percent": float(self.cbd_percent) if self.cbd_percent is not None else None,
            "stock_quantity": float(self.stock_quantity),
            "price_cents": self.price_cents,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
