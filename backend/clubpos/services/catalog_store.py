# Overview: Catalog store; product lookup, inventory edits and stock decrements.

from __future__ import annotations

from decimal import Decimal

from ..models import Product, ProductCategory
from .errors import UnknownProductError

PRODUCT_MUTABLE_FIELDS = {
    "name", "category", "description", "strain_type",
    "thc_percent", "cbd_percent", "stock_quantity", "price_cents",
}


class CatalogStore:
    """
    Products available for sale.

    Reads are free for anyone holding the store. Writes come from exactly two
    places: inventory edits (create/update, which may overwrite stock) and
    the checkout engine (decrement_stock). Nothing here commits; the caller
    owns the transaction.
    """

    def __init__(self, session):
        self.session = session

    def get(self, product_id: int) -> Product | None:
        return self.session.query(Product).filter_by(id=product_id).first()

    def require(self, product_id: int) -> Product:
        product = self.get(product_id)
        if product is None:
            raise UnknownProductError(
                f"Product {product_id} not found",
                details={"product_id": product_id},
            )
        return product

    def get_many(self, product_ids) -> dict[int, Product]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.session.query(Product).filter(Product.id.in_(ids)).all()
        return {p.id: p for p in rows}

    def list_products(self, search: str | None = None, category: str | None = None) -> list[Product]:
        """Products ordered by name, optionally filtered by name substring and category."""
        q = self.session.query(Product)
        if search:
            q = q.filter(Product.name.ilike(f"%{search.strip()}%"))
        if category:
            q = q.filter(Product.category == ProductCategory(category.upper()).value)
        return q.order_by(Product.name.asc(), Product.id.asc()).all()

    def low_stock(self, threshold) -> list[Product]:
        return (
            self.session.query(Product)
            .filter(Product.stock_quantity < threshold)
            .order_by(Product.stock_quantity.asc(), Product.name.asc())
            .all()
        )

    def total_stock(self) -> Decimal:
        total = Decimal("0")
        for (qty,) in self.session.query(Product.stock_quantity).all():
            total += qty
        return total

    def create(self, **fields) -> Product:
        product = Product(**{k: v for k, v in fields.items() if k in PRODUCT_MUTABLE_FIELDS})
        self.session.add(product)
        self.session.flush()
        return product

    def update(self, product_id: int, patch: dict) -> Product:
        product = self.require(product_id)
        for k, v in patch.items():
            if k not in PRODUCT_MUTABLE_FIELDS:
                continue
            setattr(product, k, v)
        self.session.flush()
        return product

    def decrement_stock(self, product: Product, quantity: Decimal) -> None:
        """Checkout-only path that lowers stock. Sufficiency is the caller's check."""
        product.stock_quantity = Decimal(product.stock_quantity) - Decimal(quantity)
