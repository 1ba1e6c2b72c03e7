# Overview: Per-session cart; line math and the per-line stock ceiling.

"""
Cart Rules

- One line per product. Re-adding a product bumps its quantity by one
  (gram or unit) and keeps the price captured on first add.
- A line's subtotal is always quantity x price snapshot, rounded half-up
  to the cent. The cart total is recomputed on every read.
- An out-of-stock product cannot be added. Stock is checked against the
  live catalog when a quantity is set, but nothing is reserved. Checkout re-checks stock inside its commit region.
- A cart belongs to one member at a time; switching member empties it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from decimal import Decimal

from ..validation import line_subtotal_cents, parse_quantity
from .errors import (
    CartLineNotFoundError,
    InsufficientStockError,
    NoMemberSelectedError,
    UnknownProductError,
)

DEFAULT_INCREMENT = Decimal("1")


@dataclass(frozen=True)
class CartLine:
    product_id: int
    product_name: str
    quantity: Decimal
    unit_price_cents: int

    @property
    def subtotal_cents(self) -> int:
        return line_subtotal_cents(self.quantity, self.unit_price_cents)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": float(self.quantity),
            "unit_price_cents": self.unit_price_cents,
            "subtotal_cents": self.subtotal_cents,
        }


class Cart:

    def __init__(self):
        self.member_id: int | None = None
        self.member_name: str | None = None
        self._lines: dict[int, CartLine] = {}

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def total_cents(self) -> int:
        return sum(line.subtotal_cents for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: int) -> CartLine | None:
        return self._lines.get(product_id)

    def bind_member(self, member) -> None:
        """Attach the cart to a member. A different member starts from an empty cart."""
        if self.member_id is not None and self.member_id != member.id:
            self.clear()
        self.member_id = member.id
        self.member_name = member.full_name

    def unbind_member(self) -> None:
        self.member_id = None
        self.member_name = None
        self.clear()

    def add_line(self, product) -> CartLine:
        if self.member_id is None:
            raise NoMemberSelectedError("Select a member before adding products")
        if product.stock_quantity <= 0:
            raise InsufficientStockError(
                "Product is out of stock",
                details={"product_id": product.id, "on_hand": float(product.stock_quantity)},
            )

        existing = self._lines.get(product.id)
        if existing is not None:
            line = replace(existing, quantity=existing.quantity + DEFAULT_INCREMENT)
        else:
            line = CartLine(
                product_id=product.id,
                product_name=product.name,
                quantity=DEFAULT_INCREMENT,
                unit_price_cents=product.price_cents,
            )
        self._lines[product.id] = line
        return line

    def set_quantity(self, product_id: int, new_quantity, catalog) -> CartLine | None:
        """
        Set a line's quantity. Returns the updated line, or None if it was removed.

        The line is left untouched when the request exceeds current stock.
        """
        new_quantity = parse_quantity(new_quantity)
        if new_quantity <= 0:
            self.remove_line(product_id)
            return None

        existing = self._lines.get(product_id)
        if existing is None:
            raise CartLineNotFoundError(
                f"Product {product_id} is not in the cart",
                details={"product_id": product_id},
            )

        product = catalog.get(product_id)
        if product is None:
            raise UnknownProductError(
                f"Product {product_id} not found",
                details={"product_id": product_id},
            )

        if new_quantity > product.stock_quantity:
            raise InsufficientStockError(
                f"Only {product.stock_quantity} {product.unit_label} of {product.name} available",
                details={
                    "product_id": product_id,
                    "requested_quantity": float(new_quantity),
                    "on_hand": float(product.stock_quantity),
                },
            )

        line = replace(existing, quantity=new_quantity)
        self._lines[product_id] = line
        return line

    def remove_line(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "member_name": self.member_name,
            "lines": [line.to_dict() for line in self._lines.values()],
            "total_cents": self.total_cents,
        }


class CartRegistry:
    """
    One in-memory cart per checkout session (keyed by staff session id).

    Carts are ephemeral working sets; they are dropped on checkout, member
    switch or logout and never persisted.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._carts: dict = {}

    def get(self, key) -> Cart:
        with self._lock:
            cart = self._carts.get(key)
            if cart is None:
                cart = self._carts[key] = Cart()
            return cart

    def discard(self, key) -> None:
        with self._lock:
            self._carts.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)

    def clear(self) -> None:
        with self._lock:
            self._carts.clear()
