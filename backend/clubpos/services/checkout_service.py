# Overview: Checkout engine; validates a cart against balance and stock, then commits debit + stock + ledger as one unit.

"""
Checkout Engine

WHY: The only place a member wallet is debited for goods. Three stores
change together (member balance, product stock, ledger) or none do.

ORDER OF CHECKS (first failure wins, nothing is written before all pass):
1. cart has lines                          -> EmptyCartError
   every line quantity is positive         -> InvalidLineError
2. member exists                           -> UnknownMemberError
3. caller total matches recomputed total   -> TotalMismatchError
4. balance covers the total                -> InsufficientBalanceError
5. every product exists                    -> UnknownProductError
6. stock covers each product's quantity    -> InsufficientStockError

The total is always recomputed from the line snapshots; a caller-supplied
total is only cross-checked. Stock is re-validated under the same locks
that guard the commit, so stock never goes negative through a sale.
"""

from __future__ import annotations

from collections import OrderedDict
from decimal import Decimal
from typing import Callable, Iterable

from sqlalchemy.exc import SQLAlchemyError

from ..models import LedgerTransaction, TransactionKind
from clubpos.time_utils import utcnow
from .concurrency import KeyedLocks, member_key, product_key, run_with_retry
from .errors import (
    EmptyCartError,
    InsufficientBalanceError,
    InsufficientStockError,
    InvalidLineError,
    TotalMismatchError,
    UnknownProductError,
)


class CheckoutEngine:

    def __init__(
        self,
        session,
        catalog,
        members,
        ledger,
        locks: KeyedLocks,
        clock: Callable = utcnow,
    ):
        self.session = session
        self.catalog = catalog
        self.members = members
        self.ledger = ledger
        self.locks = locks
        self.clock = clock

    def checkout(
        self,
        member_id: int,
        lines: Iterable,
        total_cents: int | None = None,
        actor_staff_id: int | None = None,
    ) -> LedgerTransaction:
        """
        Commit a sale of `lines` to `member_id`'s wallet.

        Returns the committed PURCHASE transaction (receipt source). The
        caller owns the cart and should clear it after success.
        """
        lines = tuple(lines)
        if not lines:
            raise EmptyCartError("Cannot check out an empty cart")

        quantities: OrderedDict[int, Decimal] = OrderedDict()
        for line in lines:
            qty = Decimal(line.quantity)
            if not qty.is_finite() or qty <= 0:
                raise InvalidLineError(
                    "Line quantity must be greater than zero",
                    details={"product_id": line.product_id, "quantity": str(line.quantity)},
                )
            quantities[line.product_id] = quantities.get(line.product_id, Decimal("0")) + qty

        keys = [member_key(member_id)] + [product_key(pid) for pid in quantities]

        def _op():
            member = self.members.require(member_id)

            computed_total = sum(line.subtotal_cents for line in lines)
            if total_cents is not None and total_cents != computed_total:
                raise TotalMismatchError(
                    "Cart total does not match its lines",
                    details={"supplied_total_cents": total_cents, "computed_total_cents": computed_total},
                )

            if member.balance_cents < computed_total:
                raise InsufficientBalanceError(
                    "Insufficient wallet balance",
                    details={
                        "member_id": member.id,
                        "balance_cents": member.balance_cents,
                        "total_cents": computed_total,
                    },
                )

            products = self.catalog.get_many(quantities)
            missing = [pid for pid in quantities if pid not in products]
            if missing:
                raise UnknownProductError(
                    "Cart references products that are not in the catalog",
                    details={"product_ids": missing},
                )

            insufficient = []
            for pid, qty in quantities.items():
                on_hand = products[pid].stock_quantity
                if on_hand < qty:
                    insufficient.append({
                        "product_id": pid,
                        "requested_quantity": float(qty),
                        "on_hand": float(on_hand),
                    })
            if insufficient:
                raise InsufficientStockError(
                    "Insufficient stock to complete sale",
                    details={"items": insufficient},
                )

            try:
                self.members.debit(member, computed_total)
                for pid, qty in quantities.items():
                    self.catalog.decrement_stock(products[pid], qty)
                tx = self.ledger.append(
                    member=member,
                    kind=TransactionKind.PURCHASE,
                    amount_cents=computed_total,
                    items=lines,
                    actor_staff_id=actor_staff_id,
                    occurred_at=self.clock(),
                )
                self.session.commit()
            except SQLAlchemyError:
                self.session.rollback()
                raise
            return tx

        with self.locks.hold(*keys):
            return run_with_retry(_op, session=self.session)
