from __future__ import annotations

from enum import Enum

from sqlalchemy import event
from sqlalchemy.orm import object_session

from ..extensions import db
from clubpos.time_utils import to_utc_z, utcnow
from clubpos.services.errors import LedgerImmutableError


class TransactionKind(str, Enum):
    DEPOSIT = "DEPOSIT"
    PURCHASE = "PURCHASE"


class LedgerTransaction(db.Model):
    """
    One balance-affecting event for a member.

    INVARIANTS:
    - amount_cents is always positive; the sign comes from kind
      (DEPOSIT credits, PURCHASE debits).
    - member_name is a snapshot taken at commit time.
    - items exist only for PURCHASE.
    - Rows are written once and never updated or deleted (enforced by the
      flush guards below).
    """
    __tablename__ = "ledger_transactions"
    __table_args__ = (
        db.CheckConstraint("amount_cents > 0", name="ck_ledger_amount_positive"),
        db.Index("ix_ledger_member_occurred", "member_id", "occurred_at"),
        db.Index("ix_ledger_kind_occurred", "kind", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=False, index=True)
    member_name = db.Column(db.String(255), nullable=False)

    kind = db.Column(db.String(16), nullable=False)
    amount_cents = db.Column(db.Integer, nullable=False)

    actor_staff_id = db.Column(db.Integer, db.ForeignKey("staff_users.id"), nullable=True)
    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    items = db.relationship(
        "LedgerTransactionItem",
        backref="transaction",
        lazy="selectin",
        order_by="LedgerTransactionItem.position",
    )

    @property
    def signed_amount_cents(self) -> int:
        return self.amount_cents if self.kind == TransactionKind.DEPOSIT.value else -self.amount_cents

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "member_id": self.member_id,
            "member_name": self.member_name,
            "kind": self.kind,
            "amount_cents": self.amount_cents,
            "signed_amount_cents": self.signed_amount_cents,
            "actor_staff_id": self.actor_staff_id,
            "occurred_at": to_utc_z(self.occurred_at),
        }
        if self.kind == TransactionKind.PURCHASE.value:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class LedgerTransactionItem(db.Model):
    """Cart line snapshot attached to a PURCHASE."""
    __tablename__ = "ledger_transaction_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey("ledger_transactions.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)

    product_id = db.Column(db.Integer, nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    subtotal_cents = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": float(self.quantity),
            "unit_price_cents": self.unit_price_cents,
            "subtotal_cents": self.subtotal_cents,
        }


def _reject_update(mapper, connection, target):
    # before_update fires for any dirty instance; only real column changes count
    session = object_session(target)
    if session is not None and not session.is_modified(target, include_collections=False):
        return
    raise LedgerImmutableError(
        f"{type(target).__name__} {target.id} is immutable",
        details={"id": target.id},
    )


def _reject_delete(mapper, connection, target):
    raise LedgerImmutableError(
        f"{type(target).__name__} {target.id} cannot be deleted",
        details={"id": target.id},
    )


for _model in (LedgerTransaction, LedgerTransactionItem):
    event.listen(_model, "before_update", _reject_update)
    event.listen(_model, "before_delete", _reject_delete)
