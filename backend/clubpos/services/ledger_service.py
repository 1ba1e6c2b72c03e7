# Overview: Append-only wallet ledger; the source of truth for balance history and sales totals.

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import case, func

from ..models import LedgerTransaction, LedgerTransactionItem, TransactionKind
from clubpos.time_utils import utcnow
"""
Wallet Ledger Invariants (authoritative)

- Append-only: one row per committed checkout or top-up, never updated or
  deleted (mapper guards raise LedgerImmutableError on flush).
- amount_cents > 0; direction comes from kind.
- For every member: balance_cents == sum(DEPOSIT) - sum(PURCHASE).
- Rows are written inside the same DB transaction as the balance change
  they record; append() flushes but never commits.
- "Most recent" means most recently appended (highest id).
"""


class Ledger:

    def __init__(self, session):
        self.session = session

    def append(
        self,
        *,
        member,
        kind: TransactionKind,
        amount_cents: int,
        items: Optional[Iterable] = None,
        actor_staff_id: int | None = None,
        occurred_at: Optional[datetime] = None,
    ) -> LedgerTransaction:
        """
        Append one transaction.

        - member: the Member being credited/debited (name is snapshotted).
        - items: CartLine-like objects; only meaningful for PURCHASE.
        """
        kind = TransactionKind(kind)
        tx = LedgerTransaction(
            member_id=member.id,
            member_name=member.full_name,
            kind=kind.value,
            amount_cents=amount_cents,
            actor_staff_id=actor_staff_id,
            occurred_at=occurred_at or utcnow(),
        )
        if kind == TransactionKind.PURCHASE:
            tx.items = [
                LedgerTransactionItem(
                    position=i,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price_cents=line.unit_price_cents,
                    subtotal_cents=line.subtotal_cents,
                )
                for i, line in enumerate(items or ())
            ]
        self.session.add(tx)
        self.session.flush()  # ensures tx.id is assigned without committing
        return tx

    def get(self, tx_id: int) -> LedgerTransaction | None:
        return self.session.query(LedgerTransaction).filter_by(id=tx_id).first()

    def recent(self, n: int) -> list[LedgerTransaction]:
        """The n most recently appended transactions, newest first."""
        if n <= 0:
            return []
        return (
            self.session.query(LedgerTransaction)
            .order_by(LedgerTransaction.id.desc())
            .limit(n)
            .all()
        )

    def query(
        self,
        *,
        member_id: int | None = None,
        kind: TransactionKind | str | None = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        before_id: int | None = None,
        limit: int = 100,
    ) -> list[LedgerTransaction]:
        """Filtered page, newest first. before_id is an exclusive id cursor."""
        q = self.session.query(LedgerTransaction)
        if member_id is not None:
            q = q.filter(LedgerTransaction.member_id == member_id)
        if kind is not None:
            q = q.filter(LedgerTransaction.kind == TransactionKind(kind).value)
        if since is not None:
            q = q.filter(LedgerTransaction.occurred_at >= since)
        if until is not None:
            q = q.filter(LedgerTransaction.occurred_at <= until)
        if before_id is not None:
            q = q.filter(LedgerTransaction.id < before_id)
        return q.order_by(LedgerTransaction.id.desc()).limit(limit).all()

    def for_member(self, member_id: int) -> list[LedgerTransaction]:
        return (
            self.session.query(LedgerTransaction)
            .filter_by(member_id=member_id)
            .order_by(LedgerTransaction.id.desc())
            .all()
        )

    def total_for_kind(self, kind: TransactionKind | str, since: Optional[datetime] = None) -> int:
        """Sum of amount_cents for one kind, optionally only occurred_at >= since."""
        q = self.session.query(func.coalesce(func.sum(LedgerTransaction.amount_cents), 0)).filter(
            LedgerTransaction.kind == TransactionKind(kind).value
        )
        if since is not None:
            q = q.filter(LedgerTransaction.occurred_at >= since)
        return int(q.scalar())

    def balance_from_history(self, member_id: int) -> int:
        """Deposits minus purchases for a member, as recorded in the ledger."""
        signed = case(
            (LedgerTransaction.kind == TransactionKind.DEPOSIT.value, LedgerTransaction.amount_cents),
            else_=-LedgerTransaction.amount_cents,
        )
        total = (
            self.session.query(func.coalesce(func.sum(signed), 0))
            .filter(LedgerTransaction.member_id == member_id)
            .scalar()
        )
        return int(total)
