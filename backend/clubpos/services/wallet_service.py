# Overview: Wallet top-up; credits a member and records the matching DEPOSIT.

from __future__ import annotations

from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from ..models import LedgerTransaction, TransactionKind
from ..validation import MAX_STORABLE_CENTS, ValidationError, amount_to_cents
from clubpos.time_utils import utcnow
from .concurrency import KeyedLocks, member_key, run_with_retry
from .errors import InvalidAmountError


class WalletService:
    """
    Top-up path. Validate-then-commit over the member directory and the
    ledger. A deposit is bounded only by what a balance column can store.
    """

    def __init__(self, session, members, ledger, locks: KeyedLocks, clock: Callable = utcnow):
        self.session = session
        self.members = members
        self.ledger = ledger
        self.locks = locks
        self.clock = clock

    def deposit(self, member_id: int, amount, actor_staff_id: int | None = None) -> LedgerTransaction:
        """
        Credit `amount` (currency units, e.g. "20.50") to a member wallet.

        Raises InvalidAmountError unless amount is a finite number that is
        still positive once rounded to the cent. Also raised when the new
        balance would not fit in MAX_STORABLE_CENTS.
        """
        try:
            amount_cents = amount_to_cents(amount)
        except ValidationError as exc:
            raise InvalidAmountError(str(exc), details={"amount": str(amount)}) from exc
        if amount_cents <= 0:
            raise InvalidAmountError(
                "amount must be greater than zero",
                details={"amount": str(amount)},
            )
        if amount_cents > MAX_STORABLE_CENTS:
            raise InvalidAmountError(
                "amount exceeds the largest storable balance",
                details={"amount": str(amount)},
            )

        def _op():
            member = self.members.require(member_id)
            if member.balance_cents + amount_cents > MAX_STORABLE_CENTS:
                raise InvalidAmountError(
                    "deposit would exceed the largest storable balance",
                    details={"amount": str(amount), "balance_cents": member.balance_cents},
                )
            try:
                self.members.credit(member, amount_cents)
                tx = self.ledger.append(
                    member=member,
                    kind=TransactionKind.DEPOSIT,
                    amount_cents=amount_cents,
                    actor_staff_id=actor_staff_id,
                    occurred_at=self.clock(),
                )
                self.session.commit()
            except SQLAlchemyError:
                self.session.rollback()
                raise
            return tx

        with self.locks.hold(member_key(member_id)):
            return run_with_retry(_op, session=self.session)
