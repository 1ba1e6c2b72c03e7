# Overview: Member directory; registration, lookup and wallet balance mutation.

from __future__ import annotations

from sqlalchemy import or_

from ..models import Member
from ..validation import ConflictError
from .errors import UnknownMemberError
from clubpos.time_utils import utcnow


class MemberDirectory:
    """
    Members and their wallet balances.

    credit()/debit() are the only balance mutations and are meant to be
    called by the wallet service and the checkout engine, each of which
    pairs the change with a ledger transaction. Nothing here commits.
    """

    def __init__(self, session):
        self.session = session

    def get(self, member_id: int) -> Member | None:
        return self.session.query(Member).filter_by(id=member_id).first()

    def require(self, member_id: int) -> Member:
        member = self.get(member_id)
        if member is None:
            raise UnknownMemberError(
                f"Member {member_id} not found",
                details={"member_id": member_id},
            )
        return member

    def list_members(self) -> list[Member]:
        return self.session.query(Member).order_by(Member.joined_at.desc(), Member.id.desc()).all()

    def count(self) -> int:
        return self.session.query(Member).count()

    def search(self, term: str, limit: int = 5) -> list[Member]:
        """Case-insensitive match on name or document number (POS member picker)."""
        term = (term or "").strip()
        if not term:
            return []
        pattern = f"%{term}%"
        return (
            self.session.query(Member)
            .filter(or_(Member.full_name.ilike(pattern), Member.doc_number.ilike(pattern)))
            .order_by(Member.full_name.asc(), Member.id.asc())
            .limit(limit)
            .all()
        )

    def register(self, full_name: str, doc_type: str, doc_number: str) -> Member:
        existing = self.session.query(Member).filter_by(doc_number=doc_number).first()
        if existing:
            raise ConflictError(f"A member with document {doc_number} already exists")

        member = Member(
            full_name=full_name,
            doc_type=doc_type,
            doc_number=doc_number,
            balance_cents=0,
            joined_at=utcnow(),
            is_active=True,
        )
        self.session.add(member)
        self.session.flush()
        return member

    def credit(self, member: Member, amount_cents: int) -> None:
        member.balance_cents = member.balance_cents + amount_cents

    def debit(self, member: Member, amount_cents: int) -> None:
        member.balance_cents = member.balance_cents - amount_cents
