from __future__ import annotations

from enum import Enum

from ..extensions import db
from clubpos.time_utils import to_utc_z, utcnow


class DocumentType(str, Enum):
    DNI = "DNI"
    NIE = "NIE"
    PASSPORT = "PASSPORT"


class Member(db.Model):
    """
    Club member holding a prepaid wallet.

    WALLET: balance_cents only changes through the wallet top-up and the
    checkout engine, each of which appends exactly one ledger transaction
    for the same amount. Never assign it from anywhere else.
    """
    __tablename__ = "members"
    __table_args__ = (
        db.UniqueConstraint("doc_number", name="uq_members_doc_number"),
        db.Index("ix_members_full_name", "full_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(255), nullable=False)
    doc_type = db.Column(db.String(16), nullable=False, default=DocumentType.DNI.value)
    doc_number = db.Column(db.String(64), nullable=False)

    balance_cents = db.Column(db.Integer, nullable=False, default=0)

    joined_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Member id={self.id} name={self.full_name!r} balance_cents={self.balance_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "doc_type": self.doc_type,
            "doc_number": self.doc_number,
            "balance_cents": self.balance_cents,
            "joined_at": to_utc_z(self.joined_at),
            "is_active": self.is_active,
        }
