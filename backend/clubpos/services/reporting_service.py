# Overview: Dashboard aggregation over the catalog, member directory and ledger.

from __future__ import annotations

from datetime import datetime

from ..models import TransactionKind
from ..permissions import Capability, can
from clubpos.time_utils import start_of_business_day, to_utc_z, utcnow

RECENT_TRANSACTIONS = 5


def todays_sales_cents(pos, tz_name: str = "UTC", now: datetime | None = None) -> int:
    """PURCHASE total since local midnight of the business day."""
    since = start_of_business_day(now or pos.clock(), tz_name)
    return pos.ledger.total_for_kind(TransactionKind.PURCHASE, since=since)


def dashboard_summary(
    pos,
    role,
    *,
    low_stock_threshold=50,
    tz_name: str = "UTC",
    now: datetime | None = None,
) -> dict:
    """
    Dashboard sections visible to `role`.

    Sections a role may not see are omitted entirely. Transaction amounts
    are only included for roles that can view financials.
    """
    now = now or utcnow()
    summary: dict = {
        "generated_at": to_utc_z(now),
        "total_stock": float(pos.catalog.total_stock()),
    }

    if can(role, Capability.MANAGE_MEMBERS):
        summary["total_members"] = pos.members.count()

    if can(role, Capability.VIEW_FINANCIALS):
        summary["todays_sales_cents"] = todays_sales_cents(pos, tz_name, now=now)

    if can(role, Capability.VIEW_TRANSACTIONS):
        show_amounts = can(role, Capability.VIEW_FINANCIALS)
        recent = []
        for tx in pos.ledger.recent(RECENT_TRANSACTIONS):
            row = {
                "id": tx.id,
                "member_name": tx.member_name,
                "kind": tx.kind,
                "occurred_at": to_utc_z(tx.occurred_at),
            }
            if show_amounts:
                row["signed_amount_cents"] = tx.signed_amount_cents
            recent.append(row)
        summary["recent_transactions"] = recent

    if can(role, Capability.VIEW_STOCK_ALERTS):
        summary["low_stock"] = [
            {
                "id": p.id,
                "name": p.name,
                "stock_quantity": float(p.stock_quantity),
                "unit": p.unit_label,
            }
            for p in pos.catalog.low_stock(low_stock_threshold)
        ]

    return summary
