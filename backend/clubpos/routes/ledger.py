# Overview: Flask API routes for ledger reads; parses input and returns JSON responses.

from flask import Blueprint, jsonify, request

from ..decorators import require_auth, require_capability
from ..models import TransactionKind
from ..permissions import Capability
from clubpos.time_utils import parse_iso_datetime
from .common import current_pos, parse_limit

"""
Time semantics:
- API accepts ISO-8601 datetimes with Z/offsets; backend normalizes to UTC-naive internally.
- start_date/end_date filtering is inclusive.
- Pagination is by id cursor: pass next_cursor back as ?before_id=.
"""

ledger_bp = Blueprint("ledger", __name__, url_prefix="/api/transactions")


@ledger_bp.get("")
@require_auth
@require_capability(Capability.VIEW_TRANSACTIONS)
def list_transactions_route():
    limit = parse_limit(request.args.get("limit", type=int), default=50)

    kind = request.args.get("kind")
    if kind is not None:
        try:
            kind = TransactionKind(kind.upper())
        except ValueError:
            return jsonify({"error": "kind must be DEPOSIT or PURCHASE"}), 400

    try:
        start_dt = parse_iso_datetime(request.args.get("start_date"))
        end_dt = parse_iso_datetime(request.args.get("end_date"))
    except ValueError:
        return jsonify({"error": "start_date and end_date must be ISO-8601 datetimes"}), 400

    rows = current_pos().ledger.query(
        member_id=request.args.get("member_id", type=int),
        kind=kind,
        since=start_dt,
        until=end_dt,
        before_id=request.args.get("before_id", type=int),
        limit=limit,
    )

    next_cursor = rows[-1].id if len(rows) == limit else None
    return jsonify({
        "items": [r.to_dict() for r in rows],
        "next_cursor": next_cursor,
        "limit": limit,
    }), 200


@ledger_bp.get("/<int:tx_id>")
@require_auth
@require_capability(Capability.VIEW_TRANSACTIONS)
def get_transaction_route(tx_id: int):
    """Single transaction, e.g. to re-print a receipt."""
    tx = current_pos().ledger.get(tx_id)
    if not tx:
        return jsonify({"error": "Transaction not found"}), 404
    return jsonify({"transaction": tx.to_dict()}), 200
