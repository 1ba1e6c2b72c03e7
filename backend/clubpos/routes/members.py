# Overview: Flask API routes for the member directory and wallet top-ups.

"""
Member routes.

- Registration and browsing require MANAGE_MEMBERS.
- Top-ups require TOP_UP_WALLET and always produce a DEPOSIT transaction.
- Balance is read-only here; it only moves through top-up and checkout.
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_capability
from ..models import Member
from ..permissions import Capability
from ..services.errors import PosError
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_member,
    validate_payload,
)
from .common import current_pos, parse_limit, pos_error_response

MEMBER_POLICY = ModelValidationPolicy(
    writable_fields={"full_name", "doc_type", "doc_number"},
    required_on_create={"full_name", "doc_number"},
)

members_bp = Blueprint("members", __name__, url_prefix="/api/members")


@members_bp.get("")
@require_auth
@require_capability(Capability.MANAGE_MEMBERS)
def list_members_route():
    """
    List members, or search them when ?q= is given.

    Query params:
    - q: name or document number fragment (returns at most `limit`, default 5)
    """
    pos = current_pos()
    term = request.args.get("q")
    if term is not None:
        limit = parse_limit(request.args.get("limit", type=int), default=5, maximum=50)
        members = pos.members.search(term, limit=limit)
    else:
        members = pos.members.list_members()
    return jsonify({"items": [m.to_dict() for m in members], "count": len(members)}), 200


@members_bp.post("")
@require_auth
@require_capability(Capability.MANAGE_MEMBERS)
def register_member_route():
    """
    Register a member with a zero balance.

    Body: {"full_name", "doc_number", "doc_type": DNI|NIE|PASSPORT (default DNI)}
    """
    pos = current_pos()
    try:
        data = validate_payload(Member, request.get_json(silent=True), MEMBER_POLICY, partial=False)
        data.setdefault("doc_type", "DNI")
        enforce_rules_member(data)
        member = pos.members.register(data["full_name"], data["doc_type"], data["doc_number"])
        pos.session.commit()
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        pos.session.rollback()
        return jsonify({"error": str(e)}), 409

    current_app.logger.info("Member %s registered by %s", member.id, g.current_staff.username)
    return jsonify({"member": member.to_dict()}), 201


@members_bp.get("/<int:member_id>")
@require_auth
@require_capability(Capability.MANAGE_MEMBERS)
def get_member_route(member_id: int):
    member = current_pos().members.get(member_id)
    if not member:
        return jsonify({"error": "Member not found"}), 404
    return jsonify({"member": member.to_dict()}), 200


@members_bp.post("/<int:member_id>/deposit")
@require_auth
@require_capability(Capability.TOP_UP_WALLET)
def deposit_route(member_id: int):
    """
    Credit a member wallet.

    Body: {"amount": "20.50"}  (currency units; must be > 0)
    Returns the DEPOSIT transaction and the updated member.
    """
    pos = current_pos()
    data = request.get_json(silent=True) or {}
    try:
        tx = pos.wallet.deposit(member_id, data.get("amount"), actor_staff_id=g.current_staff.id)
    except PosError as e:
        return pos_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to top up member %s", member_id)
        return jsonify({"error": "Internal server error"}), 500

    member = pos.members.require(member_id)
    current_app.logger.info(
        "Deposit %s of %s cents to member %s by %s",
        tx.id, tx.amount_cents, member_id, g.current_staff.username,
    )
    return jsonify({"transaction": tx.to_dict(), "member": member.to_dict()}), 201


@members_bp.get("/<int:member_id>/transactions")
@require_auth
@require_capability(Capability.VIEW_TRANSACTIONS)
def member_transactions_route(member_id: int):
    pos = current_pos()
    member = pos.members.get(member_id)
    if not member:
        return jsonify({"error": "Member not found"}), 404
    txs = pos.ledger.for_member(member_id)
    return jsonify({
        "member": member.to_dict(),
        "items": [t.to_dict() for t in txs],
        "count": len(txs),
    }), 200
