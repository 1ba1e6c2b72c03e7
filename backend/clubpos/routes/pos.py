# Overview: Flask API routes for the POS cart and checkout; parses input and returns JSON responses.

"""
POS routes.

Each staff session owns one in-memory cart. The cart is bound to a member
before products can be added; checkout commits it through the checkout
engine and discards it.

Requires: USE_POS for every route.
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_capability
from ..permissions import Capability
from ..services.errors import NoMemberSelectedError, PosError
from ..validation import ValidationError, to_int
from .common import current_carts, current_pos, pos_error_response

pos_bp = Blueprint("pos", __name__, url_prefix="/api/pos")


def _cart_key():
    return g.session_context.session.id


def _cart_response(cart, status: int = 200):
    return jsonify({"cart": cart.to_dict()}), status


@pos_bp.get("/cart")
@require_auth
@require_capability(Capability.USE_POS)
def get_cart_route():
    return _cart_response(current_carts().get(_cart_key()))


@pos_bp.put("/cart/member")
@require_auth
@require_capability(Capability.USE_POS)
def select_member_route():
    """Body: {"member_id": int}. Switching to another member empties the cart."""
    data = request.get_json(silent=True) or {}
    member_id = data.get("member_id")
    if not isinstance(member_id, int) or isinstance(member_id, bool):
        return jsonify({"error": "member_id (integer) required"}), 400

    try:
        member = current_pos().members.require(member_id)
    except PosError as e:
        return pos_error_response(e)

    cart = current_carts().get(_cart_key())
    cart.bind_member(member)
    return jsonify({"cart": cart.to_dict(), "member": member.to_dict()}), 200


@pos_bp.delete("/cart/member")
@require_auth
@require_capability(Capability.USE_POS)
def clear_member_route():
    cart = current_carts().get(_cart_key())
    cart.unbind_member()
    return _cart_response(cart)


@pos_bp.post("/cart/lines")
@require_auth
@require_capability(Capability.USE_POS)
def add_line_route():
    """Body: {"product_id": int}. Adds one gram/unit (or bumps an existing line)."""
    data = request.get_json(silent=True) or {}
    product_id = data.get("product_id")
    if not isinstance(product_id, int) or isinstance(product_id, bool):
        return jsonify({"error": "product_id (integer) required"}), 400

    cart = current_carts().get(_cart_key())
    try:
        product = current_pos().catalog.require(product_id)
        cart.add_line(product)
    except PosError as e:
        return pos_error_response(e)
    return _cart_response(cart)


@pos_bp.patch("/cart/lines/<int:product_id>")
@require_auth
@require_capability(Capability.USE_POS)
def set_quantity_route(product_id: int):
    """Body: {"quantity": number}. Zero or less removes the line."""
    data = request.get_json(silent=True) or {}
    if "quantity" not in data:
        return jsonify({"error": "quantity required"}), 400

    cart = current_carts().get(_cart_key())
    try:
        cart.set_quantity(product_id, data["quantity"], current_pos().catalog)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except PosError as e:
        return pos_error_response(e)
    return _cart_response(cart)


@pos_bp.delete("/cart/lines/<int:product_id>")
@require_auth
@require_capability(Capability.USE_POS)
def remove_line_route(product_id: int):
    cart = current_carts().get(_cart_key())
    cart.remove_line(product_id)
    return _cart_response(cart)


@pos_bp.post("/checkout")
@require_auth
@require_capability(Capability.USE_POS)
def checkout_route():
    """
    Commit the current cart.

    Body (optional): {"total_cents": int} cross-checked against the cart. A
    plain digit string is accepted; anything else is a 400.
    Returns the PURCHASE transaction (receipt) and the member's new balance.
    """
    data = request.get_json(silent=True) or {}
    carts = current_carts()
    cart = carts.get(_cart_key())
    pos = current_pos()

    total_cents = data.get("total_cents")
    if total_cents is not None:
        try:
            total_cents = to_int(total_cents, "total_cents")
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

    try:
        if cart.member_id is None:
            raise NoMemberSelectedError("Select a member before checking out")
        tx = pos.checkout.checkout(
            cart.member_id,
            cart.lines,
            total_cents=total_cents,
            actor_staff_id=g.current_staff.id,
        )
    except PosError as e:
        return pos_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to check out cart")
        return jsonify({"error": "Internal server error"}), 500

    carts.discard(_cart_key())
    member = pos.members.require(tx.member_id)
    current_app.logger.info(
        "Checkout %s: %s cents, %s lines, member %s, staff %s",
        tx.id, tx.amount_cents, len(tx.items), tx.member_id, g.current_staff.username,
    )
    return jsonify({"transaction": tx.to_dict(), "member": member.to_dict()}), 201
