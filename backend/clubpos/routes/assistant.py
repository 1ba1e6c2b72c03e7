# Overview: Flask API route exposing the read-only catalog context for the assistant.

from flask import Blueprint, current_app, jsonify

from ..decorators import require_auth, require_capability
from ..permissions import Capability
from ..services import assistant_service
from .common import current_pos

assistant_bp = Blueprint("assistant", __name__, url_prefix="/api/assistant")


@assistant_bp.get("/context")
@require_auth
@require_capability(Capability.USE_ASSISTANT)
def inventory_context_route():
    products = current_pos().catalog.list_products()
    symbol = assistant_service.currency_symbol(current_app.config["CLUBPOS_CURRENCY"])
    return jsonify({
        "context": assistant_service.build_inventory_context(products, symbol),
        "product_count": len(products),
    }), 200
