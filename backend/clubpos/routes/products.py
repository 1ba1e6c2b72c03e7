# Overview: Flask API routes for the catalog; inventory edits and browsing.

"""
Product routes.

- Read operations require VIEW_INVENTORY
- Write operations require EDIT_INVENTORY (they may overwrite stock/price)
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_capability
from ..models import Product, ProductCategory
from ..permissions import Capability
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    validate_payload,
)
from .common import current_pos

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "category", "description", "strain_type",
        "thc_percent", "cbd_percent", "stock_quantity", "price_cents",
    },
    required_on_create={"name", "category", "stock_quantity", "price_cents"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_capability(Capability.VIEW_INVENTORY)
def list_products_route():
    """
    Query params:
    - q: name fragment
    - category: FLOWER|EXTRACT|EDIBLE|ACCESSORY|DRINK
    """
    category = request.args.get("category")
    if category and category.upper() not in {c.value for c in ProductCategory}:
        return jsonify({"error": "Unknown category"}), 400

    products = current_pos().catalog.list_products(search=request.args.get("q"), category=category)
    return jsonify({"items": [p.to_dict() for p in products], "count": len(products)}), 200


@products_bp.get("/<int:product_id>")
@require_auth
@require_capability(Capability.VIEW_INVENTORY)
def get_product_route(product_id: int):
    product = current_pos().catalog.get(product_id)
    if not product:
        return jsonify({"error": "Product not found"}), 404
    return jsonify({"product": product.to_dict()}), 200


@products_bp.post("")
@require_auth
@require_capability(Capability.EDIT_INVENTORY)
def create_product_route():
    pos = current_pos()
    try:
        data = validate_payload(Product, request.get_json(silent=True), PRODUCT_POLICY, partial=False)
        enforce_rules_product(data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    product = pos.catalog.create(**data)
    pos.session.commit()
    current_app.logger.info("Product %s created by %s", product.id, g.current_staff.username)
    return jsonify({"product": product.to_dict()}), 201


@products_bp.patch("/<int:product_id>")
@require_auth
@require_capability(Capability.EDIT_INVENTORY)
def update_product_route(product_id: int):
    pos = current_pos()
    if not pos.catalog.get(product_id):
        return jsonify({"error": "Product not found"}), 404
    try:
        data = validate_payload(Product, request.get_json(silent=True), PRODUCT_POLICY, partial=True)
        enforce_rules_product(data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    product = pos.catalog.update(product_id, data)
    pos.session.commit()
    current_app.logger.info("Product %s edited by %s: %s", product_id, g.current_staff.username, sorted(data))
    return jsonify({"product": product.to_dict()}), 200
