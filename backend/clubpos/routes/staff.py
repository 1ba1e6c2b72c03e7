# Overview: Flask API routes for staff management; parses input and returns JSON responses.

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth, require_capability
from ..permissions import Capability
from ..services import auth_service
from ..services.auth_service import PasswordValidationError, StaffError, StaffNotFoundError

staff_bp = Blueprint("staff", __name__, url_prefix="/api/staff")


@staff_bp.get("")
@require_auth
@require_capability(Capability.MANAGE_STAFF)
def list_staff_route():
    staff = auth_service.list_staff()
    return jsonify({"items": [s.to_dict() for s in staff], "count": len(staff)}), 200


@staff_bp.post("")
@require_auth
@require_capability(Capability.MANAGE_STAFF)
def create_staff_route():
    """
    Create staff account.

    Body: {"username", "name", "password", "role": ADMIN|INVENTORY|SALES}
    """
    data = request.get_json(silent=True) or {}
    try:
        staff = auth_service.create_staff(
            username=data.get("username"),
            name=data.get("name"),
            password=data.get("password"),
            role=data.get("role", "SALES"),
        )
    except (StaffError, PasswordValidationError) as e:
        return jsonify({"error": str(e)}), 400

    current_app.logger.info("Staff %s created by %s", staff.username, g.current_staff.username)
    return jsonify({"staff": staff.to_dict()}), 201


@staff_bp.patch("/<int:staff_id>")
@require_auth
@require_capability(Capability.MANAGE_STAFF)
def update_staff_route(staff_id: int):
    data = request.get_json(silent=True) or {}
    unknown = set(data) - {"name", "role", "password", "is_active"}
    if unknown:
        return jsonify({"error": f"Unknown or read-only fields: {', '.join(sorted(unknown))}"}), 400
    try:
        staff = auth_service.update_staff(staff_id, **data)
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400
    except StaffNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except StaffError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"staff": staff.to_dict()}), 200


@staff_bp.delete("/<int:staff_id>")
@require_auth
@require_capability(Capability.MANAGE_STAFF)
def delete_staff_route(staff_id: int):
    try:
        auth_service.delete_staff(staff_id)
    except StaffNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except StaffError as e:
        return jsonify({"error": str(e)}), 400

    current_app.logger.info("Staff %s removed by %s", staff_id, g.current_staff.username)
    return jsonify({"message": "Staff user removed"}), 200
