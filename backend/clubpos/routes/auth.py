# Overview: Flask API routes for staff login/logout; parses input and returns JSON responses.

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth
from ..services import auth_service, session_service
from .common import current_carts

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Staff login.

    Body: {"username": str, "password": str}
    Returns the staff profile (with capabilities) and a bearer token.
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not all([username, password]):
            return jsonify({"error": "username and password required"}), 400

        staff = auth_service.authenticate(username, password)
        if not staff:
            current_app.logger.info("Failed login for %r", username)
            return jsonify({"error": "Invalid credentials"}), 401

        session, token = session_service.create_session(staff.id)

        return jsonify({
            "staff": staff.to_dict(),
            "token": token,
            "session": session.to_dict(),
            "message": "Login successful"
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login staff")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the current token and drop its cart."""
    token = request.headers["Authorization"].split(" ", 1)[1]
    current_carts().discard(g.session_context.session.id)
    session_service.revoke_session(token)
    return jsonify({"message": "Logged out"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"staff": g.current_staff.to_dict()}), 200
