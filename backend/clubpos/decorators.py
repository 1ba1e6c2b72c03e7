# Overview: Request authentication and capability decorators for API routes.

from functools import wraps

from flask import current_app, g, jsonify, request

from .permissions import Capability, can
from .services import session_service


def _is_authenticated() -> bool:
    return hasattr(g, 'current_staff')


def require_auth(f):
    """
    Require a valid staff session.

    Sets on flask.g:
    - g.current_staff: the authenticated StaffUser
    - g.session_context: the full SessionContext

    Returns 401 if the Authorization header is missing, the token is
    invalid/expired, or the staff account has been deactivated.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]
        context = session_service.validate_session(token)

        if not context:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_staff = context.staff
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_capability(capability: Capability):
    """Require the current staff role to hold `capability` (see permissions.can)."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            staff = g.current_staff
            if not can(staff.role, capability):
                current_app.logger.info(
                    "Capability %s denied to staff %s (%s) on %s",
                    capability.value, staff.id, staff.role, request.path,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required_capability": capability.value,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
