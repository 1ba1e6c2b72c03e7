# Overview: Shared helpers for route modules (store wiring, error translation).

from flask import current_app, jsonify

from ..extensions import db
from ..services.errors import InvariantViolation, PosError, RuleViolation
from ..services.pos import PointOfSale


def current_pos() -> PointOfSale:
    """Stores and engines for this request, sharing the app-wide keyed locks."""
    return PointOfSale(session=db.session, locks=current_app.extensions["clubpos_locks"])


def current_carts():
    return current_app.extensions["clubpos_carts"]


def pos_error_response(exc: PosError):
    """
    Rule violations are ordinary rejections (400). Invariant violations mean
    the caller referenced something that does not exist (422).
    """
    if isinstance(exc, InvariantViolation):
        current_app.logger.warning("Invariant violation: %s %s", exc.code, exc.details)
        return jsonify(exc.to_dict()), 422
    if isinstance(exc, RuleViolation):
        return jsonify(exc.to_dict()), 400
    return jsonify(exc.to_dict()), 400


def parse_limit(value, default: int = 50, maximum: int = 500) -> int:
    if value is None:
        return default
    return max(1, min(value, maximum))
