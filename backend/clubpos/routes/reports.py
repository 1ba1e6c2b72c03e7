# Overview: Flask API routes for the dashboard and daily sales.

from flask import Blueprint, current_app, g, jsonify

from ..decorators import require_auth, require_capability
from ..permissions import Capability
from ..services import reporting_service
from .common import current_pos

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
@require_auth
@require_capability(Capability.VIEW_DASHBOARD)
def dashboard_route():
    """Sections are filtered by the caller's role capabilities."""
    summary = reporting_service.dashboard_summary(
        current_pos(),
        g.current_staff.role,
        low_stock_threshold=current_app.config["CLUBPOS_LOW_STOCK_THRESHOLD"],
        tz_name=current_app.config["CLUBPOS_TIMEZONE"],
    )
    return jsonify(summary), 200


@reports_bp.get("/daily-sales")
@require_auth
@require_capability(Capability.VIEW_FINANCIALS)
def daily_sales_route():
    total = reporting_service.todays_sales_cents(current_pos(), current_app.config["CLUBPOS_TIMEZONE"])
    return jsonify({
        "todays_sales_cents": total,
        "currency": current_app.config["CLUBPOS_CURRENCY"],
    }), 200
