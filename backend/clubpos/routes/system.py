# Overview: Flask API routes for system health.

from flask import Blueprint, jsonify
from sqlalchemy import text

from ..extensions import db
from clubpos.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.get("/health")
def health():
    db.session.execute(text("SELECT 1"))
    return jsonify({"status": "ok", "time": to_utc_z(utcnow())}), 200
