# backend/clubpos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///clubpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Business day boundary for "today's sales"
    CLUBPOS_TIMEZONE = os.environ.get("CLUBPOS_TIMEZONE", "UTC")

    # Products at or below this stock level show up as dashboard alerts
    CLUBPOS_LOW_STOCK_THRESHOLD = int(os.environ.get("CLUBPOS_LOW_STOCK_THRESHOLD", "50"))

    CLUBPOS_CURRENCY = os.environ.get("CLUBPOS_CURRENCY", "EUR")

    CLUBPOS_SESSION_HOURS = int(os.environ.get("CLUBPOS_SESSION_HOURS", "12"))
