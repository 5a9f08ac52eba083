# backend/dukan/routes/system.py
"""
Health check for deployments.

GET /health answers 200 when the store database answers a trivial query and
503 otherwise; the body carries row counts so an empty database after a
botched deploy is easy to spot.
"""

from time import perf_counter

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Expense, Product, Sale
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def _row_counts() -> dict:
    return {
        name: db.session.query(func.count(model.id)).scalar()
        for name, model in (("products", Product), ("sales", Sale), ("expenses", Expense))
    }


def database_status() -> dict:
    started = perf_counter()
    try:
        db.session.execute(text("SELECT 1"))
        counts = _row_counts()
    except SQLAlchemyError:
        current_app.logger.exception("Health check could not reach the database")
        db.session.rollback()
        return {"ok": False, "error": "Database error"}
    return {
        "ok": True,
        "latencyMs": round((perf_counter() - started) * 1000, 2),
        "counts": counts,
    }


@system_bp.get("/health")
def health():
    database = database_status()
    body = {
        "status": "healthy" if database["ok"] else "unhealthy",
        "timestamp": to_utc_z(utcnow()),
        "reportTimezone": current_app.config["REPORT_TIMEZONE"],
        "database": database,
    }
    return jsonify(body), 200 if database["ok"] else 503
