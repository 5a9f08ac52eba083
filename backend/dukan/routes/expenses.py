# Overview: Flask API routes for expense operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..services import expense_service, reporting_service
from ..validation import ValidationError


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.post("")
def add_expense_route():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        expense = expense_service.add_expense(
            amount=data.get("amount"),
            description=data.get("description"),
            category=data.get("category"),
        )
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to add expense")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"expense": expense.to_dict()}), 201


@expenses_bp.get("")
def expense_report():
    """Daily expense totals. Query params: startDate, endDate (YYYY-MM-DD)."""
    try:
        report = reporting_service.daily_expense_report(
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            timezone=current_app.config["REPORT_TIMEZONE"],
        )
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(report), 200
