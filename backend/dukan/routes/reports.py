from flask import Blueprint, current_app, jsonify, request

from ..services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api")

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Surrogate-Control": "no-store",
}


@reports_bp.get("/reports")
def sales_report():
    """
    Daily sales and profit.

    Query params: startDate, endDate (YYYY-MM-DD). Both omitted means the
    last 7 days including today in the report timezone.
    """
    try:
        report = reporting_service.daily_sales_report(
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            timezone=current_app.config["REPORT_TIMEZONE"],
        )
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(report), 200, NO_STORE_HEADERS


@reports_bp.get("/dashboard")
def dashboard():
    try:
        snapshot = reporting_service.dashboard_snapshot(
            timezone=current_app.config["REPORT_TIMEZONE"],
        )
    except Exception:
        current_app.logger.exception("Failed to load dashboard statistics")
        return jsonify({"error": "Failed to load dashboard statistics"}), 500

    return jsonify(snapshot), 200, NO_STORE_HEADERS
