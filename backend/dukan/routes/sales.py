# Overview: Flask API routes for sales operations; parses input and returns JSON responses.
"""Sales API routes"""

from flask import Blueprint, current_app, jsonify, request

from ..services import sales_service
from ..services.inventory_service import InventoryError
from ..services.sales_service import SaleError


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def commit_sale_route():
    """
    Commit a cart as a sale.

    Body: {"items": [{"productId", "quantity", "price"}], "paymentMethod": "Cash" | "Card"}

    Empty carts, unknown products and short stock are 400s with details;
    nothing is written in any failure case.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        sale = sales_service.commit_sale(data.get("items"), data.get("paymentMethod"))
    except (SaleError, InventoryError) as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to commit sale")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"sale": sale.to_dict()}), 201


@sales_bp.get("")
def list_sales_route():
    """Recent sales, newest first. Query params: limit (default 50, max 500)."""
    limit = request.args.get("limit", 50, type=int)
    sales = sales_service.list_sales(limit=limit)
    return jsonify([sale.to_dict() for sale in sales]), 200


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    """Get a sale with its line items (invoice view)."""
    sale = sales_service.get_sale(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404

    return jsonify({"sale": sale.to_dict()}), 200
