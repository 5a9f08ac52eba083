# Overview: Flask API routes for products operations; parses input and returns JSON responses.
"""
Product catalog routes.

Duplicate product numbers/names are reported as 400, like other input errors,
because the storefront treats both as "fix the form and resubmit".
"""
from flask import Blueprint, current_app, jsonify, request

from ..models import Product
from ..services import inventory_service
from ..services.inventory_service import ProductNotFoundError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    ConflictError,
)

PRODUCT_POLICY = ModelValidationPolicy(
    fields={
        "productNumber": "product_number",
        "name": "name",
        "category": "category",
        "costPrice": "cost_price_cents",
        "retailPrice": "retail_price_cents",
        "wholesalePrice": "wholesale_price_cents",
        "stock": "stock",
        "unit": "unit",
    },
    required_on_create={"productNumber", "name", "category", "costPrice", "retailPrice", "stock"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List all products, newest first.

    Query params:
    - sort: "desc" (default) or "asc" by creation time
    """
    sort = request.args.get("sort", "desc").lower()
    if sort not in ("asc", "desc"):
        return jsonify({"error": "sort must be asc or desc"}), 400

    products = inventory_service.list_products(sort=sort)
    return jsonify([p.to_dict() for p in products]), 200


@products_bp.post("")
def create_product_route():
    """Create a new product."""
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        product = inventory_service.create_product(patch=patch)
    except (ValidationError, ConflictError) as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"product": product.to_dict()}), 201


@products_bp.get("/search")
def search_products_route():
    """Search by product number (case-insensitive substring)."""
    query = (request.args.get("q") or "").strip()
    if not query:
        return jsonify({"error": "Product number query parameter 'q' is required."}), 400

    products = inventory_service.search_products(query)
    if not products:
        return jsonify({"error": "No products found matching the product number."}), 404

    return jsonify([p.to_dict() for p in products]), 200


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    try:
        product = inventory_service.find_by_id(product_id)
    except ProductNotFoundError:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict()), 200


@products_bp.patch("/<int:product_id>")
def update_product_route(product_id: int):
    """Edit prices, correct stock, or rename a product."""
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        product = inventory_service.update_product(product_id=product_id, patch=patch)
    except ProductNotFoundError:
        return jsonify({"error": "Product not found"}), 404
    except (ValidationError, ConflictError) as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"product": product.to_dict()}), 200


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    """Hard-delete a product. Past sales keep their snapshots."""
    try:
        deleted = inventory_service.delete_product(product_id=product_id)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Internal server error"}), 500

    if not deleted:
        return jsonify({"error": "Product not found"}), 404

    return jsonify({"ok": True}), 200
