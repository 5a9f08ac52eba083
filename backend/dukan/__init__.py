# backend/dukan/__init__.py
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import Config
from .extensions import db, migrate


def create_app(test_config: dict | None = None) -> Flask:
    """
    Build the Dukan API.

    test_config is applied on top of Config before the extensions bind, so a
    test can point SQLALCHEMY_DATABASE_URI somewhere else.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # Fail at startup rather than on the first report request
    from .services.reporting_service import resolve_timezone
    resolve_timezone(app.config["REPORT_TIMEZONE"])

    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported before Alembic inspects metadata
    from . import models  # noqa: F401

    from .routes.system import system_bp
    from .routes.products import products_bp
    from .routes.sales import sales_bp
    from .routes.expenses import expenses_bp
    from .routes.reports import reports_bp

    for blueprint in (system_bp, products_bp, sales_bp, expenses_bp, reports_bp):
        app.register_blueprint(blueprint)

    @app.errorhandler(HTTPException)
    def json_http_error(exc):
        # The storefront only speaks JSON
        return jsonify({"error": exc.description}), exc.code

    allowed_origins = frozenset(app.config.get("CORS_ALLOWED_ORIGINS") or ())

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PATCH,DELETE,OPTIONS"
        return response

    from .cli import register_commands
    register_commands(app)

    return app
