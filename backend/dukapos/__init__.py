# backend/dukapos/__init__.py
from flask import Flask, request
from sqlalchemy import inspect
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import DomainError, error_response, internal_error_response
from .extensions import db, migrate


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp, merchants_bp
    from .routes.business import business_bp
    from .routes.products import products_bp
    from .routes.categories import categories_bp
    from .routes.customers import customers_bp
    from .routes.expenses import expenses_bp
    from .routes.sales import sales_bp
    from .routes.analytics import analytics_bp
    from .routes.platform import platform_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(merchants_bp)
    app.register_blueprint(business_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(platform_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    @app.errorhandler(DomainError)
    def handle_domain_error(exc):
        return error_response(exc)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return {"error": exc.name.replace(" ", ""), "message": exc.description}, exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        db.session.rollback()
        return internal_error_response()

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    # Bootstrap the platform owner once the schema exists
    with app.app_context():
        if app.config.get("SUPER_ADMIN_BOOTSTRAP", True):
            if inspect(db.engine).has_table("users"):
                from .services.auth_service import ensure_super_admin
                ensure_super_admin()
            else:
                app.logger.warning("users table missing; run 'flask system init' or 'flask db upgrade'")

    return app
