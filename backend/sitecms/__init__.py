import logging
import os

from flask import Flask, abort, send_from_directory
from .config import BASE_DIR, config_by_name
from .extensions import db, migrate, jwt
from .celery_app import celery_init_app
from .utils.db import configure_database
from flask_swagger_ui import get_swaggerui_blueprint

OPENAPI_URL = "/openapi/cms.yaml"
OPENAPI_FILE = "cms_openapi.yaml"
SWAGGER_URL = "/swagger"


def configure_logging(app: Flask) -> None:
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("sitecms").setLevel(level)
    app.logger.setLevel(level)


def register_api_docs(app: Flask) -> None:
    """Public OpenAPI document plus a Swagger UI pointing at it (no tenant needed)."""
    docs_dir = os.path.join(app.root_path, "api", "v1")

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        if not os.path.exists(os.path.join(docs_dir, OPENAPI_FILE)):
            app.logger.error("%s is missing from %s", OPENAPI_FILE, docs_dir)
            abort(404)

        return send_from_directory(docs_dir, OPENAPI_FILE, mimetype="application/yaml")

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        OPENAPI_URL,
        config={
            "app_name": "Site CMS API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )
    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    configure_logging(app)
    configure_database(app)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(BASE_DIR, "migrations"))
    jwt.init_app(app)
    celery_init_app(app)

    # Register models with the metadata
    from .models import tenant, page, page_layout, site_setting, audit_log  # noqa: F401

    if app.config.get("DATABASE_MOCK_MODE"):
        with app.app_context():
            db.create_all()

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    from .middleware.tenant_middleware import tenant_middleware
    tenant_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    from .api.v1 import v1_bp
    from .errors import register_error_handlers
    from .cli import cms_cli

    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    app.cli.add_command(cms_cli)

    register_api_docs(app)

    app.logger.info("sitecms started with %s configuration", config_name)
    return app
