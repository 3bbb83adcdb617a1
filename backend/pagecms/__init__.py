import logging
import os

from flask import Flask, abort, current_app, send_from_directory
from flask_swagger_ui import get_swaggerui_blueprint

from .config import config_by_name
from .extensions import db, migrate
from .errors import register_error_handlers

SWAGGER_URL = "/swagger"
OPENAPI_URL = "/openapi/cms.yaml"
OPENAPI_FILE = "cms_openapi.yaml"


def _configure_logging(app: Flask) -> None:
    # Framework-free modules log through their own module loggers
    level = logging.DEBUG if app.debug else logging.INFO
    logging.getLogger("pagecms").setLevel(level)
    app.logger.setLevel(level)


def _register_api_docs(app: Flask) -> None:
    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        docs_dir = os.path.join(current_app.root_path, "api", "v1")
        if not os.path.exists(os.path.join(docs_dir, OPENAPI_FILE)):
            abort(404, description=f"{OPENAPI_FILE} not found")
        return send_from_directory(docs_dir, OPENAPI_FILE, mimetype="application/yaml")

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        OPENAPI_URL,
        config={"app_name": "Page CMS API", "deepLinking": True},
    )
    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    _configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Route modules import the models, so migrations see the tables
    from .api.v1 import v1_bp

    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    _register_api_docs(app)

    app.logger.info("pagecms app created (config=%s)", config_name)
    return app
