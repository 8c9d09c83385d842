# projectinsight/__init__.py
from __future__ import annotations

import os
from quart import Quart
from quart_schema import QuartSchema, RequestSchemaValidationError

from .config import get_config
from .errors import ProjectInsightError
from .utils.helper import response_error
from .utils.logger import get_logger
from .extensions import init_extensions, shutdown_extensions
from .routes.main import main_bp
from .routes.projects import projects_bp


async def create_app(config_object: object | None = None) -> Quart:
    """Application factory for the ProjectInsight Quart app.

    Args:
        config_object: Optional explicit configuration class.  If not
            provided, the value of the ``APP_ENV`` environment variable
            is used to determine which configuration class to load via
            :func:`get_config`.  See :mod:`projectinsight.config` for details.

    Returns:
        A fully configured :class:`quart.Quart` application instance.
    """

    app = Quart(__name__, instance_relative_config=True)

    QuartSchema(app)

    env = os.environ.get("APP_ENV", "default")
    if config_object:
        app.config.from_object(config_object)
    else:
        app.config.from_object(get_config(env))

    # keep the analysis document's key order in responses
    app.json.sort_keys = False  # type: ignore[attr-defined]

    logger = get_logger("quart.app")
    logger.info(f"Starting ProjectInsight app in {app.config['ENV']} mode")

    await init_extensions(app)
    logger.info("Extensions initialized successfully")

    @app.after_serving
    async def _cleanup():
        await shutdown_extensions(app)
        logger.info("Extensions shutdown successfully")

    @app.errorhandler(ProjectInsightError)
    async def _domain_error(error: ProjectInsightError):
        if error.http_status >= 500:
            logger.error("[app] %s: %s", error.code, error.message)
        return response_error(error.code, error.message, error.http_status)

    @app.errorhandler(RequestSchemaValidationError)
    async def _schema_error(error: RequestSchemaValidationError):
        return response_error("invalid_request", str(error.validation_error), 400)

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(projects_bp, url_prefix="/api/projects")
    logger.info("Blueprints registered")

    return app
