# projectinsight/extensions.py
from __future__ import annotations

from quart import Quart

from .config import ServiceConfigs
from .utils.logger import get_logger
from .services.analysis.client import AnalysisClient
from .services.projects.lifecycle import ProjectLifecycleManager
from .services.storage.json_store import JsonDocumentStore


async def init_extensions(app: Quart) -> None:
    """Initialise the storage, analysis and lifecycle singletons.

    Called once by the application factory.  The objects are stored on
    ``app.extensions`` and looked up by the blueprints per request.
    """

    logger = get_logger(__name__)

    # Load service configuration from environment (via pydantic)
    service_configs = ServiceConfigs()
    app.extensions["service_configs"] = service_configs

    # Without a key the app still serves reads; generations end in "error"
    if not service_configs.api_key:
        logger.warning(
            "LLM_API_KEY is empty. Projects can be created but their analysis will fail."
        )
    logger.info(
        "ServiceConfigs loaded: model=%s base_url=%s",
        service_configs.llm_model,
        service_configs.llm_base_url,
    )

    store = JsonDocumentStore(app.config["PROJECTS_DIR"])
    app.extensions["projects_store"] = store
    logger.info("Project store ready at %s", store.base_dir)

    analysis_client = AnalysisClient(service_configs)
    app.extensions["analysis_client"] = analysis_client

    app.extensions["projects"] = ProjectLifecycleManager(store, analysis_client)
    logger.info("ProjectLifecycleManager initialised")


async def shutdown_extensions(app: Quart) -> None:
    """Let in-flight generations finish (bounded), then release the LLM client."""
    logger = get_logger(__name__)

    projects: ProjectLifecycleManager | None = app.extensions.get("projects")
    if projects is not None:
        finished = await projects.drain(app.config["BACKGROUND_DRAIN_TIMEOUT"])
        logger.info("Background generations drained (all finished=%s)", finished)

    analysis_client: AnalysisClient | None = app.extensions.get("analysis_client")
    if analysis_client is not None:
        await analysis_client.aclose()
        logger.info("AnalysisClient closed")
