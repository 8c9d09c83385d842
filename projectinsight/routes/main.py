# projectinsight/routes/main.py
from __future__ import annotations

from projectinsight.utils.logger import get_logger
from quart import Blueprint, current_app, jsonify


logger = get_logger(__name__)
main_bp = Blueprint("main", __name__)


@main_bp.get("/health")
async def health():
    """Service health: storage location, LLM configuration and running generations."""
    analysis_client = current_app.extensions["analysis_client"]
    projects = current_app.extensions["projects"]
    return jsonify(
        {
            "status": "ok",
            "env": current_app.config["ENV"],
            "llm_configured": analysis_client.configured,
            "llm_model": analysis_client.settings.llm_model,
            "storage": projects.store.describe(),
            "active_generations": projects.active_generations(),
        }
    ), 200
