# projectinsight/routes/projects.py
"""
Project API blueprint, mounted under ``/api/projects``.

Creating a project returns ``202`` right away with the pending record;
the analysis is produced in the background and clients poll
``GET /api/projects/<id>/status`` (or the full record) until the status
leaves ``pending``/``generating``.  Domain errors are rendered by the
error handler registered in the application factory.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel
from quart import Blueprint, Response, current_app, jsonify, url_for
from quart_schema import validate_request

from projectinsight.services.projects.lifecycle import ProjectLifecycleManager
from projectinsight.utils.logger import get_logger


logger = get_logger(__name__)
projects_bp = Blueprint("projects", __name__)


class ProjectIn(BaseModel):
    name: str
    description: str


class SectionHintIn(BaseModel):
    hint: str = ""


def _projects() -> ProjectLifecycleManager:
    return current_app.extensions["projects"]


@projects_bp.post("")
@validate_request(ProjectIn)
async def create_project(data: ProjectIn) -> Tuple[Response, int]:
    """Create a project and start its analysis in the background."""
    project = await _projects().create(data.name, data.description)
    payload = project.to_document()
    payload["status_url"] = url_for("projects.project_status", project_id=project.id)
    return jsonify(payload), 202


@projects_bp.get("")
async def list_projects() -> Response:
    projects = await _projects().list_projects()
    active = sum(1 for p in projects if p.status.is_active)
    return jsonify({"projects": [p.to_document() for p in projects], "active": active})


@projects_bp.get("/<project_id>")
async def get_project(project_id: str) -> Response:
    project = await _projects().get_by_id(project_id)
    return jsonify(project.to_document())


@projects_bp.get("/<project_id>/status")
async def project_status(project_id: str) -> Response:
    """Lightweight polling endpoint."""
    project = await _projects().get_by_id(project_id)
    return jsonify(
        {"id": project.id, "status": project.status.value, "error": project.error}
    )


@projects_bp.post("/<project_id>/sections/<section_key>")
@validate_request(SectionHintIn)
async def regenerate_section(
    project_id: str, section_key: str, data: SectionHintIn
) -> Response:
    logger.info(
        "[api] regenerate section | id=%s | section=%s | hint.len=%d",
        project_id,
        section_key,
        len(data.hint),
    )
    project = await _projects().regenerate_section(project_id, section_key, data.hint)
    return jsonify(project.to_document())


@projects_bp.post("/<project_id>/boilerplate")
async def generate_boilerplate(project_id: str) -> Response:
    message = await _projects().generate_boilerplate(project_id)
    return jsonify({"status": "success", "message": message})
