# projectinsight/services/projects/lifecycle.py
# =============================================================================
# Project lifecycle: creation, background generation, reads and section edits.
#
#   create() --> pending --> generating --success--> completed
#                                 |
#                                 +----failure----> error
#
# completed and error are terminal.  regenerate_section() rewrites one key of
# the analysis but never touches the status.  Every write replaces the whole
# document (read, mutate in memory, rewrite).
# =============================================================================
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as SchemaError

from projectinsight.errors import (
    InvalidStateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from projectinsight.models.analysis import AnalysisSection, empty_analysis
from projectinsight.models.project import (
    ALLOWED_TRANSITIONS,
    Project,
    ProjectStatus,
    normalize_record,
)
from projectinsight.services.analysis.client import AnalysisClient
from projectinsight.services.storage.json_store import JsonDocumentStore
from projectinsight.utils.helper import parse_iso, slugify, stringify, utc_now_iso
from projectinsight.utils.logger import get_logger
from .tasks import BackgroundTasks

logger = get_logger(__name__)

MIN_NAME_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10


def validate_submission(name: Any, description: Any) -> tuple[str, str]:
    """Trim and check the user's input; raises ``ValidationError``."""
    if not isinstance(name, str) or not isinstance(description, str):
        raise ValidationError("Name and description are required")
    name, description = name.strip(), description.strip()
    if not name or not description:
        raise ValidationError("Name and description are required")
    if len(name) < MIN_NAME_LENGTH or len(description) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Name must be at least {MIN_NAME_LENGTH} characters and description "
            f"at least {MIN_DESCRIPTION_LENGTH} characters"
        )
    return name, description


class ProjectLifecycleManager:
    """Owns the project status state machine on top of a document store."""

    def __init__(
        self,
        store: JsonDocumentStore,
        analysis_client: AnalysisClient,
        *,
        tasks: Optional[BackgroundTasks] = None,
    ) -> None:
        self.store = store
        self.analysis_client = analysis_client
        self.tasks = tasks or BackgroundTasks()

    # ============================ reads ============================ #
    async def _load(self, project_id: str) -> Project:
        """Read one record, migrating (and writing back) legacy documents."""
        raw = await self.store.get(project_id)
        if not isinstance(raw, dict):
            raise StorageError(f"Project document {project_id} is not a JSON object")

        record, migrated = normalize_record(raw)
        try:
            project = Project.model_validate(record)
        except SchemaError as e:
            raise StorageError(f"Project document {project_id} is invalid: {e}") from e

        if migrated:
            try:
                await self.store.put(project_id, project.to_document())
                logger.info("[projects] legacy record migrated | id=%s", project_id)
            except StorageError as e:
                # the record is still served; migration is retried on the next read
                logger.warning(
                    "[projects] legacy write-back failed | id=%s | err=%s", project_id, e
                )
        return project

    async def get_by_id(self, project_id: str) -> Project:
        try:
            return await self._load(project_id)
        except NotFoundError:
            raise NotFoundError(f"Project not found: {project_id}") from None

    async def list_projects(self) -> List[Project]:
        """All projects, newest first; unreadable records are skipped."""
        projects: List[Project] = []
        for key in await self.store.list_keys():
            try:
                projects.append(await self._load(key))
            except (StorageError, NotFoundError) as e:
                logger.error("[projects] skipping unreadable record | id=%s | err=%s", key, e)
        projects.sort(key=lambda p: parse_iso(p.created_at), reverse=True)
        return projects

    # ============================ writes ============================ #
    async def create(self, name: Any, description: Any) -> Project:
        name, description = validate_submission(name, description)

        project = Project(
            id=str(uuid.uuid4()),
            created_at=utc_now_iso(),
            status=ProjectStatus.PENDING,
            analysis=empty_analysis(name, description),
        )
        await self.store.put(project.id, project.to_document())
        logger.info("[projects] created | id=%s | name=%s", project.id, stringify(name, 80))

        # fire-and-forget: the caller only ever sees the pending record
        self.tasks.spawn(
            project.id, self._generate_in_background(project.id, name, description)
        )
        return project

    async def _transition(
        self,
        project_id: str,
        status: ProjectStatus,
        *,
        analysis: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> Project:
        project = await self.get_by_id(project_id)
        if status not in ALLOWED_TRANSITIONS[project.status]:
            raise InvalidStateError(
                f"Project {project_id} cannot move from {project.status.value} to {status.value}"
            )
        project.status = status
        if analysis is not None:
            project.analysis = analysis
        if error is not None:
            project.error = error
        await self.store.put(project_id, project.to_document())
        logger.info("[projects] status | id=%s | %s", project_id, status.value)
        return project

    async def _generate_in_background(
        self, project_id: str, name: str, description: str
    ) -> None:
        """Background task body. Failures end up on the record, never raised."""
        try:
            await self._transition(project_id, ProjectStatus.GENERATING)
            analysis = await self.analysis_client.generate(name, description)
            # analysis and status land in one write so "completed" always has it
            await self._transition(project_id, ProjectStatus.COMPLETED, analysis=analysis)
            logger.info("[projects] analysis completed | id=%s", project_id)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.exception("[projects] generation failed | id=%s", project_id)
            try:
                await self._transition(project_id, ProjectStatus.ERROR, error=message)
            except Exception:
                logger.exception("[projects] could not record failure | id=%s", project_id)

    async def regenerate_section(
        self, project_id: str, section_key: Any, hint: str = ""
    ) -> Project:
        """Replace one key of the stored analysis with freshly generated content."""
        project = await self.get_by_id(project_id)
        if project.analysis is None:
            raise InvalidStateError("Analysis not available for this project")
        section = AnalysisSection.from_key(section_key)

        value = await self.analysis_client.regenerate_section(
            project.analysis.get("name") or "",
            project.analysis.get("description") or "",
            section,
            hint or "",
        )

        # only the regenerated key is written over the latest stored record
        latest = await self.get_by_id(project_id)
        if latest.analysis is None:
            raise InvalidStateError("Analysis not available for this project")
        latest.analysis[section.value] = value
        await self.store.put(project_id, latest.to_document())
        logger.info("[projects] section regenerated | id=%s | section=%s", project_id, section.value)
        return latest

    async def generate_boilerplate(self, project_id: str) -> str:
        """Placeholder: describe where a boilerplate would be generated."""
        project = await self.get_by_id(project_id)
        if project.analysis is None:
            raise InvalidStateError("Analysis not available for this project")

        name = str(project.analysis.get("name") or "")
        result = (
            f'Boilerplate generated locally for "{name}" '
            f"at /workspaces/{slugify(name)}"
        )
        logger.info("[projects] boilerplate simulated | id=%s | %s", project_id, result)
        return result

    # ============================ runtime ============================ #
    def active_generations(self) -> int:
        return len(self.tasks)

    async def drain(self, timeout: Optional[float] = None) -> bool:
        return await self.tasks.drain(timeout)
