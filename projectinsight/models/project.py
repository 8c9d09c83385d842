# projectinsight/models/project.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ProjectStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ProjectStatus.COMPLETED, ProjectStatus.ERROR)

    @property
    def is_active(self) -> bool:
        return self in (ProjectStatus.PENDING, ProjectStatus.GENERATING)


# pending -> error covers a failure before the "generating" write lands
ALLOWED_TRANSITIONS: Dict[ProjectStatus, Tuple[ProjectStatus, ...]] = {
    ProjectStatus.PENDING: (ProjectStatus.GENERATING, ProjectStatus.ERROR),
    ProjectStatus.GENERATING: (ProjectStatus.COMPLETED, ProjectStatus.ERROR),
    ProjectStatus.COMPLETED: (),
    ProjectStatus.ERROR: (),
}


class Project(BaseModel):
    """One persisted project document.

    Field names follow the on-disk camelCase keys through aliases; unknown
    keys found on disk are kept so a rewrite never drops them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    created_at: str = Field(alias="createdAt")
    status: ProjectStatus
    analysis: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(mode="json", by_alias=True)
        # "error" only exists on failed projects
        if doc.get("error") is None:
            doc.pop("error", None)
        return doc


def normalize_record(record: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """Upgrade a legacy record that predates the status field.

    Returns the (possibly updated) record and whether anything changed, so
    callers only write back when a migration actually happened.
    """
    if record.get("status"):
        return record, False

    migrated = dict(record)
    migrated["status"] = ProjectStatus.COMPLETED.value
    migrated.setdefault("analysis", None)
    return migrated, True
