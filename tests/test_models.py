import pytest

from projectinsight.errors import ValidationError
from projectinsight.models.analysis import (
    SECTION_EXAMPLES,
    AnalysisSection,
    empty_analysis,
    example_analysis,
)
from projectinsight.models.project import (
    ALLOWED_TRANSITIONS,
    Project,
    ProjectStatus,
    normalize_record,
)

TOP_LEVEL_KEYS = [
    "name",
    "description",
    "businessModel",
    "marketAnalysis",
    "swotAnalysis",
    "competitorsAnalysis",
    "keyFeatures",
    "strengthsWeaknesses",
    "recommendedPlatforms",
    "boilerplateInstructions",
]


def _arrays(value, path=""):
    if isinstance(value, dict):
        for k, v in value.items():
            yield from _arrays(v, f"{path}.{k}")
    elif isinstance(value, list):
        yield path, value


def test_empty_analysis_has_every_key_and_only_empty_arrays() -> None:
    doc = empty_analysis("TaskFlow", "A task manager for teams")

    assert list(doc) == TOP_LEVEL_KEYS
    assert doc["name"] == "TaskFlow"
    arrays = dict(_arrays(doc))
    assert ".keyFeatures" in arrays
    assert ".businessModel.pricingStrategy.tiers" in arrays
    assert ".swotAnalysis.threats" in arrays
    assert all(v == [] for v in arrays.values())
    assert doc["recommendedPlatforms"]["Mobile"] == {"justification": ""}


def test_empty_analysis_does_not_share_state_with_examples() -> None:
    doc = empty_analysis("a", "b")
    doc["keyFeatures"].append("x")
    assert empty_analysis("a", "b")["keyFeatures"] == []
    assert SECTION_EXAMPLES[AnalysisSection.KEY_FEATURES][0] == "Main feature 1"


def test_example_analysis_uses_fixed_key_set() -> None:
    assert list(example_analysis()) == TOP_LEVEL_KEYS


def test_section_from_key() -> None:
    assert AnalysisSection.from_key("keyFeatures") is AnalysisSection.KEY_FEATURES
    with pytest.raises(ValidationError, match="Unknown analysis section"):
        AnalysisSection.from_key("name")


def test_normalize_legacy_record() -> None:
    record = {"id": "p1", "createdAt": "2024-01-01T00:00:00.000Z"}

    migrated, changed = normalize_record(record)

    assert changed is True
    assert migrated["status"] == "completed"
    assert migrated["analysis"] is None
    assert "status" not in record


def test_normalize_current_record_is_untouched() -> None:
    record = {"id": "p1", "createdAt": "x", "status": "pending", "analysis": None}
    same, changed = normalize_record(record)
    assert changed is False
    assert same is record


def test_project_document_uses_camel_case_and_omits_empty_error() -> None:
    project = Project(
        id="p1", created_at="2024-01-01T00:00:00.000Z", status=ProjectStatus.PENDING
    )
    assert project.to_document() == {
        "id": "p1",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "status": "pending",
        "analysis": None,
    }


def test_project_keeps_unknown_keys() -> None:
    project = Project.model_validate(
        {"id": "p1", "createdAt": "t", "status": "error", "analysis": None, "error": "boom", "owner": "me"}
    )
    doc = project.to_document()
    assert doc["owner"] == "me"
    assert doc["error"] == "boom"


def test_terminal_states_have_no_transitions() -> None:
    for status in ProjectStatus:
        assert status.is_terminal == (ALLOWED_TRANSITIONS[status] == ())
