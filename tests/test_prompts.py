import json

import pytest

from projectinsight.errors import ValidationError
from projectinsight.models.analysis import SECTION_EXAMPLES, AnalysisSection
from projectinsight.services.analysis.prompts import (
    build_analysis_prompt,
    build_section_prompt,
    section_template,
)


@pytest.mark.parametrize("section", list(AnalysisSection))
def test_section_template_renders_the_section_shape(section: AnalysisSection) -> None:
    assert json.loads(section_template(section.value)) == SECTION_EXAMPLES[section]


def test_section_template_unknown_key_is_a_hard_failure() -> None:
    with pytest.raises(ValidationError):
        section_template("pricing")


def test_build_analysis_prompt_embeds_input_and_every_section() -> None:
    prompt = build_analysis_prompt("TaskFlow", "A task manager for remote teams")

    assert "Project name: TaskFlow" in prompt
    assert "Description: A task manager for remote teams" in prompt
    for section in AnalysisSection:
        assert f'"{section.value}"' in prompt


def test_build_section_prompt_contains_context_shape_and_hint() -> None:
    prompt = build_section_prompt(
        "swotAnalysis", "  focus on B2B  ", "TaskFlow", "A task manager for remote teams"
    )

    assert 'ONLY the "swotAnalysis" section' in prompt
    assert "Project name: TaskFlow" in prompt
    assert "Original description: A task manager for remote teams" in prompt
    assert "User instructions: focus on B2B" in prompt
    assert section_template(AnalysisSection.SWOT_ANALYSIS) in prompt


def test_build_section_prompt_without_hint() -> None:
    prompt = build_section_prompt("keyFeatures", "", "TaskFlow", "A task manager")
    assert "User instructions: [none]" in prompt


def test_build_section_prompt_unknown_key() -> None:
    with pytest.raises(ValidationError):
        build_section_prompt("description", "hint", "TaskFlow", "A task manager")
