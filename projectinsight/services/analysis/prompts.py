# projectinsight/services/analysis/prompts.py
from __future__ import annotations

import json
from typing import Any, Union

from projectinsight.models.analysis import (
    SECTION_EXAMPLES,
    AnalysisSection,
    example_analysis,
)
from projectinsight.utils.helper import truncate_by_tokens


ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert business analyst. Provide structured, actionable "
    "analyses as pure JSON."
)

SECTION_SYSTEM_PROMPT = (
    "You are an expert business analyst. You must regenerate one specific "
    "section while keeping exactly the same JSON structure."
)

MAX_HINT_TOKENS = 500


def _render(shape: Any) -> str:
    return json.dumps(shape, ensure_ascii=False, indent=2)


def section_template(section_key: Union[str, AnalysisSection]) -> str:
    """Expected JSON shape for one section; unknown keys raise ``ValidationError``."""
    section = AnalysisSection.from_key(section_key)
    return _render(SECTION_EXAMPLES[section])


def build_analysis_prompt(name: str, description: str, max_tokens: int = 1500) -> str:
    return f"""
Analyse this project and provide a complete structured analysis in JSON.

Project name: {truncate_by_tokens(name, max_tokens)}
Description: {truncate_by_tokens(description, max_tokens)}

Produce exactly this JSON structure (respect the keys and types):

{_render(example_analysis())}

Be concise but complete. Provide valid JSON only.
""".strip()


def build_section_prompt(
    section_key: Union[str, AnalysisSection],
    hint: str,
    name: str,
    description: str,
    max_tokens: int = 1500,
) -> str:
    section = AnalysisSection.from_key(section_key)
    hint = truncate_by_tokens((hint or "").strip(), MAX_HINT_TOKENS)
    return f"""
Regenerate ONLY the "{section.value}" section for this project.

Project name: {truncate_by_tokens(name, max_tokens)}
Original description: {truncate_by_tokens(description, max_tokens)}

Section to regenerate: {section.value}
User instructions: {hint or "[none]"}

Expected JSON structure for this section:
{section_template(section)}

IMPORTANT:
- Follow EXACTLY this JSON structure
- Every sentence must start with a capital letter
- Be concise but complete
- Provide only the JSON of the section, nothing else
""".strip()
