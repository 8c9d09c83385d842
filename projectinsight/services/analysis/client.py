# projectinsight/services/analysis/client.py
"""
Analysis client: one LLM call per analysis (or per regenerated section).

Each step fails with its own error kind:

  credential check   -> ConfigurationError
  LLM call           -> AnalysisServiceError
  JSON extraction    -> MalformedResponseError
  minimal validation -> IncompleteResponseError

Nested sections are not deep-validated; renderers must tolerate missing
or empty fields.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator
from openai import OpenAIError

from projectinsight.config import ServiceConfigs
from projectinsight.errors import (
    AnalysisServiceError,
    ConfigurationError,
    IncompleteResponseError,
    MalformedResponseError,
)
from projectinsight.models.analysis import SECTION_EXAMPLES, AnalysisSection
from projectinsight.services.llm_chain.llm_chains import LLMChains
from projectinsight.services.llm_chain.llm_utils import (
    parse_json_block,
    shape_system,
    shape_user,
)
from projectinsight.utils.helper import stringify
from projectinsight.utils.logger import get_logger
from .prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    SECTION_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_section_prompt,
)

logger = get_logger(__name__)

# only the identity fields are checked; everything else is trusted as-is
ANALYSIS_MIN_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "description"],
    "properties": {
        "name": {"type": "string", "pattern": r"\S"},
        "description": {"type": "string", "pattern": r"\S"},
    },
}
_validator = Draft202012Validator(ANALYSIS_MIN_SCHEMA)


def validate_analysis(doc: Any) -> Dict[str, Any]:
    errors = sorted(_validator.iter_errors(doc), key=lambda e: list(e.path))
    if errors:
        detail = "; ".join(
            f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}"
            for e in errors
        )
        raise IncompleteResponseError(
            f"Incomplete analysis received from the analysis service ({detail})"
        )
    return doc


class AnalysisClient:
    def __init__(
        self,
        settings: ServiceConfigs,
        *,
        llm: Optional[LLMChains] = None,
    ) -> None:
        self.settings = settings
        self._llm = llm

    @property
    def configured(self) -> bool:
        return bool(self.settings.api_key)

    def _require_llm(self) -> LLMChains:
        if not self.configured:
            raise ConfigurationError("LLM_API_KEY (or OPENAI_API_KEY) is not configured")
        if self._llm is None:
            self._llm = LLMChains.from_settings(self.settings)
        return self._llm

    async def _complete(self, messages: List[Dict[str, Any]], max_tokens: int) -> str:
        llm = self._require_llm()
        try:
            text = await llm.chat_completions_text(messages, max_tokens=max_tokens)
        except asyncio.TimeoutError:
            raise AnalysisServiceError(
                f"Analysis service timed out after {llm.request_timeout:.0f}s"
            ) from None
        except OpenAIError as e:
            logger.warning("[analysis] LLM call failed: %s", e)
            raise AnalysisServiceError(f"Analysis service error: {e}") from e

        if not text:
            raise MalformedResponseError("No response received from the analysis service")
        return text

    async def generate(self, name: str, description: str) -> Dict[str, Any]:
        """Produce a full analysis document for a project."""
        messages = [
            shape_system(ANALYSIS_SYSTEM_PROMPT),
            shape_user(
                build_analysis_prompt(
                    name, description, max_tokens=self.settings.max_prompt_tokens
                )
            ),
        ]
        logger.info("[analysis] generate start | name=%s", stringify(name, 80))
        text = await self._complete(messages, self.settings.analysis_max_tokens)
        doc = validate_analysis(parse_json_block(text, "{"))
        logger.info("[analysis] generate done | keys=%d", len(doc))
        return doc

    async def regenerate_section(
        self,
        name: str,
        description: str,
        section: AnalysisSection,
        hint: str,
    ) -> Any:
        """Produce a fresh value for a single section."""
        prompt = build_section_prompt(
            section, hint, name, description, max_tokens=self.settings.max_prompt_tokens
        )
        messages = [shape_system(SECTION_SYSTEM_PROMPT), shape_user(prompt)]
        logger.info("[analysis] section start | section=%s", section.value)
        text = await self._complete(messages, self.settings.section_max_tokens)

        opener = "[" if isinstance(SECTION_EXAMPLES[section], list) else "{"
        try:
            value = parse_json_block(text, opener)
        except MalformedResponseError:
            if opener == "{":
                raise
            # list sections sometimes come back wrapped in an object
            value = parse_json_block(text, "{")

        # {"keyFeatures": [...]} -> [...]
        if isinstance(value, dict) and list(value) == [section.value]:
            value = value[section.value]
        return value

    async def aclose(self) -> None:
        if self._llm is not None:
            await self._llm.aclose()
            self._llm = None
