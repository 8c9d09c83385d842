# projectinsight/models/analysis.py
"""
Shape of the analysis document.

``SECTION_EXAMPLES`` is the single source of truth for every section's
shape: the prompt templates render it as JSON, and the empty skeleton a
new project starts with is derived from it by blanking every leaf.
"""

from __future__ import annotations

from copy import deepcopy
from enum import Enum
from typing import Any, Dict

from projectinsight.errors import ValidationError


class AnalysisSection(str, Enum):
    """Regenerable sections of the analysis document (name/description excluded)."""

    BUSINESS_MODEL = "businessModel"
    MARKET_ANALYSIS = "marketAnalysis"
    SWOT_ANALYSIS = "swotAnalysis"
    COMPETITORS_ANALYSIS = "competitorsAnalysis"
    KEY_FEATURES = "keyFeatures"
    STRENGTHS_WEAKNESSES = "strengthsWeaknesses"
    RECOMMENDED_PLATFORMS = "recommendedPlatforms"
    BOILERPLATE_INSTRUCTIONS = "boilerplateInstructions"

    @classmethod
    def from_key(cls, key: Any) -> "AnalysisSection":
        try:
            return cls(key)
        except (ValueError, TypeError):
            valid = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Unknown analysis section {key!r}. Expected one of: {valid}"
            ) from None


SECTION_EXAMPLES: Dict[AnalysisSection, Any] = {
    AnalysisSection.BUSINESS_MODEL: {
        "revenueStreams": ["stream1", "stream2", "stream3"],
        "pricingStrategy": {
            "tiers": [
                {
                    "name": "Plan name",
                    "price": "Price (e.g. $29 per month)",
                    "features": ["feature1", "feature2"],
                }
            ]
        },
    },
    AnalysisSection.MARKET_ANALYSIS: {
        "marketSize": "Market size with figures",
        "trends": ["trend1", "trend2", "trend3"],
        "opportunities": ["opportunity1", "opportunity2"],
    },
    AnalysisSection.SWOT_ANALYSIS: {
        "strengths": ["strength1", "strength2", "strength3"],
        "weaknesses": ["weakness1", "weakness2"],
        "opportunities": ["opportunity1", "opportunity2", "opportunity3"],
        "threats": ["threat1", "threat2", "threat3"],
    },
    AnalysisSection.COMPETITORS_ANALYSIS: {
        "mainCompetitors": [
            {
                "name": "Competitor name",
                "strengths": ["strength1", "strength2"],
                "weaknesses": ["weakness1", "weakness2"],
            }
        ],
        "positioning": "Strategic positioning of the project",
    },
    AnalysisSection.KEY_FEATURES: [
        "Main feature 1",
        "Main feature 2",
        "Main feature 3",
        "Main feature 4",
    ],
    AnalysisSection.STRENGTHS_WEAKNESSES: {
        "strengths": ["Product strength1", "Product strength2"],
        "weaknesses": ["Product weakness1", "Product weakness2"],
    },
    AnalysisSection.RECOMMENDED_PLATFORMS: {
        "Web": {"justification": "Why web"},
        "Mobile": {"justification": "Why mobile"},
        "Desktop": {"justification": "Why desktop"},
    },
    AnalysisSection.BOILERPLATE_INSTRUCTIONS: {
        "setup": "Setup instructions",
        "backend": "Backend instructions",
        "deployment": "Deployment instructions",
        "versionControl": "Version control instructions",
    },
}


def _blank(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _blank(v) for k, v in value.items()}
    if isinstance(value, list):
        return []
    if isinstance(value, str):
        return ""
    return None


def empty_section(section: AnalysisSection) -> Any:
    return _blank(deepcopy(SECTION_EXAMPLES[section]))


def empty_analysis(name: str, description: str) -> Dict[str, Any]:
    """Skeleton with every nested field present and every array empty."""
    doc: Dict[str, Any] = {"name": name, "description": description}
    for section in AnalysisSection:
        doc[section.value] = empty_section(section)
    return doc


def example_analysis() -> Dict[str, Any]:
    """Full document example embedded in the generation prompt."""
    doc: Dict[str, Any] = {
        "name": "exact project name",
        "description": "exact project description",
    }
    for section in AnalysisSection:
        doc[section.value] = deepcopy(SECTION_EXAMPLES[section])
    return doc
