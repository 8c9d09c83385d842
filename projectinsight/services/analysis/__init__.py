"""
Analysis services for ProjectInsight.

This package holds the client that asks the language model for a
structured business analysis of a project (business model, market,
SWOT, competitors, features, platforms and boilerplate instructions)
and the prompt templates it sends.
"""

from .client import AnalysisClient, validate_analysis
from .prompts import build_section_prompt, section_template

__all__ = [
    "AnalysisClient",
    "validate_analysis",
    "build_section_prompt",
    "section_template",
]
