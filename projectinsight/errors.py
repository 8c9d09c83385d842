# projectinsight/errors.py
"""
Error taxonomy for ProjectInsight.

Every error carries an HTTP status and a short machine ``code`` so the
Quart error handler in :mod:`projectinsight` can render it without a
lookup table.  Background generation failures are never raised to a
caller; their message ends up on the project record instead.
"""

from __future__ import annotations


class ProjectInsightError(Exception):
    """Base class for all domain errors."""

    http_status: int = 500
    code: str = "internal_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(ProjectInsightError):
    """Bad user input (name/description length, unknown section key)."""

    http_status = 400
    code = "validation_error"


class NotFoundError(ProjectInsightError):
    http_status = 404
    code = "not_found"


class InvalidStateError(ProjectInsightError):
    """Operation needs prior state the project does not have yet."""

    http_status = 409
    code = "invalid_state"


class ConfigurationError(ProjectInsightError):
    """The analysis service credential is missing."""

    http_status = 503
    code = "configuration_error"


class StorageError(ProjectInsightError):
    http_status = 500
    code = "storage_error"


# ---------------- Analysis service ----------------
class AnalysisError(ProjectInsightError):
    """The analysis service could not produce a usable document."""

    http_status = 502
    code = "analysis_error"


class MalformedResponseError(AnalysisError):
    code = "malformed_response"


class IncompleteResponseError(AnalysisError):
    code = "incomplete_response"


class AnalysisServiceError(AnalysisError):
    """Transport-level failure talking to the LLM endpoint."""

    code = "analysis_service_error"
