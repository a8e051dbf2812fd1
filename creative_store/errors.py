"""Classified pipeline errors.

Every error carries the wire ``code`` and the HTTP status the handlers answer
with. Messages are always the underlying failure's message, unchanged.
"""


class PipelineError(Exception):
    """Base class for classified failures surfaced as ``{error, code}``."""

    code = "AI_ERROR"
    status_code = 500

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class AIError(PipelineError):
    """A downstream AI or image call failed."""

    code = "AI_ERROR"


class ResearchError(AIError):
    """Brief research stage failed; no extraction was attempted."""

    stage = "research"


class ExtractionError(AIError):
    """Brief extraction stage failed after research succeeded."""

    stage = "extraction"


class MissingApiKeyError(PipelineError):
    """A required credential is not configured."""

    code = "MISSING_API_KEY"


class ValidationError(PipelineError):
    """Request rejected before any external work was dispatched."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(PipelineError):
    """Referenced record does not exist."""

    code = "not_found"
    status_code = 404
