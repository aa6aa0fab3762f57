"""
Error taxonomy for the generation pipeline.
Each error knows its HTTP status and machine-readable code so the app-level
exception handler can render a well-formed JSON body without a stack trace.
"""

from typing import Optional


EXCERPT_LENGTH = 200


class GenerationError(Exception):
    """Base class for every failure scoped to one generation request."""

    status_code = 500
    error_code = "INTERNAL_ERROR"
    public_message = "Internal server error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.public_message)
        self.detail = detail

    def to_response(self) -> dict:
        return {"message": self.public_message, "error": self.error_code}


class InvalidInputError(GenerationError):
    status_code = 400
    error_code = "MISSING_MESSAGE"
    public_message = "Input message required"


class ModelUnavailableError(GenerationError):
    """Network failure, bad credentials or provider-side rejection."""

    status_code = 503
    error_code = "UPSTREAM_UNAVAILABLE"
    public_message = "Model provider unavailable"

    def __init__(self, detail: str = "", status: Optional[int] = None):
        super().__init__(detail)
        self.status = status
        # Filled in by the pipeline once it knows which stage failed
        self.stage: Optional[str] = None

    def to_response(self) -> dict:
        body = super().to_response()
        if self.stage:
            body["stage"] = self.stage
        return body


class ModelTimeoutError(ModelUnavailableError):
    status_code = 504
    error_code = "UPSTREAM_TIMEOUT"
    public_message = "Model provider timed out"


class MalformedPlanError(GenerationError):
    """
    The planner's completion could not be turned into a valid Plan.
    reason is "parse" when the text is not JSON at all and "schema" when it
    parses but breaks the component/prop rules.
    """

    status_code = 502
    error_code = "MALFORMED_PLAN"
    public_message = "Model returned a malformed plan"

    def __init__(self, reason: str, detail: str, raw: str = ""):
        super().__init__(detail)
        self.reason = reason
        self.raw_length = len(raw)
        self.excerpt = raw[:EXCERPT_LENGTH]

    def to_response(self) -> dict:
        body = super().to_response()
        body.update(
            {
                "reason": self.reason,
                "detail": self.detail,
                "raw_length": self.raw_length,
            }
        )
        return body
