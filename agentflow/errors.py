"""Error taxonomy for workflow optimization requests.

Each error maps to one HTTP status and a stable ``code`` string so that
callers can tell the failure kinds apart without parsing messages.
"""

INVALID_INPUT = "INVALID_INPUT"
SCHEMA_REFUSAL = "SCHEMA_REFUSAL"
OPENAI_ERROR = "OPENAI_ERROR"


class OptimizeError(Exception):
    """Base class for failures surfaced to the caller."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, str]:
        """Response body for this error."""
        return {"error": self.message, "code": self.code}


class InvalidInputError(OptimizeError):
    """The prompt was missing or blank; no model call was attempted."""

    code = INVALID_INPUT
    status_code = 400
    default_message = "prompt is required"


class SchemaRefusalError(OptimizeError):
    """The model answered but produced no schema-conformant workflow."""

    code = SCHEMA_REFUSAL
    status_code = 422
    default_message = "Model could not generate a valid workflow. Try rephrasing your prompt."


class UpstreamError(OptimizeError):
    """The model call itself failed (network, auth, quota, ...)."""

    code = OPENAI_ERROR
    status_code = 502
    default_message = "Failed to reach the AI service. Please try again."
