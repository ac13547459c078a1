"""Error types shared by the gateway and the session tracker."""


class AnalysisError(Exception):
    """Base error for a failed meal analysis, mapped to an HTTP status."""

    status_code = 500
    default_message = "Failed to analyze image"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        """Return the user-facing message."""
        return str(self)


class ValidationError(AnalysisError):
    """Missing or invalid caller input; the caller must fix it before retrying."""

    status_code = 400
    default_message = "Invalid request"


class UpstreamFormatError(AnalysisError):
    """The model reply did not contain a parseable JSON object."""

    default_message = "Invalid response format from OpenAI"


class UpstreamError(AnalysisError):
    """Transport, auth or rate-limit failure reported by the model provider."""


class GatewayRequestError(Exception):
    """A tracker-side call to the analysis gateway failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
