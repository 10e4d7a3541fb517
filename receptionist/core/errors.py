"""Error taxonomy shared by the request handlers.

Every error carries the HTTP status it maps to. The API layer renders all
of them as ``{"error": message}`` so callers always receive well-formed JSON.
"""


class ReceptionistError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict:
        return {"error": self.message}


class AuthError(ReceptionistError):
    """Missing or invalid bearer credential."""

    status_code = 401


class ForbiddenError(ReceptionistError):
    """Authenticated caller lacks the required role."""

    status_code = 403


class NotFoundError(ReceptionistError):
    status_code = 404


class ValidationError(ReceptionistError):
    """Malformed request body, echoed back to the form."""

    status_code = 400


class RateLimitError(ReceptionistError):
    """Caller exceeded the per-IP request window."""

    status_code = 429

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class ConfigurationError(ReceptionistError):
    """Operator-facing misconfiguration, e.g. a clinic without store coordinates."""

    status_code = 500


class StoreQueryError(ReceptionistError):
    """The spreadsheet store returned a non-success response."""

    status_code = 500

    def __init__(self, upstream_status: int, body: str) -> None:
        super().__init__(f"Airtable API error: {upstream_status} - {body}")
        self.upstream_status = upstream_status
        self.body = body


class ProviderError(ReceptionistError):
    """The voice provider rejected a request."""

    def __init__(self, message: str, upstream_status: int, details: object = None) -> None:
        super().__init__(message)
        self.status_code = upstream_status
        self.details = details

    def to_content(self) -> dict:
        return {"error": self.message, "details": self.details}
