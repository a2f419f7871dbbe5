"""Service-level errors.

Services raise these; the API layer turns them into ``{"error": message}``
responses with the matching status code.
"""


class SafeLinkError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SafeLinkError):
    status_code = 400


class InvalidCodeError(SafeLinkError):
    """Unknown pairing code. The code is client input, so this is a 400."""

    status_code = 400


class ExpiredCodeError(SafeLinkError):
    status_code = 400


class NotFoundError(SafeLinkError):
    status_code = 404


class ForbiddenError(SafeLinkError):
    status_code = 403


class ConflictError(SafeLinkError):
    status_code = 409


class UpstreamError(SafeLinkError):
    status_code = 500


class UnavailableError(SafeLinkError):
    status_code = 503
