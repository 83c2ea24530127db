"""Domain exception hierarchy for structured error responses."""

from __future__ import annotations

GENERIC_INTERNAL_ERROR = "Internal server error"


class AppException(Exception):
    """Base exception for all domain errors.

    Subclasses set ``code`` and ``status_code`` at the class level; callers
    provide ``message``.
    """

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputException(AppException):
    code = "BAD_REQUEST"
    status_code = 400


class AccessDeniedException(AppException):
    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class BackendUnavailableException(AppException):
    """Database unreachable, query failure or a stored row that cannot be read.

    ``message`` stays server-side; clients only ever see the generic text.
    """

    code = "INTERNAL_ERROR"
    status_code = 500
