"""Classified service errors. Routes never build HTTP errors for these by hand;
app.api.errors maps each class to its status code."""


class AppError(Exception):
    """Base for errors that are safe to report to the caller as-is."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailed(AppError):
    """Malformed or missing input."""

    status_code = 422


class AuthenticationFailed(AppError):
    """Bad credentials or a missing/invalid session. Message is always generic."""

    status_code = 401


class AuthorizationDenied(AppError):
    """Authenticated, but role or ownership rules forbid the operation."""

    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409
