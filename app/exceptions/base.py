"""
Base exception classes for the ordering API.
"""


class AppException(Exception):
    """
    Base exception for all ordering errors.

    Every domain error carries the HTTP status it maps to at the boundary, so
    routes never translate exceptions by hand.

    Attributes:
        message: Human-readable error message (returned to the caller)
        details: Optional dict with additional context (entity IDs, states, etc.)
    """

    status_code: int = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class ValidationError(AppException):
    """Malformed or out-of-range input."""
    status_code = 400


class NotFound(AppException):
    """Missing entity."""
    status_code = 404


class Forbidden(AppException):
    """Caller lacks the capability for the requested operation."""
    status_code = 403


class Conflict(AppException):
    """State invariant violation or lost compare-and-swap."""
    status_code = 409


class Internal(AppException):
    """Storage or unexpected failure. The message stays opaque."""
    status_code = 500

    def __init__(self, message: str = "Erreur interne du serveur", details: dict | None = None):
        super().__init__(message, details)
