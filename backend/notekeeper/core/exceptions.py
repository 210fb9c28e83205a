"""
Application exceptions.

Raised by the account directory, note store and document store, and turned
into HTTP responses by ``notekeeper.core.exception_handlers``.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class DuplicateUsernameError(ApplicationError):
    """Raised when registration hits the username uniqueness constraint."""

    def __init__(self, message: str = "Username already exists") -> None:
        super().__init__(message, code="AUTH_DUPLICATE_USERNAME")


class InvalidCredentialsError(ApplicationError):
    """Unknown username or wrong password. The two cases are not distinguished."""

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message, code="AUTH_INVALID_CREDENTIALS")


class UnauthenticatedError(ApplicationError):
    """Missing, malformed or expired session token."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHENTICATED")


class NotFoundError(ApplicationError):
    """Record absent, or owned by somebody else."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when a required field is missing or empty."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class StoreUnavailableError(ApplicationError):
    """The backing document store could not be read or written."""

    def __init__(self, message: str = "Document store unavailable") -> None:
        super().__init__(message, code="SYS_STORE_UNAVAILABLE")
