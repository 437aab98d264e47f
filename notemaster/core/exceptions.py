"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a record cannot be found."""

    def __init__(self, message: str = "Record not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ConflictError(ApplicationError):
    """Raised when an operation does not apply to the record's current state."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class StoreUnavailableError(ApplicationError):
    """Raised when the document store cannot be opened or operated on."""

    def __init__(self, message: str = "Store unavailable") -> None:
        super().__init__(message, code="STORE_UNAVAILABLE")


class WrongPasswordError(ApplicationError):
    """Raised when a password does not match the note's digest."""

    def __init__(self, message: str = "Wrong password") -> None:
        super().__init__(message, code="LOCK_WRONG_PASSWORD")


class LegacyStoreError(ApplicationError):
    """Raised when the legacy key-value file cannot be read or written."""

    def __init__(self, message: str = "Legacy store error") -> None:
        super().__init__(message, code="LEGACY_STORE_ERROR")


class MigrationPartialError(ApplicationError):
    """Raised when one legacy key fails to migrate."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Migration of '{key}' failed: {reason}", code="MIGRATION_PARTIAL")
