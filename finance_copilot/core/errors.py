# finance_copilot/core/errors.py

from typing import Optional


class FinanceError(Exception):
    """Base class for errors reported to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceError):
    """Malformed, missing or out-of-range input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidCredentialsError(ValidationError):
    """Login failure. Same message whether the email or the password was wrong."""

    def __init__(self):
        super().__init__("Invalid email or password")


class ConflictError(FinanceError):
    """A uniqueness constraint was violated."""

    def __init__(self, field: str):
        super().__init__(f"{field.capitalize()} already exists")
        self.field = field


class AuthError(FinanceError):
    MISSING = "missing"
    INVALID = "invalid"

    def __init__(self, reason: str):
        message = "Access token required" if reason == self.MISSING else "Invalid token"
        super().__init__(message)
        self.reason = reason


class NotFoundError(FinanceError):
    def __init__(self, message: str = "Endpoint not found"):
        super().__init__(message)


class InternalError(FinanceError):
    """Storage or unexpected failure. The message is generic and safe to return."""
