"""Auth exceptions."""

from __future__ import annotations

from typing import Any


class AuthException(Exception):
    """Base auth exception with HTTP status."""

    status_code = 400

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        data: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data or {}


class ValidationError(AuthException):
    """Missing or malformed input field."""


class ConflictError(AuthException):
    """Email already belongs to a verified account."""


class NotFoundError(AuthException):
    """Email is not registered."""


class InvalidCredentialsError(AuthException):
    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class NotVerifiedError(AuthException):
    status_code = 401

    def __init__(self, message: str = "Email not verified"):
        super().__init__(message, data={"needsVerification": True})


class UnauthorizedError(AuthException):
    status_code = 401


class CodeExpiredError(AuthException):
    def __init__(self, message: str = "Verification code expired or invalid"):
        super().__init__(message)


class CodeInvalidError(AuthException):
    def __init__(self, message: str = "Invalid verification code"):
        super().__init__(message)


class RateLimitedError(AuthException):
    status_code = 429


class UpstreamFailure(AuthException):
    """Store or email provider failed; details are logged, not returned."""

    status_code = 500
