"""Core auth service.

Owns user records and one-time verification codes. A code is created by
``request_code``, checked by ``verify_code`` and consumed either there
(existing account) or by ``register`` (new account). The store's own
expiry is cleanup only; every check compares ``created_at`` against the
configured TTL on the service clock.
"""

from __future__ import annotations

import logging
import re
import time
from enum import Enum
from typing import Any, Callable

from auth.config import AuthConfig
from auth.exceptions import (
    CodeExpiredError,
    CodeInvalidError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    NotVerifiedError,
    UnauthorizedError,
    UpstreamFailure,
    ValidationError,
)
from auth.interfaces.user_store import UserStore
from auth.interfaces.verification_store import VerificationStore
from auth.security import (
    create_session_token,
    decode_session_token,
    generate_code,
    hash_code,
    hash_password,
    verify_code_hash,
    verify_password,
)
from auth.services.email_service import EmailService

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# bcrypt only looks at the first 72 bytes
_MAX_PASSWORD_BYTES = 72


class CodePurpose(str, Enum):
    SIGNUP = "signup"
    LOGIN = "login"


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": user["id"],
        "email": user["email"],
        "name": user.get("name"),
        "role": user.get("role", "user"),
        "isVerified": bool(user.get("is_verified")),
    }


class AuthService:
    def __init__(
        self,
        user_store: UserStore,
        verification_store: VerificationStore,
        email_service: EmailService,
        code_ttl_seconds: int | None = None,
        max_code_attempts: int | None = None,
        jwt_secret: str | None = None,
        token_expire_hours: int | None = None,
        bcrypt_rounds: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._users = user_store
        self._codes = verification_store
        self._email_service = email_service
        self._code_ttl = code_ttl_seconds or AuthConfig.CODE_TTL_SECONDS
        self._max_attempts = max_code_attempts or AuthConfig.MAX_CODE_ATTEMPTS
        self._jwt_secret = jwt_secret or AuthConfig.JWT_SECRET
        self._token_expire_hours = token_expire_hours or AuthConfig.SESSION_TOKEN_EXPIRE_HOURS
        self._bcrypt_rounds = bcrypt_rounds or AuthConfig.BCRYPT_ROUNDS
        self._clock = clock

    @property
    def code_ttl_seconds(self) -> int:
        return self._code_ttl

    def _normalize_email(self, email: str | None) -> str:
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required")
        if not _EMAIL_RE.match(email):
            raise ValidationError("Please enter a valid email")
        return email

    def _is_expired(self, created_at: float) -> bool:
        return (self._clock() - created_at) > self._code_ttl

    async def request_code(self, email: str, purpose: CodePurpose = CodePurpose.SIGNUP) -> None:
        email = self._normalize_email(email)

        if purpose == CodePurpose.LOGIN and not await self._users.get_by_email(email):
            raise NotFoundError("Email not registered")

        code = generate_code()
        await self._codes.replace(
            email,
            {
                "code_hash": hash_code(code, rounds=self._bcrypt_rounds),
                "created_at": self._clock(),
                "attempts": 0,
            },
            ttl_seconds=self._code_ttl,
        )

        if not await self._email_service.send_code_email(email, code, self._code_ttl):
            await self._codes.delete(email)
            raise UpstreamFailure("Failed to send verification code")
        logger.info("Verification code issued for %s (%s)", email, purpose.value)

    async def resend_code(self, email: str) -> None:
        await self.request_code(email, CodePurpose.SIGNUP)

    async def _check_code(self, email: str, code: str) -> dict[str, Any]:
        """Validate ``code`` against the live record without consuming it."""
        record = await self._codes.get(email)
        if not record:
            raise CodeExpiredError()

        if self._is_expired(float(record["created_at"])):
            await self._codes.delete(email)
            raise CodeExpiredError()

        if int(record.get("attempts", 0)) >= self._max_attempts:
            await self._codes.delete(email)
            raise CodeExpiredError("Too many attempts, please request a new code")

        if not verify_code_hash(code, record["code_hash"]):
            await self._codes.increment_attempts(email)
            logger.warning("Invalid verification code for %s", email)
            raise CodeInvalidError()

        return record

    async def verify_code(self, email: str, code: str) -> dict[str, Any]:
        email = self._normalize_email(email)
        if not code:
            raise ValidationError("Email and verification code are required")

        await self._check_code(email, code)

        user = await self._users.get_by_email(email)
        if user:
            if not user.get("is_verified"):
                await self._users.update_user(user["id"], {"is_verified": True})
            await self._codes.delete(email)
            return {"email": email, "user_verified": True}

        # No account yet: the code stays live until its TTL so register() can consume it
        return {"email": email, "user_verified": False}

    def _validate_registration(self, name: str, password: str, code: str) -> None:
        if not name or not password or not code:
            raise ValidationError("All fields are required")
        if len(name.strip()) < AuthConfig.MIN_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at least {AuthConfig.MIN_NAME_LENGTH} characters long"
            )
        if len(password) < AuthConfig.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {AuthConfig.MIN_PASSWORD_LENGTH} characters long"
            )
        if len(password.encode("utf-8")) > _MAX_PASSWORD_BYTES:
            raise ValidationError("Password is too long")

    async def register(self, name: str, email: str, password: str, code: str) -> dict[str, Any]:
        self._validate_registration(name, password, code)
        email = self._normalize_email(email)
        name = name.strip()

        existing = await self._users.get_by_email(email)
        if existing and existing.get("is_verified"):
            raise ConflictError("Email already registered")

        await self._check_code(email, code)
        await self._codes.delete(email)

        hashed = hash_password(password, rounds=self._bcrypt_rounds)
        if existing:
            user = await self._users.update_user(
                existing["id"],
                {"name": name, "hashed_password": hashed, "is_verified": True},
            )
        else:
            user = await self._users.create_user(
                {
                    "email": email,
                    "name": name,
                    "hashed_password": hashed,
                    "role": "user",
                    "is_verified": True,
                }
            )

        logger.info("Registered user %s", user["id"])
        return {"token": self._issue_token(user), "user": public_user(user)}

    async def login(self, email: str, password: str) -> dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required")
        email = email.strip().lower()

        user = await self._users.get_by_email(email)
        if not user or not verify_password(password, user.get("hashed_password") or ""):
            raise InvalidCredentialsError()

        if not user.get("is_verified"):
            raise NotVerifiedError()

        return {"token": self._issue_token(user), "user": public_user(user)}

    def verify_session(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise UnauthorizedError("Access denied. No token provided.")
        return decode_session_token(token, secret=self._jwt_secret)

    def _issue_token(self, user: dict[str, Any]) -> str:
        return create_session_token(
            user,
            secret=self._jwt_secret,
            expires_hours=self._token_expire_hours,
        )
