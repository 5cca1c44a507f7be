"""Security utilities for auth."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from auth.config import AuthConfig
from auth.exceptions import UnauthorizedError


def _hash(value: str, rounds: int | None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or AuthConfig.BCRYPT_ROUNDS)
    return bcrypt.hashpw(value.encode("utf-8"), salt).decode("utf-8")


def _check(value: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(value.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password using bcrypt."""
    return _hash(password, rounds)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return _check(password, hashed_password)


def generate_code(length: int | None = None) -> str:
    """Random zero-padded numeric code of fixed width."""
    if AuthConfig.FIXED_OTP:
        return AuthConfig.FIXED_OTP
    length = length or AuthConfig.CODE_LENGTH
    return str(secrets.randbelow(10**length)).zfill(length)


def hash_code(code: str, rounds: int | None = None) -> str:
    return _hash(code, rounds)


def verify_code_hash(code: str, code_hash: str) -> bool:
    return _check(code, code_hash)


def create_session_token(
    user: dict[str, Any],
    secret: str | None = None,
    expires_hours: int | None = None,
    algorithm: str | None = None,
) -> str:
    """Sign a self-contained session token carrying id, email and role."""
    now = datetime.now(timezone.utc)
    expire = now + timedelta(hours=expires_hours or AuthConfig.SESSION_TOKEN_EXPIRE_HOURS)
    payload: dict[str, Any] = {
        "id": str(user["id"]),
        "email": user["email"],
        "role": user.get("role", "user"),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(
        payload,
        secret or AuthConfig.JWT_SECRET,
        algorithm=algorithm or AuthConfig.JWT_ALGORITHM,
    )


def decode_session_token(
    token: str,
    secret: str | None = None,
    algorithm: str | None = None,
) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            secret or AuthConfig.JWT_SECRET,
            algorithms=[algorithm or AuthConfig.JWT_ALGORITHM],
        )
    except JWTError as exc:
        raise UnauthorizedError("Invalid token") from exc

    if not payload.get("id") or not payload.get("email"):
        raise UnauthorizedError("Invalid token payload")
    return {
        "id": payload["id"],
        "email": payload["email"],
        "role": payload.get("role", "user"),
    }
