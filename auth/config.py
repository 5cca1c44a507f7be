"""Auth configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass

# The root config module loads .env before anything below is read
import config  # noqa: F401


@dataclass(frozen=True)
class AuthConfig:
    """Configuration values for auth flows."""

    JWT_SECRET: str | None = os.getenv("JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    SESSION_TOKEN_EXPIRE_HOURS: int = int(os.getenv("SESSION_TOKEN_EXPIRE_HOURS", "24"))

    CODE_TTL_SECONDS: int = int(os.getenv("CODE_TTL_SECONDS", "600"))
    CODE_LENGTH: int = int(os.getenv("CODE_LENGTH", "6"))
    MAX_CODE_ATTEMPTS: int = int(os.getenv("MAX_CODE_ATTEMPTS", "5"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
    FIXED_OTP: str | None = os.getenv("FIXED_OTP") or None

    MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))
    MIN_NAME_LENGTH: int = int(os.getenv("MIN_NAME_LENGTH", "1"))

    SEND_CODE_RATE_LIMIT_PER_MINUTE: int = int(os.getenv("SEND_CODE_RATE_LIMIT_PER_MINUTE", "3"))
    LOGIN_RATE_LIMIT_PER_MINUTE: int = int(os.getenv("LOGIN_RATE_LIMIT_PER_MINUTE", "5"))

    EMAIL_PROVIDER: str = os.getenv("EMAIL_PROVIDER", "resend")
    EMAIL_FROM_NAME: str = os.getenv("EMAIL_FROM_NAME", "GMU Physics Lab")
    EMAIL_FROM_ADDRESS: str = os.getenv("EMAIL_FROM_ADDRESS", "no-reply@physicslab.example.edu")
    RESEND_API_KEY: str | None = os.getenv("RESEND_API_KEY")
    EMAIL_LOGO_URL: str | None = os.getenv("EMAIL_LOGO_URL")

    # Auth store: "sql" (production) or "memory" (testing)
    AUTH_STORE: str = os.getenv("AUTH_STORE", "sql")
