"""Auth dependency helpers."""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.config import AuthConfig
from auth.exceptions import RateLimitedError, UnauthorizedError
from auth.interfaces.rate_limiter import RateLimiter
from auth.services.auth_service import AuthService
from auth.services.email_service import EmailService
from auth.stores.memory_store import (
    MemoryRateLimiter,
    MemoryUserStore,
    MemoryVerificationStore,
)
from auth.stores.sql_store import SqlUserStore, SqlVerificationStore

_bearer = HTTPBearer(auto_error=False)


def build_auth_service() -> AuthService:
    """Auth service wired to the stores selected by AUTH_STORE."""
    if AuthConfig.AUTH_STORE == "sql":
        users, codes = SqlUserStore(), SqlVerificationStore()
    else:
        # Memory store for development/testing
        users, codes = MemoryUserStore(), MemoryVerificationStore()
    return AuthService(
        user_store=users,
        verification_store=codes,
        email_service=EmailService(),
    )


def build_rate_limiter() -> RateLimiter:
    return MemoryRateLimiter()


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.services.auth_service


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.services.rate_limiter


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def enforce_send_code_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    key = f"send-code:{_client_ip(request)}"
    if not await limiter.allow(key, AuthConfig.SEND_CODE_RATE_LIMIT_PER_MINUTE, 60):
        raise RateLimitedError("Too many verification code requests, please wait a minute")


async def enforce_login_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    key = f"login:{_client_ip(request)}"
    if not await limiter.allow(key, AuthConfig.LOGIN_RATE_LIMIT_PER_MINUTE, 60):
        raise RateLimitedError("Too many login attempts")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """Identity claims of the bearer token; no store lookup."""
    if credentials is None:
        raise UnauthorizedError("Access denied. No token provided.")
    return auth_service.verify_session(credentials.credentials)
