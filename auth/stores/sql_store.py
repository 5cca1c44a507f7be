"""SQL auth stores using SQLAlchemy."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth.exceptions import ConflictError, UpstreamFailure
from db.engine import SessionLocal
from db.models.auth import VerificationCode
from db.models.user import User

logger = logging.getLogger(__name__)


def _timestamp(value: datetime | None) -> int | None:
    if value is None:
        return None
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def _user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "hashed_password": user.hashed_password,
        "role": user.role,
        "is_verified": bool(user.is_verified),
        "created_at": _timestamp(user.created_at),
    }


class _SqlStore:
    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def _get_session(self) -> Session:
        return self._session_factory()


class SqlUserStore(_SqlStore):
    """User store backed by a SQL database."""

    async def get_by_email(self, email: str) -> dict | None:
        try:
            with self._get_session() as db:
                user = db.execute(
                    select(User).where(User.email == email.lower())
                ).scalar_one_or_none()
                return _user_to_dict(user) if user else None
        except SQLAlchemyError as exc:
            logger.exception("User lookup failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc

    async def get_by_id(self, user_id: str) -> dict | None:
        try:
            with self._get_session() as db:
                user = db.get(User, str(user_id))
                return _user_to_dict(user) if user else None
        except SQLAlchemyError as exc:
            logger.exception("User lookup failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc

    async def create_user(self, data: dict) -> dict:
        try:
            with self._get_session() as db:
                user = User(
                    email=data["email"].lower(),
                    name=data["name"],
                    hashed_password=data["hashed_password"],
                    role=data.get("role", "user"),
                    is_verified=data.get("is_verified", False),
                )
                db.add(user)
                db.commit()
                db.refresh(user)
                return _user_to_dict(user)
        except IntegrityError as exc:
            raise ConflictError("Email already registered") from exc
        except SQLAlchemyError as exc:
            logger.exception("User insert failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc

    async def update_user(self, user_id: str, updates: dict) -> dict:
        try:
            with self._get_session() as db:
                user = db.get(User, str(user_id))
                if not user:
                    raise ValueError("User not found")
                for key, value in updates.items():
                    if key in {"id", "email"}:
                        continue
                    if hasattr(user, key):
                        setattr(user, key, value)
                db.commit()
                db.refresh(user)
                return _user_to_dict(user)
        except SQLAlchemyError as exc:
            logger.exception("User update failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc


class SqlVerificationStore(_SqlStore):
    """Verification code store backed by a SQL database.

    Expired rows are swept whenever a new code is stored.
    """

    async def get(self, email: str) -> dict | None:
        try:
            with self._get_session() as db:
                record = db.get(VerificationCode, email.lower())
                if not record:
                    return None
                return {
                    "email": record.email,
                    "code_hash": record.code_hash,
                    "created_at": record.created_at,
                    "attempts": record.attempts,
                }
        except SQLAlchemyError as exc:
            logger.exception("Verification lookup failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc

    async def replace(self, email: str, data: dict, ttl_seconds: int) -> None:
        email = email.lower()
        try:
            with self._get_session() as db:
                db.execute(
                    delete(VerificationCode).where(
                        VerificationCode.created_at < time.time() - ttl_seconds
                    )
                )
                db.execute(delete(VerificationCode).where(VerificationCode.email == email))
                db.add(
                    VerificationCode(
                        email=email,
                        code_hash=data["code_hash"],
                        created_at=data.get("created_at", time.time()),
                        attempts=data.get("attempts", 0),
                    )
                )
                db.commit()
        except SQLAlchemyError as exc:
            logger.exception("Verification insert failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc

    async def delete(self, email: str) -> None:
        try:
            with self._get_session() as db:
                db.execute(delete(VerificationCode).where(VerificationCode.email == email.lower()))
                db.commit()
        except SQLAlchemyError as exc:
            logger.exception("Verification delete failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc

    async def increment_attempts(self, email: str) -> int:
        try:
            with self._get_session() as db:
                record = db.get(VerificationCode, email.lower())
                if not record:
                    return 0
                record.attempts = (record.attempts or 0) + 1
                db.commit()
                return record.attempts
        except SQLAlchemyError as exc:
            logger.exception("Verification update failed")
            raise UpstreamFailure("Database unavailable, please try again") from exc
