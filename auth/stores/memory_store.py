"""In-memory auth stores."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any
from uuid import uuid4

from auth.exceptions import ConflictError

logger = logging.getLogger(__name__)


class MemoryUserStore:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._users_by_email: dict[str, dict[str, Any]] = {}
        self._users_by_id: dict[str, dict[str, Any]] = {}

    async def get_by_email(self, email: str) -> dict | None:
        async with self._lock:
            user = self._users_by_email.get(email.lower())
            return dict(user) if user else None

    async def get_by_id(self, user_id: str) -> dict | None:
        async with self._lock:
            user = self._users_by_id.get(str(user_id))
            return dict(user) if user else None

    async def create_user(self, data: dict) -> dict:
        async with self._lock:
            email = data["email"].lower()
            if email in self._users_by_email:
                raise ConflictError("Email already registered")
            payload = dict(data)
            payload["id"] = uuid4().hex
            payload["email"] = email
            payload.setdefault("role", "user")
            payload.setdefault("is_verified", False)
            payload["created_at"] = payload.get("created_at", int(time.time()))
            self._users_by_email[email] = payload
            self._users_by_id[payload["id"]] = payload
            return dict(payload)

    async def update_user(self, user_id: str, updates: dict) -> dict:
        async with self._lock:
            user = self._users_by_id.get(str(user_id))
            if not user:
                raise ValueError("User not found")
            for key, value in updates.items():
                if key in {"id", "email"}:
                    continue
                user[key] = value
            return dict(user)


class MemoryVerificationStore:
    """Verification codes keyed by email.

    Each record gets a purge timer on the running loop. The timer only
    removes the record it was scheduled for, so a replacement code is
    never dropped by its predecessor's timer.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._by_email: dict[str, dict[str, Any]] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    async def get(self, email: str) -> dict | None:
        async with self._lock:
            record = self._by_email.get(email.lower())
            return dict(record) if record else None

    async def replace(self, email: str, data: dict, ttl_seconds: int) -> None:
        email = email.lower()
        async with self._lock:
            payload = dict(data)
            payload["email"] = email
            payload["_record_id"] = uuid4().hex
            self._by_email[email] = payload
            self._cancel_timer(email)
            loop = asyncio.get_running_loop()
            self._timers[email] = loop.call_later(
                ttl_seconds, self._purge, email, payload["_record_id"]
            )

    async def delete(self, email: str) -> None:
        email = email.lower()
        async with self._lock:
            self._by_email.pop(email, None)
            self._cancel_timer(email)

    async def increment_attempts(self, email: str) -> int:
        async with self._lock:
            record = self._by_email.get(email.lower())
            if not record:
                return 0
            record["attempts"] = int(record.get("attempts", 0)) + 1
            return record["attempts"]

    def _cancel_timer(self, email: str) -> None:
        timer = self._timers.pop(email, None)
        if timer:
            timer.cancel()

    def _purge(self, email: str, record_id: str) -> None:
        # Runs on the loop thread between awaits, so no lock is needed.
        record = self._by_email.get(email)
        if record and record.get("_record_id") == record_id:
            del self._by_email[email]
            self._timers.pop(email, None)
            logger.debug("Purged expired verification code for %s", email)


class MemoryRateLimiter:
    """Sliding-window counter per key.

    Keys whose newest hit is older than the longest window seen are
    dropped on every call, so clients that go quiet do not accumulate.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._hits: dict[str, list[float]] = {}
        self._max_window = 0.0

    async def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        now = time.monotonic()
        async with self._lock:
            self._max_window = max(self._max_window, window_seconds)
            self._sweep(now)
            hits = [stamp for stamp in self._hits.get(key, []) if (now - stamp) < window_seconds]
            if len(hits) >= limit:
                self._hits[key] = hits
                return False
            hits.append(now)
            self._hits[key] = hits
            return True

    def _sweep(self, now: float) -> None:
        stale = [key for key, hits in self._hits.items() if not hits or (now - hits[-1]) >= self._max_window]
        for key in stale:
            del self._hits[key]
