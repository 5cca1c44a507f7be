"""Verification code store interface.

At most one record per email. Records carry ``code_hash``, ``created_at``
(epoch seconds) and ``attempts``. Expiry by the store is
advisory cleanup; callers compare ``created_at`` against their own TTL.
"""

from __future__ import annotations

from typing import Protocol


class VerificationStore(Protocol):
    async def get(self, email: str) -> dict | None:
        ...

    async def replace(self, email: str, data: dict, ttl_seconds: int) -> None:
        """Store ``data`` for ``email``, discarding any previous record."""
        ...

    async def delete(self, email: str) -> None:
        ...

    async def increment_attempts(self, email: str) -> int:
        ...
