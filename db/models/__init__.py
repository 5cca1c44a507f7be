"""
SQLAlchemy models for the physics lab database.

All models inherit from db.engine.Base for Alembic migrations.
"""

from db.models.user import User
from db.models.auth import VerificationCode

__all__ = [
    "User",
    "VerificationCode",
]
