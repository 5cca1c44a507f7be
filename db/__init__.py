"""
Database module for the physics lab backend.

Provides SQLAlchemy models, engine, and session factory for the SQL auth stores.
"""

from db.engine import Base, SessionLocal, init_db

__all__ = ["Base", "SessionLocal", "init_db"]
