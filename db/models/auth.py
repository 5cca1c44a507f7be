"""
Verification code model.

VerificationCode: one live email verification code per address.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Text,
)

from db.engine import Base


class VerificationCode(Base):
    """
    Hashed one-time code sent to an email address.

    The email is the primary key, so issuing a new code replaces the old one.
    """
    __tablename__ = "verification_codes"

    email = Column(String(255), primary_key=True)
    code_hash = Column(Text, nullable=False)
    created_at = Column(Float, nullable=False, index=True)  # Unix timestamp
    attempts = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<VerificationCode(email={self.email}, attempts={self.attempts})>"
