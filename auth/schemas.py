"""Auth request/response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, EmailStr, Field

from auth.services.auth_service import CodePurpose


class MessageResponse(BaseModel):
    message: str


class SendCodeRequest(BaseModel):
    email: EmailStr
    purpose: CodePurpose = CodePurpose.SIGNUP


class ResendCodeRequest(BaseModel):
    email: EmailStr


class VerifyCodeRequest(BaseModel):
    email: EmailStr
    otp: str = Field(min_length=4, max_length=10)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    otp: str = Field(min_length=4, max_length=10)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AuthUser(BaseModel):
    id: str
    email: EmailStr
    name: str | None = None
    role: str = "user"
    isVerified: bool = False


class TokenResponse(BaseModel):
    message: str
    token: str
    user: AuthUser


class SessionUser(BaseModel):
    id: str
    email: EmailStr
    role: str


class VerifySessionResponse(BaseModel):
    valid: bool = True
    user: SessionUser

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "VerifySessionResponse":
        return cls(user=SessionUser(**claims))
