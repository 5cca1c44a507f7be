"""Auth API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import (
    enforce_login_rate_limit,
    enforce_send_code_rate_limit,
    get_auth_service,
    get_current_user,
)
from auth.schemas import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResendCodeRequest,
    SendCodeRequest,
    TokenResponse,
    VerifyCodeRequest,
    VerifySessionResponse,
)
from auth.services.auth_service import AuthService

router = APIRouter()


@router.post("/send-otp", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def send_otp(
    payload: SendCodeRequest,
    _: None = Depends(enforce_send_code_rate_limit),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.request_code(payload.email, payload.purpose)
    return MessageResponse(message="Verification code sent to your email")


@router.post("/verify-otp", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def verify_otp(
    payload: VerifyCodeRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.verify_code(payload.email, payload.otp)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-otp", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def resend_otp(
    payload: ResendCodeRequest,
    _: None = Depends(enforce_send_code_rate_limit),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.resend_code(payload.email)
    return MessageResponse(message="Verification code resent to your email")


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    result = await auth_service.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        code=payload.otp,
    )
    return TokenResponse(message="Registration successful", **result)


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
async def login(
    payload: LoginRequest,
    _: None = Depends(enforce_login_rate_limit),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    result = await auth_service.login(payload.email, payload.password)
    return TokenResponse(message="Login successful", **result)


@router.get("/verify", response_model=VerifySessionResponse, status_code=status.HTTP_200_OK)
async def verify(current_user: dict = Depends(get_current_user)) -> VerifySessionResponse:
    return VerifySessionResponse.from_claims(current_user)
