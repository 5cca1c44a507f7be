"""Email delivery service."""

from __future__ import annotations

import logging

import httpx

from auth.config import AuthConfig

logger = logging.getLogger(__name__)


def render_code_email(code: str, ttl_seconds: int) -> str:
    minutes = max(1, ttl_seconds // 60)
    unit = "minute" if minutes == 1 else "minutes"
    logo = ""
    if AuthConfig.EMAIL_LOGO_URL:
        logo = (
            '<div style="text-align: center; margin-bottom: 20px;">'
            f'<img src="{AuthConfig.EMAIL_LOGO_URL}" alt="{AuthConfig.EMAIL_FROM_NAME}" '
            'style="max-width: 200px;"></div>'
        )
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #e0e0e0; border-radius: 5px;">
    {logo}
    <h2 style="color: #006633; text-align: center;">Email Verification</h2>
    <p style="color: #555; font-size: 16px;">Please use the following verification code to confirm your email address:</p>
    <div style="background-color: #f5f5f5; padding: 15px; text-align: center; border-radius: 5px; margin: 20px 0;">
        <h1 style="color: #006633; letter-spacing: 5px; margin: 0;">{code}</h1>
    </div>
    <p style="color: #555; font-size: 14px;">This code will expire in {minutes} {unit}.</p>
    <p style="color: #555; font-size: 14px;">If you didn't request this verification, please ignore this email.</p>
</div>
"""


class EmailService:
    """Sends verification codes through the configured provider.

    ``resend`` posts to the Resend HTTP API. ``log`` writes the code to the
    application log and is meant for local development only.
    """

    def __init__(self, provider: str | None = None, timeout: float = 10.0) -> None:
        self._provider = provider or AuthConfig.EMAIL_PROVIDER
        self._timeout = timeout

    async def send_code_email(self, email: str, code: str, ttl_seconds: int) -> bool:
        subject = f"Email Verification Code - {AuthConfig.EMAIL_FROM_NAME}"
        if self._provider == "log":
            logger.warning("EMAIL_PROVIDER=log: verification code for %s is %s", email, code)
            return True
        if self._provider != "resend":
            logger.error("Unknown email provider %r", self._provider)
            return False
        if not AuthConfig.RESEND_API_KEY:
            logger.error("RESEND_API_KEY is not set; cannot send verification email")
            return False

        payload = {
            "from": f"{AuthConfig.EMAIL_FROM_NAME} <{AuthConfig.EMAIL_FROM_ADDRESS}>",
            "to": [email],
            "subject": subject,
            "html": render_code_email(code, ttl_seconds),
        }
        headers = {"Authorization": f"Bearer {AuthConfig.RESEND_API_KEY}"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    "https://api.resend.com/emails",
                    headers=headers,
                    json=payload,
                )
        except httpx.HTTPError:
            logger.exception("Email provider request failed")
            return False
        if response.status_code != 200:
            logger.error("Email provider returned %s: %s", response.status_code, response.text)
            return False
        return True
