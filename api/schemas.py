"""
Pydantic schemas for API request/response models.
"""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Client → Server: question for the lab assistant."""
    prompt: str | None = Field(default=None, max_length=4000)


class ChatResponse(BaseModel):
    """Server → Client: rendered answer."""
    message: str
    styles: str | None = None
    success: bool = True


class ChatErrorResponse(BaseModel):
    error: bool = True
    message: str
    details: str | None = None


class HealthResponse(BaseModel):
    status: str
    apiKeyPresent: bool
    debug: bool
