"""Chat API route."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.schemas import ChatErrorResponse, ChatRequest, ChatResponse
from chat.service import ChatService
from config import Config

logger = logging.getLogger(__name__)

router = APIRouter()


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.services.chat_service


@router.post(
    "",
    response_model=ChatResponse,
    responses={400: {"model": ChatErrorResponse}, 500: {"model": ChatErrorResponse}},
)
async def chat(
    payload: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    prompt = (payload.prompt or "").strip()
    if not prompt:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ChatErrorResponse(message="Please enter a message").model_dump(exclude_none=True),
        )

    logger.debug("Received chat request (%d queued)", chat_service.serializer.pending)
    reply = await chat_service.answer(prompt)

    if not reply.success:
        error = ChatErrorResponse(
            message=reply.message,
            details=reply.details if Config.DEBUG else None,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.model_dump(exclude_none=True),
        )

    return ChatResponse(message=reply.message, styles=reply.styles, success=True)
