"""
Process-wide service container.

Built once in the application lifespan and kept on ``app.state.services``.
Handlers reach it through dependencies instead of module globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from auth.config import AuthConfig
from auth.dependencies import build_auth_service, build_rate_limiter
from auth.interfaces.rate_limiter import RateLimiter
from auth.services.auth_service import AuthService
from chat.generation import GenerationClient
from chat.prompts import load_prompt_template
from chat.relevance import load_resource_corpus
from chat.serializer import RequestSerializer
from chat.service import ChatService
from config import Config

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    auth_service: AuthService
    chat_service: ChatService
    rate_limiter: RateLimiter
    on_shutdown: list[Callable[[], Awaitable[None]]] = field(default_factory=list)

    async def shutdown(self) -> None:
        await self.chat_service.serializer.stop()
        for callback in self.on_shutdown:
            await callback()


def build_services() -> AppServices:
    """Wire production services from Config. Raises ValueError on bad config."""
    Config.validate()

    if AuthConfig.AUTH_STORE == "sql":
        from db.engine import init_db

        init_db()

    generation = GenerationClient()
    serializer = RequestSerializer(generation.generate)
    chat_service = ChatService(
        serializer=serializer,
        corpus=load_resource_corpus(Config.RESOURCE_URLS_FILE),
        prompt_template=load_prompt_template(Config.PROMPT_TEMPLATE_FILE),
    )
    logger.info(
        "Chat serializer ready (model=%s, cooldown=%ss)",
        generation.model,
        Config.CHAT_COOLDOWN_SECONDS,
    )
    return AppServices(
        auth_service=build_auth_service(),
        chat_service=chat_service,
        rate_limiter=build_rate_limiter(),
        on_shutdown=[generation.close],
    )
