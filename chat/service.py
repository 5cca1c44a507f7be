"""Chat flow: rank resources, build the prompt, queue it for generation."""

from __future__ import annotations

import logging

from chat.prompts import build_prompt
from chat.relevance import rank_resources
from chat.serializer import ChatReply, RequestSerializer

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        serializer: RequestSerializer,
        corpus: list[str],
        prompt_template: str | None = None,
        top_n: int | None = None,
    ) -> None:
        self.serializer = serializer
        self.corpus = corpus
        self._prompt_template = prompt_template
        self._top_n = top_n

    def build_prompt(self, query: str) -> str:
        if not self.corpus:
            logger.warning("Resource corpus is empty; prompting without links")
        matches = rank_resources(query, self.corpus, top_n=self._top_n)
        logger.debug("Resources for query: %s", [match.url for match in matches])
        return build_prompt(query, matches, template=self._prompt_template)

    async def answer(self, query: str) -> ChatReply:
        return await self.serializer.ask(self.build_prompt(query))
