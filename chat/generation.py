"""
Text generation client.

Talks to Gemini through its OpenAI-compatible endpoint. The serializer
treats ``GenerationClient.generate`` as an opaque prompt -> text call.
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from chat.exceptions import GenerationError
from config import Config

logger = logging.getLogger(__name__)


class GenerationClient:
    """Single-prompt text generation."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self.model = model or Config.GENERATION_MODEL
        # Retries would hold the serializer lane; failures surface to the caller
        self.client = AsyncOpenAI(
            api_key=api_key or Config.GEMINI_API_KEY,
            base_url=base_url or Config.GENERATION_BASE_URL,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            raise GenerationError(f"Generation API request failed: {exc}") from exc

        if not response.choices or not response.choices[0].message.content:
            raise GenerationError("No result from generation API")
        return response.choices[0].message.content.strip()

    async def close(self) -> None:
        await self.client.close()
