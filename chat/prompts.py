"""Prompt construction for the lab assistant."""

from __future__ import annotations

import logging
from pathlib import Path

from chat.relevance import ResourceMatch

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_TEMPLATE = """You are a helpful assistant for the GMU Physics Lab.
When responding about physics topics:
1. If the user asks about an experiment or equipment, ALWAYS include relevant images in your response
2. When showing images, describe what each image shows
3. Format images with proper markdown: 🖼️ [Image Title](URL)
4. Include course numbers when relevant (e.g., PHY 161, PHY 260)
5. Be concise and clear in your explanations

Here are some relevant resources for this query:
{resources}

User Query: {query}"""

NO_RESOURCES_LINE = "(no matching lab resources)"


def load_prompt_template(path: str | None) -> str:
    """Template from ``path`` or the built-in one.

    Templates use ``{resources}`` and ``{query}`` placeholders.
    """
    if not path:
        return DEFAULT_PROMPT_TEMPLATE
    try:
        template = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read PROMPT_TEMPLATE_FILE {path}: {exc}") from exc
    if "{query}" not in template:
        raise ValueError(f"Prompt template {path} has no {{query}} placeholder")
    return template


def build_prompt(
    query: str,
    matches: list[ResourceMatch],
    template: str | None = None,
) -> str:
    resources = "\n".join(match.as_markdown() for match in matches) or NO_RESOURCES_LINE
    # Plain substitution: other braces in a template (JSON examples) are literal text
    prompt = (template or DEFAULT_PROMPT_TEMPLATE).replace("{resources}", resources)
    return prompt.replace("{query}", query)
