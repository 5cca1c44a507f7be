"""
Resource relevance scoring.

Ranks the static list of lab resource URLs against a free-text question
using fixed keyword weights. The result feeds the prompt sent to the
generation API, so the model can cite real links.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from config import Config

logger = logging.getLogger(__name__)

# Weights
WHOLE_WORD_WEIGHT = 3
FILENAME_SUBSTRING_WEIGHT = 2
URL_SUBSTRING_WEIGHT = 1
IMAGE_INTENT_WEIGHT = 5
PDF_WEIGHT = 2
COURSE_CODE_WEIGHT = 10

MIN_TOKEN_LENGTH = 3

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif"}
IMAGE_INTENT_RE = re.compile(r"\b(image|images|picture|pictures|photo|photos|show|see|look|display)\b", re.I)
COURSE_CODE_RE = re.compile(r"\bphy\s*[-_]?\s*(\d{3})\b", re.I)

KIND_GLYPHS = {
    "image": "🖼️",
    "pdf": "📄",
    "other": "•",
}


@dataclass(frozen=True)
class ResourceMatch:
    """A corpus URL that scored against a query."""

    url: str
    display_name: str
    kind: str
    score: float

    @property
    def glyph(self) -> str:
        return KIND_GLYPHS[self.kind]

    def as_markdown(self) -> str:
        return f"{self.glyph} [{self.display_name}]({self.url})"


def tokenize(query: str) -> list[str]:
    """Lowercase words of the query longer than two characters."""
    cleaned = re.sub(r"[^\w\s]", " ", query.lower())
    return [token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH]


def split_url(url: str) -> tuple[str, str]:
    """Decoded filename and parent path segment of a URL."""
    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    filename = unquote(segments[-1]) if segments else ""
    parent = unquote(segments[-2]) if len(segments) > 1 else ""
    return filename, parent


def file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def resource_kind(filename: str) -> str:
    extension = file_extension(filename)
    if extension in IMAGE_EXTENSIONS:
        return "image"
    if extension == "pdf":
        return "pdf"
    return "other"


def has_image_intent(query: str) -> bool:
    return bool(IMAGE_INTENT_RE.search(query))


def course_codes(query: str) -> set[str]:
    """Normalized course codes in the query, e.g. ``{"phy161"}``."""
    return {f"phy{digits}" for digits in COURSE_CODE_RE.findall(query)}


def _compact(text: str) -> str:
    return re.sub(r"[\s_\-]+", "", unquote(text).lower())


def score_resource(
    tokens: list[str],
    url: str,
    image_intent: bool = False,
    codes: set[str] | None = None,
) -> float:
    """Score one URL; zero means unrelated."""
    filename, _ = split_url(url)
    lowered_name = filename.lower()
    lowered_url = unquote(url).lower()
    name_words = set(re.split(r"[^a-z0-9]+", lowered_name))

    score = 0.0
    for token in tokens:
        if token in name_words:
            score += WHOLE_WORD_WEIGHT
        elif token in lowered_name:
            score += FILENAME_SUBSTRING_WEIGHT
        elif token in lowered_url:
            score += URL_SUBSTRING_WEIGHT

    kind = resource_kind(filename)
    if image_intent and kind == "image":
        score += IMAGE_INTENT_WEIGHT

    if codes:
        compact_url = _compact(url)
        if any(code in compact_url for code in codes):
            score += COURSE_CODE_WEIGHT

    # Tie-breaker only: a PDF must already relate to the question
    if kind == "pdf" and score > 0:
        score += PDF_WEIGHT

    return score


def rank_resources(
    query: str,
    corpus: list[str],
    top_n: int | None = None,
) -> list[ResourceMatch]:
    """Best-scoring corpus URLs for ``query``, highest first.

    Ties keep corpus order. ``top_n`` defaults to the configured limit,
    which is smaller for image questions.
    """
    image_intent = has_image_intent(query)
    if top_n is None:
        top_n = Config.RELEVANCE_IMAGE_TOP_N if image_intent else Config.RELEVANCE_TOP_N

    tokens = tokenize(query)
    codes = course_codes(query)

    scored: list[ResourceMatch] = []
    for url in corpus:
        score = score_resource(tokens, url, image_intent=image_intent, codes=codes)
        if score <= 0:
            continue
        filename, _ = split_url(url)
        scored.append(
            ResourceMatch(
                url=url,
                display_name=filename,
                kind=resource_kind(filename),
                score=score,
            )
        )

    # sorted() is stable, so equal scores stay in corpus order
    ranked = sorted(scored, key=lambda match: match.score, reverse=True)[:top_n]
    logger.debug("Ranked %d of %d resources for query", len(ranked), len(corpus))
    return ranked


def load_resource_corpus(path: str | Path) -> list[str]:
    """Read resource URLs, one per line; logos and non-URLs are skipped."""
    path = Path(path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.error("Could not load resource URLs from %s: %s", path, exc)
        return []

    corpus = [
        line.strip()
        for line in lines
        if line.strip().startswith("http") and "logo" not in line
    ]
    logger.info("Loaded %d resource URLs from %s", len(corpus), path)
    return corpus
