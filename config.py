"""
Configuration management for the application.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


# Load .env from project root, falling back to the current directory
env_path = Path(__file__).parent / ".env"
if env_path.exists():
    load_dotenv(env_path, override=True)
else:
    load_dotenv(override=True)


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Application configuration."""

    # Generation API (Gemini through its OpenAI-compatible endpoint)
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")
    GENERATION_MODEL: str = os.getenv("GENERATION_MODEL", "gemini-2.0-flash")
    GENERATION_BASE_URL: str = os.getenv(
        "GENERATION_BASE_URL",
        "https://generativelanguage.googleapis.com/v1beta/openai/",
    )
    GENERATION_TIMEOUT_SECONDS: float = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "60"))

    # Minimum gap between two outbound generation calls
    CHAT_COOLDOWN_SECONDS: float = float(os.getenv("CHAT_COOLDOWN_SECONDS", "2.0"))

    # Resource links offered to the model
    RESOURCE_URLS_FILE: str = os.getenv("RESOURCE_URLS_FILE", "file_urls.txt")
    RELEVANCE_TOP_N: int = int(os.getenv("RELEVANCE_TOP_N", "5"))
    RELEVANCE_IMAGE_TOP_N: int = int(os.getenv("RELEVANCE_IMAGE_TOP_N", "3"))
    PROMPT_TEMPLATE_FILE: str | None = os.getenv("PROMPT_TEMPLATE_FILE")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./physics_lab.db")

    # API configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    STATIC_DIR: str | None = os.getenv("STATIC_DIR")
    DEBUG: bool = _parse_bool(os.getenv("DEBUG"), False)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        from auth.config import AuthConfig

        if not cls.GEMINI_API_KEY:
            raise ValueError(
                "GEMINI_API_KEY not set. Please set it in .env file or environment variable.\n"
                "Create a .env file in the project root with: GEMINI_API_KEY=your_key_here"
            )
        if not AuthConfig.JWT_SECRET:
            raise ValueError(
                "JWT_SECRET not set. Session tokens cannot be signed without it."
            )
