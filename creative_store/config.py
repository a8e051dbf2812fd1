import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Defaults for external services
DEFAULT_TEXT_MODEL = "gpt-4.1"
DEFAULT_IMAGE_API_URL = "https://duomiapi.com/api/gemini"
DEFAULT_IMAGE_MODEL = "gemini-2.5-pro-image-preview"
DEFAULT_IMAGE_SIZE = "1K"
DEFAULT_RESEARCH_MAX_STEPS = 8


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _str_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _number_env(name: str, default, cast):
    value = _str_env(name)
    if value is None:
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{value}'")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, built once per invocation and passed to services."""

    openai_api_key: str | None = None
    openai_base_url: str | None = None
    text_model: str = DEFAULT_TEXT_MODEL
    research_web_search: bool = True
    research_max_steps: int = DEFAULT_RESEARCH_MAX_STEPS

    image_api_key: str | None = None
    image_api_url: str = DEFAULT_IMAGE_API_URL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_size: str = DEFAULT_IMAGE_SIZE
    image_poll_interval: float = 2.0
    image_poll_attempts: int = 30

    s3_bucket: str | None = None
    aws_region: str = "us-east-1"
    briefs_table: str = "creative-store-briefs"
    drafts_table: str = "creative-store-drafts"
    drafts_by_brief_index: str = "briefId-createdAt-index"
    queue_url: str | None = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment (and .env, loaded at import)."""
        return cls(
            openai_api_key=_str_env("OPENAI_API_KEY"),
            openai_base_url=_str_env("OPENAI_BASE_URL"),
            text_model=_str_env("OPENAI_TEXT_MODEL", DEFAULT_TEXT_MODEL),
            research_web_search=_bool_env("RESEARCH_WEB_SEARCH", True),
            research_max_steps=_number_env("RESEARCH_MAX_STEPS", DEFAULT_RESEARCH_MAX_STEPS, int),
            image_api_key=_str_env("IMAGE_API_KEY"),
            image_api_url=_str_env("IMAGE_API_URL", DEFAULT_IMAGE_API_URL).rstrip("/"),
            image_model=_str_env("IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            image_size=_str_env("IMAGE_SIZE", DEFAULT_IMAGE_SIZE),
            image_poll_interval=_number_env("IMAGE_POLL_INTERVAL", 2.0, float),
            image_poll_attempts=_number_env("IMAGE_POLL_ATTEMPTS", 30, int),
            s3_bucket=_str_env("S3_BUCKET"),
            aws_region=_str_env("AWS_REGION", "us-east-1"),
            briefs_table=_str_env("BRIEFS_TABLE", "creative-store-briefs"),
            drafts_table=_str_env("DRAFTS_TABLE", "creative-store-drafts"),
            drafts_by_brief_index=_str_env("DRAFTS_BY_BRIEF_INDEX", "briefId-createdAt-index"),
            queue_url=_str_env("QUEUE_URL"),
            log_level=_str_env("LOG_LEVEL", "INFO").upper(),
        )
