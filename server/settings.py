"""Environment configuration for the optimizer server."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

from agentflow.llm import DEFAULT_ANTHROPIC_MODEL, DEFAULT_OPENAI_MODEL

load_dotenv()  # load environment variables from .env file

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Server settings, normally read from the environment."""

    llm_provider: str = "openai"
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL

    host: str = "0.0.0.0"
    port: int = 3001
    # comma-separated in the environment, "*" for all (development only)
    cors_origins: list[str] = [DEFAULT_CORS_ORIGINS]

    strict_integrity: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "openai"),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            strict_integrity=_env_flag("STRICT_INTEGRITY"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def llm_api_key(self) -> str | None:
        """Credential for the configured provider."""
        if self.llm_provider.lower() == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key

    @property
    def llm_model(self) -> str:
        if self.llm_provider.lower() == "anthropic":
            return self.anthropic_model
        return self.openai_model
