"""Agent configuration with environment variable loading.

Pydantic-based configuration for the relay's LLM provider.
Targets OpenRouter by default; any OpenAI-compatible API works via LLM_BASE_URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "openai/gpt-oss-20b:free"


class AgentConfig(BaseModel):
    """Configuration for the relay's LLM provider.

    No sampling parameters are exposed: provider defaults apply.

    Attributes:
        api_key: API key for model access.
        base_url: OpenAI-compatible API base URL.
        model_name: Model identifier to use.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENROUTER_API_KEY", "")),
        validate_default=True,
        description="API key for LLM provider",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or OPENROUTER_BASE_URL,
        description="OpenAI-compatible API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENROUTER_API_KEY in .env"
            )
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()
