"""Configuration management for the code question-answering agent."""

import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


DEFAULT_MODEL_NAME = "gpt-4o-mini"
DEFAULT_MAX_ITERATIONS = 50


class Config(BaseModel):
    """Application configuration."""

    # LLM Settings
    llm_provider: str = Field(default="litellm")
    model_name: str = Field(default=DEFAULT_MODEL_NAME)
    api_key: Optional[str] = Field(default=None)
    base_url: Optional[str] = Field(default=None)
    max_retries: int = Field(default=3)
    timeout: int = Field(default=60)
    max_output_tokens: Optional[int] = Field(default=8000)
    temperature: float = Field(default=0.3)

    # Agent Settings
    native_tool_calling: bool = Field(default=True)
    max_iterations: int = Field(default=DEFAULT_MAX_ITERATIONS)

    # Tool Settings
    use_ripgrep: bool = Field(default=True)

    log_level: str = Field(default="WARNING")

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        def _parse_int(value: Optional[str], fallback: int) -> int:
            try:
                return int(value) if value is not None else fallback
            except ValueError:
                return fallback

        def _parse_bool(value: Optional[str], fallback: bool) -> bool:
            if value is None or not value.strip():
                return fallback
            return value.strip().lower() not in ("false", "0", "no", "off")

        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "litellm"),
            model_name=os.getenv("MODEL_NAME", DEFAULT_MODEL_NAME),
            api_key=os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("LLM_BASE_URL") or None,
            max_retries=_parse_int(os.getenv("LLM_MAX_RETRIES"), 3),
            timeout=_parse_int(os.getenv("LLM_TIMEOUT"), 60),
            max_output_tokens=_parse_int(os.getenv("LLM_MAX_OUTPUT_TOKENS"), 8000),
            native_tool_calling=_parse_bool(os.getenv("NATIVE_TOOL_CALLING"), True),
            max_iterations=_parse_int(os.getenv("AGENT_MAX_ITERATIONS"), DEFAULT_MAX_ITERATIONS),
            use_ripgrep=_parse_bool(os.getenv("USE_RIPGREP"), True),
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        )
