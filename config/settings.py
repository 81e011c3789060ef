# config/settings.py

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAIConfig(BaseModel):
    """Config for OpenAI streaming chat completions."""

    api_key: str = Field(..., repr=False)
    base_url: Optional[str] = None
    chat_model: str = "gpt-4o-mini"
    max_tokens: int = 1000
    temperature: float = 0.7
    request_timeout_seconds: float = 30.0
    max_retries: int = 2  # retries made by the SDK when opening a stream


class RelayConfig(BaseModel):
    """Config for the completion relay."""

    max_tool_rounds: int = Field(1, ge=0)
    request_timeout_seconds: float = 60.0


class SupabaseConfig(BaseModel):
    """Config for the Supabase (PostgREST) integration store."""

    url: str = "http://localhost:54321"
    service_key: str = Field("", repr=False)
    timeout_seconds: float = 5.0
    max_retries: int = 3
    backoff_factor: float = 0.5  # tenacity exponential multiplier


class LoggingConfig(BaseModel):
    """Basic logging config."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_logging: bool = True


class ModulesConfig(BaseModel):
    integration_store_name: str = "IntegrationStoreLocal"


class Settings(BaseSettings):
    """Top-level app settings loaded from environment / .env."""

    env: Literal["dev", "staging", "prod"] = "dev"
    default_user_id: str = "demo-user"

    # Nested configs
    openai: OpenAIConfig
    modules: ModulesConfig = ModulesConfig()
    relay: RelayConfig = RelayConfig()
    supabase: SupabaseConfig = SupabaseConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",              # all vars start with APP_
        env_nested_delimiter="__",      # APP_OPENAI__API_KEY, etc.
        case_sensitive=False,
        extra="ignore",
    )


# Single global instance you import everywhere
settings = Settings()
