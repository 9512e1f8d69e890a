"""Configuration management using pydantic-settings"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Completion endpoint (DeepSeek, OpenAI-compatible chat completions)
    deepseek_api_key: Optional[str] = Field(default=None, description="Bearer credential for the completion endpoint")
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com",
        description="Completion endpoint base URL (may be a local proxy)",
    )

    # LLM settings
    llm_model: str = Field(default="deepseek-chat", description="LLM model to use")
    llm_temperature: float = Field(default=0.3, description="LLM temperature")
    llm_max_tokens: int = Field(default=2000, description="Max tokens in response")
    llm_timeout: float = Field(default=60.0, description="Completion request timeout in seconds")

    # Conversation memory
    history_limit: int = Field(default=5, description="Recent messages included in the prompt")
    verify_session_owner: bool = Field(
        default=True, description="Reject session ids that belong to another user"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # Database mode: 'supabase' or 'sqlite'
    db_mode: str = Field(default="sqlite", description="Database backend: 'supabase' or 'sqlite'")
    database_path: str = Field(default="./data/legal_chat.db", description="Path to SQLite database")

    # Supabase settings
    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(default=None, description="Supabase anon key")
    supabase_service_key: Optional[str] = Field(default=None, description="Supabase service role key")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    """Get application settings"""
    return Settings()
