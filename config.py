"""Service configuration loaded from environment variables.

For local development, create a .env file in the project root.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Dashboard settings with development defaults."""

    # Text generation
    api_key: str = Field(default="", description="Credential for the text generation service")
    # must accept temperature and top_p together
    ai_model: str = Field(default="claude-sonnet-4-20250514", description="Model used by the notepad assistant")
    ai_max_tokens: int = Field(default=1024, description="Maximum tokens per generated answer")

    # Sessions
    secret_key: str = Field(default="dev-secret-change-me", description="JWT signing key")
    access_token_expire_minutes: int = Field(default=60 * 12)

    # Logging
    log_json: bool = Field(default=False, description="Output logs in JSON format (for production)")
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    # HTTP
    cors_origins: List[str] = Field(default=["*"])
    port: int = Field(default=8000)

    school_name: str = Field(
        default="BAL KRISHNA KASAJU GOVERNMENT SENIOR SECONDARY SCHOOL NEWS AND ROUTINE",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
