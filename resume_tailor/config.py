"""
Configuration management for Resume Tailor.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # LLM
    deepseek_api_key: str = ""
    llm_model: str = "deepseek-chat"
    llm_temperature: float = 0.2

    # Storage
    database_url: str = ""
    storage_backend: str = "auto"  # auto/memory/database

    # Web
    session_secret: str = "change-me"
    cors_origins: str = "http://localhost:5173"
    max_upload_size: int = 10 * 1024 * 1024
    llm_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    # Tools
    scrape_timeout: float = 30.0

    # Insights
    insights_cache_ttl: int = 300

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars


settings = Settings()
