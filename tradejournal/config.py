"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = "sqlite:///./tradejournal.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24 hours

    # Text-completion backend
    chat_backend_url: str = "http://localhost:8080/v1/complete"
    chat_backend_api_key: str = ""
    chat_timeout_seconds: float = 30.0
    chat_temperature: float = 0.7
    chat_max_tokens: int = 1000
    summary_max_tokens: int = 800

    # Chat context bounds
    context_recent_sessions: int = 5
    context_recent_trades: int = 10
    assistant_name: str = "Sydney"

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
