"""
Core configuration module for the Vin AI Concierge.
Settings are read from environment variables (and an optional .env file).
Ranking weights and conversation limits live here so they can be tuned
per deployment without touching the engine.
"""

from pydantic_settings import BaseSettings
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # Application
    app_name: str = "Vin AI Concierge"
    app_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./concierge.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_recycle: int = 1800  # Recycle connections after 30 min
    database_pool_pre_ping: bool = True
    database_statement_timeout_ms: int = 10000

    # API Configuration
    api_prefix: str = "/api/v1"
    api_host: str = "0.0.0.0"
    api_port: int = 8890
    api_workers: int = 2

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # CORS
    cors_origins: list = ["http://localhost:3000", "http://127.0.0.1:3000"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: list = ["Content-Type", "Accept", "X-User-Id"]

    # Conversation
    transcript_window: int = 18
    keyword_cap: int = 12

    # Search & pagination
    candidate_cap: int = 60
    default_page_size: int = 10
    max_page_size: int = 10
    description_max_chars: int = 160

    # Ranking weights
    score_category_match: float = 5.0
    score_location_match: float = 4.0
    score_keyword_title: float = 2.0
    score_keyword_description: float = 1.0
    score_keyword_location: float = 1.0
    score_guest_fit: float = 1.0
    score_boost_divisor: float = 5.0
    score_rating_multiplier: float = 3.0
    score_review_cap: int = 50
    score_review_weight: float = 0.1

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
