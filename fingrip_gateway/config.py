"""Configuration management using Pydantic Settings"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./fingrip.db"

    # Tink
    tink_api_base: str = "https://api.tink.com"
    tink_link_base: str = "https://link.tink.com/1.0/transactions/connect-accounts"
    tink_client_id: str = ""
    tink_client_secret: str = ""
    tink_redirect_uri: str = "fingrip://callback"
    tink_market: str = "NL"
    tink_locale: str = "nl_NL"
    tink_scopes: List[str] = [
        "authorization:read",
        "user:read",
        "credentials:read",
        "accounts:read",
        "transactions:read",
        "statistics:read",
    ]
    tink_test_mode: bool = False
    tink_simulated_delay_seconds: float = 1.0

    # Service
    service_name: str = "fingrip-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Localization
    default_language: str = "en"
    default_currency: str = "EUR"


settings = Settings()
