"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # RevenueCat API
    api_host: str = "https://api.revenuecat.com"
    public_api_path: str = "/v1/developers"
    internal_api_path: str = "/internal/v1/developers"

    # Service
    service_name: str = "kedi-client"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    @property
    def public_api_base(self) -> str:
        return f"{self.api_host.rstrip('/')}{self.public_api_path}"

    @property
    def internal_api_base(self) -> str:
        return f"{self.api_host.rstrip('/')}{self.internal_api_path}"


settings = Settings()
