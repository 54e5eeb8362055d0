"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    storage_mode: str = "memory"
    cosmos_endpoint: str = ""
    cosmos_key: str = ""
    cosmos_database: str = "directory"
    cosmos_container: str = "records"

    # Listing Configuration
    default_page_size: int = 12
    max_page_size: int = 100

    # Request Configuration
    requester_header: str = "X-User-Id"
    cors_allow_origins: str = "*"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @property
    def is_cosmos_mode(self) -> bool:
        """Whether records are kept in Cosmos DB rather than in memory."""
        return self.storage_mode.strip().lower() == "cosmos"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins parsed from the comma-separated setting."""
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()
