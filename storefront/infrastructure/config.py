"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"
    create_tables_on_startup: bool = False

    # Authentication (HS256 bearer tokens issued by the identity provider)
    auth_secret: str = "dev-auth-secret-change-in-production"
    auth_algorithm: str = "HS256"

    # Catalog
    search_page_size: int = 2

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
