"""
Configuration management for the news CMS category service.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings

from taxonomy.resolver import StorageFormat


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database configuration (posts table of the hosted store)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "newsroom"
    POSTGRES_USER: str = "newsroom"
    POSTGRES_PASSWORD: str = ""

    # Service configuration
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8010

    # Logging
    LOG_LEVEL: str = "INFO"

    # Category configuration
    CATEGORY_STORAGE_FORMAT: StorageFormat = StorageFormat.ID  # id, path, hierarchical, display_name
    CATEGORY_DEBUG: bool = False  # Log the full url -> category routing table at startup

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def database_url(self) -> str:
        """Construct PostgreSQL connection URL."""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def async_database_url(self) -> str:
        """Construct async PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


# Global settings instance
settings = Settings()
