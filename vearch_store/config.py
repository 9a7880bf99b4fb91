"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vearch_store.schema.models import SchemaConfig, default_schema_config


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class VearchSettings(BaseSettings):
    """Vearch service and space configuration."""

    model_config = SettingsConfigDict(env_prefix="VEARCH_")

    base_url: str = Field(
        default="http://localhost:9001",
        description="Vearch router base URL",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )
    normalize_embeddings: bool = Field(
        default=False,
        description="Normalize embeddings to unit length before storing",
    )
    database_name: str = Field(
        default="embedding_db",
        description="Database holding the space",
    )
    space_name: str = Field(
        default="embedding_space",
        description="Space holding the documents",
    )
    embedding_field_name: str = Field(
        default="embedding",
        description="Name of the vector field",
    )
    text_field_name: str = Field(
        default="text",
        description="Name of the text field",
    )
    embedding_dimension: int = Field(
        default=384,
        description="Dimension of the vector field",
    )

    def to_schema_config(self) -> SchemaConfig:
        """Build a schema config from these settings.

        Returns:
            SchemaConfig with the default engine and no metadata fields.
        """
        return default_schema_config(
            database_name=self.database_name,
            space_name=self.space_name,
            embedding_field_name=self.embedding_field_name,
            text_field_name=self.text_field_name,
            dimension=self.embedding_dimension,
        )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    vearch: VearchSettings = Field(default_factory=VearchSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
