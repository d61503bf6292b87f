"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- MongoDB connection (credentials, cluster host, database and collections)
- Access token signing (JWT settings)
- API settings (host, port, CORS)
- Logging and metrics

Variable names match the storefront deployment (DB_USER, DB_PASSWORD, PORT,
ACCESS_TOKEN_SECRET) so no prefix is applied. A .env file is loaded when
present.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List, Optional
from functools import lru_cache
from urllib.parse import quote_plus

DEFAULT_ACCESS_TOKEN_SECRET = "change-this-secret-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Delta Car API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode - enables verbose logging and error traces"
    )
    environment: str = Field(
        default="production",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=5000,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # MongoDB Settings
    # =========================================================================

    db_user: str = Field(
        default="",
        description="MongoDB Atlas user"
    )
    db_password: str = Field(
        default="",
        description="MongoDB Atlas password"
    )
    db_cluster_host: str = Field(
        default="cluster0.fmfkc.mongodb.net",
        description="MongoDB Atlas cluster host used in the SRV connection string"
    )
    db_app_name: str = Field(
        default="Cluster0",
        description="appName reported to the cluster"
    )
    mongodb_url: Optional[str] = Field(
        default=None,
        description="Full MongoDB connection URL; overrides the Atlas SRV URI when set"
    )
    database_name: str = Field(
        default="deltaCar",
        description="Logical database holding both collections"
    )
    services_collection: str = Field(
        default="services",
        description="Collection of service listings"
    )
    orders_collection: str = Field(
        default="orders",
        description="Collection of customer orders"
    )
    create_text_index: bool = Field(
        default=True,
        description="Create the services text index on startup"
    )

    # =========================================================================
    # Access Token Settings
    # =========================================================================

    access_token_secret: str = Field(
        default=DEFAULT_ACCESS_TOKEN_SECRET,
        description="Secret used to sign access tokens (MUST be changed in production)",
        min_length=1
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    jwt_access_token_expire_minutes: int = Field(
        default=60,
        description="Access token lifetime in minutes",
        gt=0,
        le=1440
    )

    # =========================================================================
    # CORS Settings
    # =========================================================================

    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Allow credentials in CORS"
    )
    cors_allow_methods: List[str] = Field(
        default=["*"],
        description="Allowed HTTP methods"
    )
    cors_allow_headers: List[str] = Field(
        default=["*"],
        description="Allowed HTTP headers"
    )

    # =========================================================================
    # Logging and Monitoring
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only shared-secret algorithms make sense with a single secret."""
        allowed = ["HS256", "HS384", "HS512"]
        if v not in allowed:
            raise ValueError(f"jwt_algorithm must be one of {allowed}, got: {v}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def uses_default_secret(self) -> bool:
        """Check if tokens are signed with the shipped placeholder secret."""
        return self.access_token_secret == DEFAULT_ACCESS_TOKEN_SECRET

    @property
    def mongodb_uri(self) -> str:
        """Connection string handed to the MongoDB driver."""
        if self.mongodb_url:
            return self.mongodb_url
        return (
            f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_cluster_host}/?retryWrites=true&w=majority&appName={self.db_app_name}"
        )

    @property
    def mongodb_target(self) -> str:
        """Connection target without credentials, safe to log."""
        return self.mongodb_uri.split("@")[-1]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once and shared
    across the application.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
