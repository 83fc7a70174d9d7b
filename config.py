"""
Centralized configuration for the Search Console datapoint service.

Loads all environment variables and provides typed configuration objects.
No hardcoded secrets - credentials must come from the environment.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class SearchConsoleConfig:
    """Search Console API and site configuration."""

    credentials_file: Optional[str] = field(
        default_factory=lambda: os.getenv("SEARCH_CONSOLE_CREDENTIALS_FILE"))
    site_url: str = field(
        default_factory=lambda: os.getenv("SITE_URL", ""))
    permalink_template: str = field(
        default_factory=lambda: os.getenv(
            "PERMALINK_TEMPLATE", "{site_url}?p={post_id}"))
    # Search Console data lags a few days behind
    date_offset: int = field(default_factory=lambda: int(
        os.getenv("SEARCH_CONSOLE_DATE_OFFSET", "3")))
    has_data_ttl: int = field(default_factory=lambda: int(
        os.getenv("HAS_DATA_TTL", str(2 * 3600))))


@dataclass
class StorageConfig:
    """Options and transient storage configuration."""

    backend: str = field(default_factory=lambda: os.getenv(
        "STORAGE_BACKEND", "memory").lower())
    host: str = field(default_factory=lambda: os.getenv(
        "REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(
        os.getenv("REDIS_PORT", "6379")))
    password: Optional[str] = field(
        default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    ssl: bool = field(default_factory=lambda: os.getenv(
        "REDIS_SSL", "false").lower() == "true")

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        protocol = "rediss" if self.ssl else "redis"
        auth = f":{self.password}@" if self.password else ""
        return f"{protocol}://{auth}{self.host}:{self.port}/{self.db}"


@dataclass
class ServerConfig:
    """Server runtime configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(
        os.getenv("SERVER_PORT", "8001")))
    debug: bool = field(default_factory=lambda: os.getenv(
        "DEBUG", "false").lower() == "true")
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(",")
    )


@dataclass
class Config:
    """
    Root configuration object aggregating all config sections.

    Usage:
        config = Config()
        site_url = config.search_console.site_url
        redis_url = config.storage.url
    """

    search_console: SearchConsoleConfig = field(default_factory=SearchConsoleConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of warnings.

        Returns:
            List of validation messages (empty if all valid)
        """
        warnings = []

        if not self.search_console.credentials_file:
            warnings.append(
                "SEARCH_CONSOLE_CREDENTIALS_FILE not set - Search Console calls will fail")

        if not self.search_console.site_url:
            warnings.append("SITE_URL not set - no reference site URL available")

        if self.storage.backend not in ("memory", "redis"):
            warnings.append(
                f"Unknown STORAGE_BACKEND '{self.storage.backend}' - using in-memory storage")

        if (self.storage.backend == "redis" and not self.storage.password
                and not self.server.debug):
            warnings.append("REDIS_PASSWORD not set in production mode")

        return warnings


# Global config instance - import and use this
config = Config()
