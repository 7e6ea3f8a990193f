"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the service starts
against a local MongoDB without any configuration.  In a production
deployment set ``MONGODB_URI`` (or the ``DB_USER``/``DB_PASS`` pair for
the hosted cluster) through the environment.
"""

import os
from dataclasses import dataclass
from typing import List
from urllib.parse import quote_plus


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Volunteer Hub API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Full connection string.  When empty, ``mongodb_url`` falls back to
    # the Atlas cluster built from ``DB_USER``/``DB_PASS``, or to a local
    # server when no credentials are present either.
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    db_user: str = os.getenv("DB_USER", "")
    db_pass: str = os.getenv("DB_PASS", "")
    db_cluster: str = os.getenv("DB_CLUSTER", "cluster0.mkgqk.mongodb.net")
    database_name: str = os.getenv("DATABASE_NAME", "Volunteer_Hub")
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    # Comma‑separated list of allowed origins, ``*`` allows any.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Number of posts returned by the home page teaser listing.
    teaser_limit: int = int(os.getenv("TEASER_LIMIT", "6"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    @property
    def mongodb_url(self) -> str:
        if self.mongodb_uri:
            return self.mongodb_uri
        if self.db_user and self.db_pass:
            return (
                f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}@{self.db_cluster}/"
                "?retryWrites=true&w=majority&appName=Cluster0"
            )
        return "mongodb://localhost:27017"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
