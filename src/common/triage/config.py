"""Triage copilot configuration.

This module provides a Pydantic-based configuration model for the triage
copilot, with support for environment variable loading.

Configuration Sources (in order of precedence, highest first):
    1. Explicit constructor arguments
    2. Environment variables (automatic via pydantic-settings)
    3. Default values

Environment Variables:
    Environment variables are prefixed with "CASE_TRIAGE_". Variable names are
    derived from field names in SCREAMING_SNAKE_CASE.

    Examples:
        CASE_TRIAGE_BACKEND_URL=https://example.my.salesforce.com/services/apexrest/triage
        CASE_TRIAGE_API_KEY=secret
        CASE_TRIAGE_LOG_LEVEL=debug

Example:
    >>> from src.common.triage.config import CopilotConfig
    >>> config = CopilotConfig()
    >>> config.snippet_length
    200
    >>> config = CopilotConfig(backend_url="http://localhost:9000/")
    >>> config.backend_url
    'http://localhost:9000'
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class CopilotConfig(BaseSettings):
    """Configuration for the triage copilot.

    Attributes:
        backend_url: Base URL of the triage backend. Procedure names are
            appended to it.
        api_key: Optional API key sent with every backend request. Stored as
            SecretStr to prevent accidental logging.
        request_timeout: Transport timeout per backend call in seconds.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        snippet_length: Length of the email body prefix stored in triage logs.
        default_routing: Routing shown before a triage assessment is loaded.

    Example:
        >>> config = CopilotConfig(log_level="debug")
        >>> config.log_level
        'DEBUG'
    """

    model_config = SettingsConfigDict(
        env_prefix="CASE_TRIAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend_url: str = Field(
        default="http://localhost:8080/services/apexrest/triage",
        description="Base URL of the triage backend",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key sent with backend requests",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Transport timeout per backend call in seconds",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    snippet_length: int = Field(
        default=200,
        ge=0,
        description="Length of the email body prefix stored in triage logs",
    )
    default_routing: str = Field(
        default="L1 Support",
        description="Routing shown before a triage assessment is loaded",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Remove trailing slashes so procedure paths join cleanly."""
        return v.rstrip("/")

    def configure_logging(self) -> None:
        """Configure root logging at this config's level."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format=LOG_FORMAT,
        )
