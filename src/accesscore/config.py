"""Configuration for accesscore.

Pydantic-validated settings shared by the logging setup and the
enforcement helpers. Environment variables are read in exactly one place,
:func:`load_config_from_env`; everything else receives an ``AccessConfig``.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_TRUTHY = ("true", "1", "yes", "on")


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnforcementMode(str, Enum):
    """Three-state enforcement toggle for :mod:`accesscore.guard`.

    - ``off``     - guards never raise; decisions are not even logged.
    - ``warn``    - denials are logged as WARNING but the call proceeds.
    - ``enforce`` - denials raise ``PermissionDeniedError`` (production).

    The query functions (``has_permission`` and friends) are unaffected:
    they always return the real decision.
    """

    OFF = "off"
    WARN = "warn"
    ENFORCE = "enforce"


class AccessConfig(BaseModel):
    """Settings for accesscore.

    Environment variables:
        LOG_LEVEL             - logging level (default: INFO)
        LOG_JSON              - JSON log format (default: false)
        SERVICE_NAME          - service name attached to the root logger
        ACCESS_LOG_DECISIONS  - log every denied check at DEBUG (default: false)
        ACCESS_ENFORCEMENT    - off | warn | enforce (default: enforce)
    """

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the service",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name for logger identification",
    )
    log_decisions: bool = Field(
        default=False,
        description="Log denied permission checks at DEBUG level",
    )
    enforcement: EnforcementMode = Field(
        default=EnforcementMode.ENFORCE,
        description="Guard behaviour on denial: off, warn or enforce",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("enforcement", mode="before")
    @classmethod
    def validate_enforcement(cls, v: str | EnforcementMode) -> EnforcementMode:
        if isinstance(v, EnforcementMode):
            return v
        if isinstance(v, str):
            try:
                return EnforcementMode(v.strip().lower())
            except ValueError:
                raise ValueError(f"Invalid enforcement mode: {v}. Must be one of {[e.value for e in EnforcementMode]}")
        raise ValueError(f"Enforcement mode must be string or EnforcementMode enum, got {type(v)}")

    model_config = {
        "extra": "forbid",
    }


def load_config_from_env() -> AccessConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed for accesscore settings.

    Returns:
        AccessConfig instance with values from environment or defaults.
    """
    return AccessConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
        log_decisions=os.getenv("ACCESS_LOG_DECISIONS", "false").lower() in _TRUTHY,
        enforcement=os.getenv("ACCESS_ENFORCEMENT", "enforce"),
    )


# ── Process-wide instance ────────────────────────────────

_config: AccessConfig | None = None


def get_config() -> AccessConfig:
    """Get the active config, loading it from the environment on first use."""
    global _config
    if _config is None:
        _config = load_config_from_env()
    return _config


def set_config(config: AccessConfig) -> None:
    """Install an explicit config (application startup, tests)."""
    global _config
    _config = config


def reset_config() -> None:
    """Drop the active config so the next access reloads it (for testing)."""
    global _config
    _config = None


__all__ = [
    "AccessConfig",
    "EnforcementMode",
    "LogLevel",
    "get_config",
    "load_config_from_env",
    "reset_config",
    "set_config",
]
