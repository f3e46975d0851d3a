"""Core utilities for the Linux stats agent."""

from __future__ import annotations

from .config import (
    AGENT_VERSION,
    APP_NAME,
    SCHEMA_VERSION,
    AgentSettings,
    ConfigError,
    MountFixMode,
)
from .errors import ErrorLog

__all__ = [
    "AGENT_VERSION",
    "APP_NAME",
    "SCHEMA_VERSION",
    "AgentSettings",
    "ConfigError",
    "ErrorLog",
    "MountFixMode",
]
