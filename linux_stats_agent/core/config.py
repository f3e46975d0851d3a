"""Global configuration values for the Linux stats agent."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Mapping


APP_NAME = "MenuBarStats Linux Agent"
AGENT_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

DEFAULT_PORT = 9955
DEFAULT_INTERVAL_MS = 1000
MIN_INTERVAL_MS = 100
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS = ("debug", "info", "warning", "error")


class ConfigError(ValueError):
    """Raised when the process environment holds an unusable setting."""


class MountFixMode(enum.Enum):
    """Override for the pooled-storage mount correction."""

    AUTO = "auto"
    ON = "on"
    OFF = "off"

    @classmethod
    def parse(cls, raw: str | None) -> "MountFixMode":
        value = (raw or "").strip().lower()
        if value in ("on", "true", "1"):
            return cls.ON
        if value in ("off", "false", "0"):
            return cls.OFF
        return cls.AUTO


@dataclass(frozen=True)
class AgentSettings:
    """Bootstrap settings read once from the environment."""

    port: int = DEFAULT_PORT
    bind: str = "0.0.0.0"
    interval_ms: int = DEFAULT_INTERVAL_MS  # informational only
    token: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    mount_fix: MountFixMode = MountFixMode.AUTO

    @property
    def auth_enabled(self) -> bool:
        return bool(self.token)

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AgentSettings":
        env = os.environ if environ is None else environ

        def _get(key: str, default: str) -> str:
            value = env.get(key, "")
            return value if value else default

        raw_port = _get("AGENT_PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"invalid AGENT_PORT: {raw_port}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"invalid AGENT_PORT: {raw_port} (must be 1-65535)")

        raw_interval = _get("AGENT_INTERVAL_MS", str(DEFAULT_INTERVAL_MS))
        try:
            interval_ms = int(raw_interval)
        except ValueError:
            interval_ms = -1
        if interval_ms < MIN_INTERVAL_MS:
            raise ConfigError(
                f"invalid AGENT_INTERVAL_MS: {raw_interval} (must be >= {MIN_INTERVAL_MS})"
            )

        log_level = _get("AGENT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().lower()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"invalid AGENT_LOG_LEVEL: {log_level}")

        return cls(
            port=port,
            bind=_get("AGENT_BIND", "0.0.0.0"),
            interval_ms=interval_ms,
            token=env.get("AGENT_TOKEN") or None,
            log_level=log_level,
            mount_fix=MountFixMode.parse(env.get("MENUBAR_TRUENAS_MNT_FIX")),
        )
