"""Linux stats agent: procfs/sysfs telemetry served as versioned JSON."""

from __future__ import annotations

__all__ = [
    "StatsCollector",
    "create_app",
    "core",
    "data",
    "models",
]

from .web import create_app  # noqa: E402
from .web.collector import StatsCollector  # noqa: E402
