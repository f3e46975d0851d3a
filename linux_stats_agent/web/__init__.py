"""HTTP exporter package for the Linux stats agent."""

from __future__ import annotations

__all__ = [
    "create_app",
    "main",
]

from .server import create_app, main  # noqa: E402
