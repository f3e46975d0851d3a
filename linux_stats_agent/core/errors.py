"""Per-pass error collection with process-lifetime log suppression."""

from __future__ import annotations

import logging


logger = logging.getLogger(__name__)


class ErrorLog:
    """Collects the errors of one collection pass.

    Every error is reported inline on the current pass, but each distinct
    ``(component, message)`` pair is only written to the log the first time it
    is seen. Not thread-safe on its own; the collector serialises access.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger
        self._seen: set[tuple[str, str]] = set()
        self._current: list[str] = []

    def begin_pass(self) -> None:
        self._current = []

    def record(self, component: str, message: str) -> None:
        key = (component, message)
        if key not in self._seen:
            self._seen.add(key)
            self._log.warning("%s: %s", component, message)
        self._current.append(f"{component}: {message}")

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(self._current)
