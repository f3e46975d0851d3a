"""Helpers for reading kernel pseudo-files."""

from __future__ import annotations

from pathlib import Path


def read_lines(path: Path) -> list[str]:
    """Return the lines of a required pseudo-file; ``OSError`` propagates."""

    return path.read_text(encoding="utf-8", errors="replace").splitlines()


def describe_failure(path: Path, exc: OSError) -> str:
    reason = exc.strerror or exc.__class__.__name__
    return f"failed to read {path}: {reason}"


def read_text(path: Path) -> str | None:
    try:
        value = path.read_text(encoding="utf-8", errors="replace").strip()
    except OSError:
        return None
    return value or None


def read_float(path: Path) -> float | None:
    text = read_text(path)
    if text is None:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value


def parse_int(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


def parse_float(token: str) -> float | None:
    try:
        return float(token)
    except ValueError:
        return None
