"""Memory data collection from ``/proc/meminfo`` and pressure-stall files."""

from __future__ import annotations

from pathlib import Path

from linux_stats_agent.core.errors import ErrorLog
from linux_stats_agent.models.resource_snapshot import MemoryReport

from .readers import describe_failure, parse_float, parse_int, read_lines

_KIB = 1024
_PSI_WINDOWS = ("avg10", "avg60", "avg300")


def parse_meminfo(lines: list[str]) -> dict[str, int]:
    """Map ``Key: value kB`` lines to byte counts; unparsable lines are skipped."""

    values: dict[str, int] = {}
    for line in lines:
        fields = line.split()
        if len(fields) < 2:
            continue
        amount = parse_int(fields[1])
        if amount is None:
            continue
        values[fields[0].rstrip(":")] = amount * _KIB
    return values


def read_memory_pressure(proc_root: Path) -> dict[str, float]:
    """Return the ``some`` averages; missing PSI support yields an empty dict."""

    try:
        lines = read_lines(proc_root / "pressure" / "memory")
    except OSError:
        return {}
    averages: dict[str, float] = {}
    for line in lines:
        if not line.startswith("some "):
            continue
        for token in line.split()[1:]:
            key, _, raw = token.partition("=")
            if key in _PSI_WINDOWS:
                value = parse_float(raw)
                if value is not None:
                    averages[key] = value
    return averages


def _difference(minuend: int | None, subtrahend: int | None) -> int | None:
    if minuend is None or subtrahend is None:
        return None
    return minuend - subtrahend


def collect_memory_report(proc_root: Path, errors: ErrorLog) -> MemoryReport:
    meminfo_path = proc_root / "meminfo"
    try:
        lines = read_lines(meminfo_path)
    except OSError as exc:
        errors.record("memory", describe_failure(meminfo_path, exc))
        return MemoryReport(available=False)

    info = parse_meminfo(lines)
    total = info.get("MemTotal")
    available = info.get("MemAvailable")
    pressure = read_memory_pressure(proc_root)
    return MemoryReport(
        available=bool(info or pressure),
        total_bytes=total,
        available_bytes=available,
        used_bytes=_difference(total, available),
        buffers_bytes=info.get("Buffers"),
        cached_bytes=info.get("Cached"),
        swap_total_bytes=info.get("SwapTotal"),
        swap_used_bytes=_difference(info.get("SwapTotal"), info.get("SwapFree")),
        swap_cached_bytes=info.get("SwapCached"),
        psi_mem_avg10=pressure.get("avg10"),
        psi_mem_avg60=pressure.get("avg60"),
        psi_mem_avg300=pressure.get("avg300"),
    )
