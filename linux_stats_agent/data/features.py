"""Availability flags for auxiliary subsystems."""

from __future__ import annotations

from pathlib import Path

from linux_stats_agent.models.resource_snapshot import FeaturesReport, ThermalReport

from .readers import read_lines

_NVME_MARKER = "nvme"


def has_nvme_devices(proc_root: Path) -> bool:
    try:
        lines = read_lines(proc_root / "diskstats")
    except OSError:
        return False
    return any(_NVME_MARKER in line for line in lines)


def collect_features_report(proc_root: Path, thermals: ThermalReport | None) -> FeaturesReport:
    # SMART and GPU need vendor tooling, which the agent never invokes
    return FeaturesReport(
        smart_available=False,
        nvme_available=has_nvme_devices(proc_root),
        thermal_available=bool(thermals and thermals.available),
        gpu_available=False,
    )
