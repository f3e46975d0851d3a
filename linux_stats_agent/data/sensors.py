"""Temperature sensor collection from the hwmon class directory."""

from __future__ import annotations

import re
from pathlib import Path

from linux_stats_agent.models.resource_snapshot import ThermalReport, ThermalSensorReport

from .readers import read_float, read_text

_MILLI = 1000.0
_MIN_CELSIUS = -100.0
_MAX_CELSIUS = 200.0
_CHANNEL_INPUT = re.compile(r"^temp(\d+)_input$")


def _plausible(celsius: float | None) -> float | None:
    if celsius is None or not _MIN_CELSIUS <= celsius <= _MAX_CELSIUS:
        return None
    return celsius


def _read_millidegrees(path: Path) -> float | None:
    value = read_float(path)
    if value is None or not value.is_integer():
        return None
    return value / _MILLI


def _monitor_channels(monitor: Path) -> list[tuple[str, Path]]:
    channels: list[tuple[str, Path]] = []
    for candidate in sorted(monitor.glob("temp*_input")):
        match = _CHANNEL_INPUT.match(candidate.name)
        if match:
            channels.append((match.group(1), candidate))
    return channels


def collect_thermal_report(sys_root: Path) -> ThermalReport:
    """Read every ``hwmonN/tempM_input`` channel.

    A missing hwmon directory is not an error; the report is simply
    unavailable. Readings outside -100..200 C are discarded.
    """

    hwmon_root = sys_root / "class" / "hwmon"
    try:
        monitors = sorted(entry for entry in hwmon_root.iterdir() if entry.name.startswith("hwmon"))
    except OSError:
        return ThermalReport(available=False)

    sensors: list[ThermalSensorReport] = []
    for monitor in monitors:
        if not monitor.is_dir():
            continue
        for channel, input_path in _monitor_channels(monitor):
            celsius = _plausible(_read_millidegrees(input_path))
            if celsius is None:
                continue
            sensors.append(
                ThermalSensorReport(
                    name=f"{monitor.name}_temp{channel}",
                    label=read_text(monitor / f"temp{channel}_label"),
                    temp_celsius=celsius,
                    critical_temp=_read_millidegrees(monitor / f"temp{channel}_crit"),
                    max_temp=_read_millidegrees(monitor / f"temp{channel}_max"),
                )
            )

    return ThermalReport(available=bool(sensors), sensors=tuple(sensors))
