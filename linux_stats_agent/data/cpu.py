"""CPU data collection from ``/proc/stat``, ``/proc/cpuinfo`` and ``/proc/loadavg``."""

from __future__ import annotations

from pathlib import Path

from linux_stats_agent.core.errors import ErrorLog
from linux_stats_agent.models.resource_snapshot import CPUReport

from .counters import CPU_FAMILY, CounterSample, CounterStore, counter_deltas
from .readers import describe_failure, parse_float, parse_int, read_lines

# user nice system idle iowait irq softirq steal
_TIME_FIELDS = 8
_IDLE, _IOWAIT, _STEAL = 3, 4, 7


def _parse_cpu_times(lines: list[str]) -> tuple[int, ...] | None:
    for line in lines:
        if not line.startswith("cpu "):
            continue
        fields = line.split()[1 : _TIME_FIELDS + 1]
        if len(fields) < _TIME_FIELDS:
            return None
        values = [parse_int(field) for field in fields]
        if any(value is None for value in values):
            return None
        return tuple(values)  # type: ignore[arg-type]
    return None


def _usage_percentages(deltas: tuple[int, ...]) -> tuple[float, float, float] | None:
    total = sum(deltas)
    if total <= 0:
        return None
    busy = (total - deltas[_IDLE]) / total * 100.0
    iowait = deltas[_IOWAIT] / total * 100.0
    steal = deltas[_STEAL] / total * 100.0
    return busy, iowait, steal


def count_cores(proc_root: Path) -> int | None:
    try:
        lines = read_lines(proc_root / "cpuinfo")
    except OSError:
        return None
    count = sum(1 for line in lines if line.startswith("processor"))
    return count or None


def read_load_average(proc_root: Path) -> tuple[float | None, float | None, float | None]:
    try:
        lines = read_lines(proc_root / "loadavg")
    except OSError:
        return None, None, None
    fields = lines[0].split() if lines else []
    if len(fields) < 3:
        return None, None, None
    return parse_float(fields[0]), parse_float(fields[1]), parse_float(fields[2])


def collect_cpu_report(proc_root: Path, store: CounterStore, errors: ErrorLog, now: float) -> CPUReport:
    """Return busy/iowait/steal percentages plus load and core count.

    Percentages need a previous sample, so the first pass only carries the
    load averages and core count and reports ``available=False``.
    """

    usage: tuple[float, float, float] | None = None
    stat_path = proc_root / "stat"
    try:
        lines = read_lines(stat_path)
    except OSError as exc:
        errors.record("cpu", describe_failure(stat_path, exc))
    else:
        times = _parse_cpu_times(lines)
        if times is not None:
            sample = CounterSample(timestamp=now, values=times)
            previous = store.exchange(CPU_FAMILY, "total", sample)
            deltas = counter_deltas(previous, sample)
            if deltas is not None:
                usage = _usage_percentages(deltas)

    load1, load5, load15 = read_load_average(proc_root)
    busy, iowait, steal = usage if usage is not None else (None, None, None)
    return CPUReport(
        available=usage is not None,
        usage_percent=busy,
        iowait_percent=iowait,
        steal_percent=steal,
        loadavg1=load1,
        loadavg5=load5,
        loadavg15=load15,
        core_count=count_cores(proc_root),
    )
