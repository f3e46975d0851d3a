"""Data provider package."""

from .counters import CounterSample, CounterStore
from .cpu import collect_cpu_report
from .disk import collect_disk_devices, collect_filesystems
from .environment import Environment, EnvironmentProbe, detect_environment
from .features import collect_features_report
from .gpu import collect_gpu_report
from .memory import collect_memory_report
from .network import collect_network_report
from .sensors import collect_thermal_report

__all__ = [
    "CounterSample",
    "CounterStore",
    "Environment",
    "EnvironmentProbe",
    "collect_cpu_report",
    "collect_disk_devices",
    "collect_features_report",
    "collect_filesystems",
    "collect_gpu_report",
    "collect_memory_report",
    "collect_network_report",
    "collect_thermal_report",
    "detect_environment",
]
