"""Models exported by the Linux stats agent."""

from .resource_snapshot import (
    CPUReport,
    DiskDeviceReport,
    DiskReport,
    FeaturesReport,
    FilesystemReport,
    GPUDeviceReport,
    GPUReport,
    MemoryReport,
    NetworkInterfaceReport,
    NetworkReport,
    StatsDocument,
    ThermalReport,
    ThermalSensorReport,
)

__all__ = [
    "CPUReport",
    "DiskDeviceReport",
    "DiskReport",
    "FeaturesReport",
    "FilesystemReport",
    "GPUDeviceReport",
    "GPUReport",
    "MemoryReport",
    "NetworkInterfaceReport",
    "NetworkReport",
    "StatsDocument",
    "ThermalReport",
    "ThermalSensorReport",
]
