"""Dataclasses representing the versioned stats document and its sub-reports."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _to_wire(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    return value


def _serialise(snapshot: Any) -> dict[str, Any]:
    """Map dataclass fields onto camelCase keys, dropping absent values.

    ``None`` and empty sequences are omitted so that "not measured" never
    shows up on the wire as a zero.
    """

    payload: dict[str, Any] = {}
    for item in fields(snapshot):
        value = getattr(snapshot, item.name)
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        payload[_camel(item.name)] = _to_wire(value)
    return payload


class _WireMixin:
    __slots__ = ()

    def to_dict(self) -> dict[str, Any]:
        return _serialise(self)


@dataclass(frozen=True, slots=True)
class CPUReport(_WireMixin):
    available: bool = False
    usage_percent: float | None = None
    iowait_percent: float | None = None
    steal_percent: float | None = None
    loadavg1: float | None = None
    loadavg5: float | None = None
    loadavg15: float | None = None
    core_count: int | None = None


@dataclass(frozen=True, slots=True)
class MemoryReport(_WireMixin):
    available: bool = False
    total_bytes: int | None = None
    available_bytes: int | None = None
    used_bytes: int | None = None
    buffers_bytes: int | None = None
    cached_bytes: int | None = None
    swap_total_bytes: int | None = None
    swap_used_bytes: int | None = None
    swap_cached_bytes: int | None = None
    psi_mem_avg10: float | None = None
    psi_mem_avg60: float | None = None
    psi_mem_avg300: float | None = None


@dataclass(frozen=True, slots=True)
class DiskDeviceReport(_WireMixin):
    name: str
    read_bytes_per_sec: float | None = None
    write_bytes_per_sec: float | None = None
    reads_per_sec: float | None = None
    writes_per_sec: float | None = None


@dataclass(frozen=True, slots=True)
class FilesystemReport(_WireMixin):
    mount_point: str
    device: str
    fs_type: str | None = None
    total_bytes: int | None = None
    used_bytes: int | None = None
    available_bytes: int | None = None
    usage_percent: float | None = None


@dataclass(frozen=True, slots=True)
class DiskReport(_WireMixin):
    available: bool = False
    devices: tuple[DiskDeviceReport, ...] = ()
    filesystems: tuple[FilesystemReport, ...] = ()


@dataclass(frozen=True, slots=True)
class NetworkInterfaceReport(_WireMixin):
    name: str
    rx_bytes_per_sec: float | None = None
    tx_bytes_per_sec: float | None = None
    ipv4_address: str | None = None
    ipv6_address: str | None = None
    mac_address: str | None = None


@dataclass(frozen=True, slots=True)
class NetworkReport(_WireMixin):
    available: bool = False
    interfaces: tuple[NetworkInterfaceReport, ...] = ()
    external_ipv4: str | None = None


@dataclass(frozen=True, slots=True)
class ThermalSensorReport(_WireMixin):
    name: str
    label: str | None = None
    temp_celsius: float | None = None
    critical_temp: float | None = None
    max_temp: float | None = None


@dataclass(frozen=True, slots=True)
class ThermalReport(_WireMixin):
    available: bool = False
    sensors: tuple[ThermalSensorReport, ...] = ()


@dataclass(frozen=True, slots=True)
class GPUDeviceReport(_WireMixin):
    name: str
    utilization_percent: float | None = None
    memory_used_bytes: int | None = None
    memory_total_bytes: int | None = None
    temp_celsius: float | None = None


@dataclass(frozen=True, slots=True)
class GPUReport(_WireMixin):
    available: bool = False
    devices: tuple[GPUDeviceReport, ...] = ()


@dataclass(frozen=True, slots=True)
class FeaturesReport(_WireMixin):
    smart_available: bool | None = None
    nvme_available: bool | None = None
    thermal_available: bool | None = None
    gpu_available: bool | None = None


@dataclass(frozen=True, slots=True)
class StatsDocument(_WireMixin):
    """One complete collection pass, as served on ``/v1/stats``."""

    schema: str
    timestamp: int
    hostname: str
    agent_version: str
    cpu: CPUReport | None = None
    memory: MemoryReport | None = None
    disk: DiskReport | None = None
    network: NetworkReport | None = None
    thermals: ThermalReport | None = None
    gpu: GPUReport | None = None
    features: FeaturesReport | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)
