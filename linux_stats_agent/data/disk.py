"""Block-device throughput and filesystem usage collection."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import psutil

from linux_stats_agent.core.errors import ErrorLog
from linux_stats_agent.models.resource_snapshot import DiskDeviceReport, FilesystemReport

from .counters import DISK_FAMILY, CounterSample, CounterStore, per_second
from .readers import describe_failure, parse_int, read_lines

SECTOR_SIZE = 512
_VIRTUAL_PREFIXES = ("loop", "ram")
# name, reads completed, sectors read, writes completed, sectors written
_NAME, _READS, _READ_SECTORS, _WRITES, _WRITE_SECTORS = 2, 3, 5, 7, 9
_MIN_FIELDS = 14

SKIPPED_FS_TYPES = frozenset(
    {
        "proc", "sysfs", "tmpfs", "devtmpfs", "devpts", "cgroup", "cgroup2",
        "nsfs", "overlay", "squashfs", "autofs", "mqueue", "hugetlbfs",
        "debugfs", "tracefs", "securityfs", "pstore", "bpf", "configfs",
        "fusectl", "binfmt_misc", "ramfs", "efivarfs", "rpc_pipefs",
    }
)
POOL_PREFIX = "/mnt/"


def is_whole_disk(name: str) -> bool:
    """Whether ``name`` is a whole, non-virtual block device.

    ``sda`` and ``nvme0n1`` pass; ``sda1``, ``nvme0n1p1`` and ``loop0`` do not.
    """

    if not name or name.startswith(_VIRTUAL_PREFIXES):
        return False
    if name[-1].isdigit():
        return name.startswith("nvme") and "n" in name and "p" not in name
    return True


def collect_disk_devices(
    proc_root: Path, store: CounterStore, errors: ErrorLog, now: float
) -> list[DiskDeviceReport]:
    path = proc_root / "diskstats"
    try:
        lines = read_lines(path)
    except OSError as exc:
        errors.record("disk", describe_failure(path, exc))
        return []

    devices: list[DiskDeviceReport] = []
    for line in lines:
        fields = line.split()
        if len(fields) < _MIN_FIELDS:
            continue
        name = fields[_NAME]
        if not is_whole_disk(name):
            continue
        counters = [parse_int(fields[index]) for index in (_READS, _READ_SECTORS, _WRITES, _WRITE_SECTORS)]
        if any(value is None for value in counters):
            continue
        reads, read_sectors, writes, write_sectors = counters
        sample = CounterSample(
            timestamp=now,
            values=(read_sectors * SECTOR_SIZE, write_sectors * SECTOR_SIZE, reads, writes),
        )
        rates = per_second(store.exchange(DISK_FAMILY, name, sample), sample)
        if rates is None:
            devices.append(DiskDeviceReport(name=name))
            continue
        read_bps, write_bps, reads_ps, writes_ps = rates
        devices.append(
            DiskDeviceReport(
                name=name,
                read_bytes_per_sec=read_bps,
                write_bytes_per_sec=write_bps,
                reads_per_sec=reads_ps,
                writes_per_sec=writes_ps,
            )
        )
    return devices


@dataclass(frozen=True, slots=True)
class MountRecord:
    device: str
    mount_point: str
    fs_type: str


def read_mounts(path: Path) -> list[MountRecord]:
    """Real filesystems from a mounts table, first occurrence per mount point."""

    records: list[MountRecord] = []
    seen: set[str] = set()
    for line in read_lines(path):
        fields = line.split()
        if len(fields) < 3:
            continue
        device, mount_point, fs_type = fields[:3]
        if fs_type in SKIPPED_FS_TYPES or mount_point in seen:
            continue
        seen.add(mount_point)
        records.append(MountRecord(device=device, mount_point=mount_point, fs_type=fs_type))
    return records


def _percent(used: int, total: int) -> float | None:
    if total <= 0:
        return None
    return used / total * 100.0


def filesystem_usage(record: MountRecord) -> FilesystemReport:
    report = FilesystemReport(mount_point=record.mount_point, device=record.device, fs_type=record.fs_type)
    try:
        usage = psutil.disk_usage(record.mount_point)
    except OSError:
        return report
    total = int(usage.total)
    # psutil reports used as total minus free blocks; free may briefly exceed total
    used = max(0, int(usage.used))
    return replace(
        report,
        total_bytes=total,
        used_bytes=used,
        available_bytes=int(usage.free),
        usage_percent=_percent(used, total),
    )


def _pool_relative(mount_point: str) -> str | None:
    if not mount_point.startswith(POOL_PREFIX):
        return None
    return mount_point[len(POOL_PREFIX):]


def fold_pool_mounts(filesystems: list[FilesystemReport]) -> list[FilesystemReport]:
    """Collapse nested pool datasets into their top-level ``/mnt/<pool>`` entry.

    Datasets two or more levels below ``/mnt/`` are dropped and their used
    bytes are summed into the top-level mount. The top-level keeps its own
    available figure and its total becomes ``used + available``.
    """

    folded: list[FilesystemReport] = []
    for fs in filesystems:
        relative = _pool_relative(fs.mount_point)
        if relative is None:
            folded.append(fs)
            continue
        if "/" in relative:
            continue
        if fs.used_bytes is None or fs.available_bytes is None:
            folded.append(fs)
            continue
        child_prefix = fs.mount_point + "/"
        used = sum(
            child.used_bytes
            for child in filesystems
            if child.mount_point.startswith(child_prefix) and child.used_bytes
        )
        if used == 0:
            used = fs.used_bytes
        total = used + fs.available_bytes
        folded.append(
            replace(
                fs,
                used_bytes=used,
                total_bytes=total,
                usage_percent=_percent(used, total),
            )
        )
    return folded


def collect_filesystems(proc_root: Path, errors: ErrorLog, apply_mount_fix: bool) -> list[FilesystemReport]:
    path = proc_root / "mounts"
    try:
        records = read_mounts(path)
    except OSError as exc:
        errors.record("filesystem", describe_failure(path, exc))
        return []
    filesystems = [filesystem_usage(record) for record in records]
    if apply_mount_fix:
        filesystems = fold_pool_mounts(filesystems)
    return filesystems
