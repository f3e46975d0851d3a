"""Detection of the pseudo-filesystem roots and platform quirks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from linux_stats_agent.core.config import MountFixMode

logger = logging.getLogger(__name__)

_CGROUP_MARKERS = ("docker", "containerd", "kubepods")


@dataclass(frozen=True)
class Environment:
    """Resolved read roots; fixed for the lifetime of a collector."""

    proc_root: Path = Path("/proc")
    sys_root: Path = Path("/sys")
    apply_mount_fix: bool = False


@dataclass(frozen=True)
class EnvironmentProbe:
    """Candidate locations inspected when resolving the environment.

    The defaults describe a real host; tests point them at a temporary tree.
    """

    proc_root: Path = Path("/proc")
    sys_root: Path = Path("/sys")
    host_proc_root: Path = Path("/host/proc")
    host_sys_root: Path = Path("/host/sys")
    dockerenv: Path = Path("/.dockerenv")
    init_cgroup: Path = Path("/proc/1/cgroup")
    truenas_release: Path = Path("/etc/truenas-release")
    os_release: Path = Path("/etc/os-release")

    def is_container(self) -> bool:
        if self.dockerenv.exists():
            return True
        try:
            content = self.init_cgroup.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
        return any(marker in content for marker in _CGROUP_MARKERS)

    def is_truenas(self) -> bool:
        if self.truenas_release.exists():
            return True
        try:
            content = self.os_release.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
        return "truenas" in content.lower()

    def resolve(self, mount_fix: MountFixMode = MountFixMode.AUTO) -> Environment:
        proc_root = self.proc_root
        sys_root = self.sys_root
        if self.host_proc_root.exists():
            proc_root = self.host_proc_root
            logger.info("using %s for host-mounted proc", proc_root)
        if self.host_sys_root.exists():
            sys_root = self.host_sys_root
            logger.info("using %s for host-mounted sys", sys_root)
        logger.info("monitoring paths - proc: %s, sys: %s", proc_root, sys_root)

        if mount_fix is MountFixMode.ON:
            apply_fix = True
        elif mount_fix is MountFixMode.OFF:
            apply_fix = False
        else:
            apply_fix = self.is_container() and self.is_truenas()
        if apply_fix:
            logger.info("pooled-storage mount correction enabled (mode=%s)", mount_fix.value)
        return Environment(proc_root=proc_root, sys_root=sys_root, apply_mount_fix=apply_fix)


def detect_environment(mount_fix: MountFixMode = MountFixMode.AUTO) -> Environment:
    return EnvironmentProbe().resolve(mount_fix)
