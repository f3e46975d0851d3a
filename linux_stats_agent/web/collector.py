"""On-demand stats collection for the agent's HTTP endpoint."""

from __future__ import annotations

import logging
import socket
import threading
import time
from typing import Any, Callable, TypeVar

from linux_stats_agent.core import AGENT_VERSION, SCHEMA_VERSION, ErrorLog
from linux_stats_agent.data import (
    CounterStore,
    Environment,
    collect_cpu_report,
    collect_disk_devices,
    collect_features_report,
    collect_filesystems,
    collect_gpu_report,
    collect_memory_report,
    collect_network_report,
    collect_thermal_report,
    detect_environment,
)
from linux_stats_agent.models import (
    CPUReport,
    DiskReport,
    FeaturesReport,
    GPUReport,
    MemoryReport,
    NetworkReport,
    StatsDocument,
    ThermalReport,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StatsCollector:
    """Runs one full collection pass per :meth:`collect` call.

    The counter store, the error memo and the per-pass error list are the only
    state kept between calls, and all of it is guarded by one lock held for
    the whole pass. Counter samples are stamped with ``monotonic`` so rates
    survive wall-clock steps; ``clock`` only feeds the document timestamp.
    """

    def __init__(
        self,
        environment: Environment | None = None,
        interval: float = 1.0,
        *,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
        hostname: Callable[[], str] = socket.gethostname,
    ) -> None:
        self._environment = environment or detect_environment()
        self._interval = interval
        self._clock = clock
        self._monotonic = monotonic
        self._hostname = hostname
        self._lock = threading.Lock()
        self._counters = CounterStore()
        self._errors = ErrorLog(logger)
        logger.debug(
            "collector ready (interval hint %.3fs, proc=%s, sys=%s, mount fix=%s)",
            interval,
            self._environment.proc_root,
            self._environment.sys_root,
            self._environment.apply_mount_fix,
        )

    @property
    def environment(self) -> Environment:
        return self._environment

    def collect(self) -> StatsDocument:
        """Return a complete document; failures are reported inline, never raised."""

        with self._lock:
            self._errors.begin_pass()
            now = self._clock()
            tick = self._monotonic()
            env = self._environment

            cpu = self._safe_call(
                "cpu",
                lambda: collect_cpu_report(env.proc_root, self._counters, self._errors, tick),
                CPUReport,
            )
            memory = self._safe_call(
                "memory",
                lambda: collect_memory_report(env.proc_root, self._errors),
                MemoryReport,
            )
            disk = self._collect_disk(tick)
            network = self._safe_call(
                "network",
                lambda: collect_network_report(env.proc_root, env.sys_root, self._counters, self._errors, tick),
                NetworkReport,
            )
            thermals = self._safe_call("thermal", lambda: collect_thermal_report(env.sys_root), ThermalReport)
            gpu = self._safe_call("gpu", collect_gpu_report, GPUReport)
            features = self._safe_call(
                "features",
                lambda: collect_features_report(env.proc_root, thermals),
                FeaturesReport,
            )

            return StatsDocument(
                schema=SCHEMA_VERSION,
                timestamp=int(now),
                hostname=self._safe_hostname(),
                agent_version=AGENT_VERSION,
                cpu=cpu,
                memory=memory,
                disk=disk,
                network=network,
                thermals=thermals,
                gpu=gpu,
                features=features,
                errors=self._errors.errors,
            )

    def _collect_disk(self, tick: float) -> DiskReport:
        env = self._environment
        devices = self._safe_call(
            "disk",
            lambda: collect_disk_devices(env.proc_root, self._counters, self._errors, tick),
            list,
        )
        filesystems = self._safe_call(
            "filesystem",
            lambda: collect_filesystems(env.proc_root, self._errors, env.apply_mount_fix),
            list,
        )
        return DiskReport(
            available=bool(devices or filesystems),
            devices=tuple(devices),
            filesystems=tuple(filesystems),
        )

    def _safe_call(self, key: str, fn: Callable[[], T], fallback: Callable[[], Any]) -> T:
        try:
            return fn()
        except Exception as exc:
            message = f"unexpected {exc.__class__.__name__}: {exc}"
            logger.debug("provider '%s' failed during collection", key, exc_info=exc)
            self._errors.record(key, message)
            return fallback()

    def _safe_hostname(self) -> str:
        try:
            return self._hostname()
        except OSError:
            return ""
