"""GPU data provider.

Vendor telemetry (NVML, ROCm SMI) is not collected; the report is always
unavailable so clients can tell "no data" from "no GPU".
"""

from __future__ import annotations

from linux_stats_agent.models.resource_snapshot import GPUReport


def collect_gpu_report() -> GPUReport:
    return GPUReport(available=False)
