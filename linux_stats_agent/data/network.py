"""Network throughput collection from ``/proc/net/dev``."""

from __future__ import annotations

from pathlib import Path

from linux_stats_agent.core.errors import ErrorLog
from linux_stats_agent.models.resource_snapshot import NetworkInterfaceReport, NetworkReport

from .counters import NETWORK_FAMILY, CounterSample, CounterStore, per_second
from .readers import describe_failure, parse_int, read_lines, read_text

_HEADER_LINES = 2
_RX_BYTES, _TX_BYTES = 0, 8
_MIN_FIELDS = 16
_LOOPBACK = "lo"
_NULL_MAC = "00:00:00:00:00:00"


def read_mac_address(sys_root: Path, name: str) -> str | None:
    mac = read_text(sys_root / "class" / "net" / name / "address")
    if mac is None or mac == _NULL_MAC:
        return None
    return mac


def collect_network_report(
    proc_root: Path, sys_root: Path, store: CounterStore, errors: ErrorLog, now: float
) -> NetworkReport:
    """Per-interface receive/transmit rates, loopback excluded.

    IPv4/IPv6 addresses are not resolved; those fields are always absent.
    """

    path = proc_root / "net" / "dev"
    try:
        lines = read_lines(path)
    except OSError as exc:
        errors.record("network", describe_failure(path, exc))
        return NetworkReport(available=False)

    interfaces: list[NetworkInterfaceReport] = []
    for line in lines[_HEADER_LINES:]:
        parts = line.split(":")
        if len(parts) != 2:
            continue
        name = parts[0].strip()
        if name == _LOOPBACK:
            continue
        fields = parts[1].split()
        if len(fields) < _MIN_FIELDS:
            continue
        rx_bytes = parse_int(fields[_RX_BYTES])
        tx_bytes = parse_int(fields[_TX_BYTES])
        if rx_bytes is None or tx_bytes is None:
            continue

        sample = CounterSample(timestamp=now, values=(rx_bytes, tx_bytes))
        rates = per_second(store.exchange(NETWORK_FAMILY, name, sample), sample)
        rx_rate, tx_rate = rates if rates is not None else (None, None)
        interfaces.append(
            NetworkInterfaceReport(
                name=name,
                rx_bytes_per_sec=rx_rate,
                tx_bytes_per_sec=tx_rate,
                mac_address=read_mac_address(sys_root, name),
            )
        )

    return NetworkReport(available=bool(interfaces), interfaces=tuple(interfaces))
