"""Shared fixtures: synthetic /proc and /sys trees and a controllable clock."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from linux_stats_agent.core.errors import ErrorLog  # noqa: E402
from linux_stats_agent.data.counters import CounterStore  # noqa: E402

NET_DEV_HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|"
    "bytes    packets errs drop fifo colls carrier compressed\n"
)


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def stat_text(user=0, nice=0, system=0, idle=0, iowait=0, irq=0, softirq=0, steal=0) -> str:
    return (
        f"cpu  {user} {nice} {system} {idle} {iowait} {irq} {softirq} {steal} 0 0\n"
        f"cpu0 {user} {nice} {system} {idle} {iowait} {irq} {softirq} {steal} 0 0\n"
        "intr 12345\nctxt 67890\n"
    )


def diskstats_line(name: str, reads=0, read_sectors=0, writes=0, write_sectors=0) -> str:
    return f"   8       0 {name} {reads} 0 {read_sectors} 0 {writes} 0 {write_sectors} 0 0 0 0\n"


def net_dev_line(name: str, rx_bytes=0, tx_bytes=0) -> str:
    return f"{name:>6}: {rx_bytes} 0 0 0 0 0 0 0 {tx_bytes} 0 0 0 0 0 0 0\n"


def fake_usage(total: int, used: int, free: int) -> SimpleNamespace:
    percent = round(used / total * 100, 1) if total else 0.0
    return SimpleNamespace(total=total, used=used, free=free, percent=percent)


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    root = tmp_path / "proc"
    root.mkdir()
    return root


@pytest.fixture
def sys_root(tmp_path: Path) -> Path:
    root = tmp_path / "sys"
    root.mkdir()
    return root


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> CounterStore:
    return CounterStore()


@pytest.fixture
def errors() -> ErrorLog:
    log = ErrorLog()
    log.begin_pass()
    return log
