"""Tests for collection-pass orchestration."""

import logging
import threading
import time

import pytest

from conftest import NET_DEV_HEADER, FakeClock, diskstats_line, fake_usage, net_dev_line, stat_text, write
from linux_stats_agent.data import Environment, disk
from linux_stats_agent.web import collector as collector_module
from linux_stats_agent.web.collector import StatsCollector


@pytest.fixture
def host(proc_root, sys_root, monkeypatch):
    write(proc_root / "stat", stat_text(user=100, idle=900))
    write(proc_root / "cpuinfo", "processor\t: 0\n\nprocessor\t: 1\n")
    write(proc_root / "loadavg", "0.00 0.00 0.00 1/100 1\n")
    write(proc_root / "meminfo", "MemTotal: 2048 kB\nMemAvailable: 1024 kB\n")
    write(proc_root / "diskstats", diskstats_line("nvme0n1", 10, 100, 10, 100) + diskstats_line("nvme0n1p1"))
    write(proc_root / "mounts", "/dev/nvme0n1p1 / ext4 rw 0 0\n")
    write(proc_root / "net" / "dev", NET_DEV_HEADER + net_dev_line("eth0", 100, 100))
    write(sys_root / "class" / "hwmon" / "hwmon0" / "temp1_input", "40000\n")
    monkeypatch.setattr(disk.psutil, "disk_usage", lambda path: fake_usage(100, 40, 60))
    return Environment(proc_root=proc_root, sys_root=sys_root, apply_mount_fix=False)


@pytest.fixture
def make_collector(clock):
    def _make(env):
        return StatsCollector(env, clock=clock, monotonic=clock, hostname=lambda: "testhost")

    return _make


class TestDocument:
    def test_first_pass_document(self, host, make_collector, clock):
        document = make_collector(host).collect()

        assert document.schema == "v1"
        assert document.hostname == "testhost"
        assert document.agent_version == "1.0.0"
        assert document.timestamp == int(clock.now)
        assert document.errors == ()
        assert document.cpu.available is False
        assert document.cpu.core_count == 2
        assert document.cpu.loadavg1 == 0.0
        assert document.memory.used_bytes == 1024 * 1024
        assert document.disk.available is True
        assert [device.name for device in document.disk.devices] == ["nvme0n1"]
        assert document.disk.devices[0].read_bytes_per_sec is None
        assert document.network.interfaces[0].rx_bytes_per_sec is None
        assert document.thermals.sensors[0].temp_celsius == 40.0
        assert document.gpu.available is False
        assert document.features.nvme_available is True
        assert document.features.thermal_available is True
        assert document.features.smart_available is False
        assert document.features.gpu_available is False

    def test_idle_second_pass_reports_zero_rates(self, host, make_collector, clock):
        collector = make_collector(host)
        collector.collect()
        clock.advance(1)

        document = collector.collect()

        device = document.disk.devices[0]
        assert device.read_bytes_per_sec == 0.0
        assert device.writes_per_sec == 0.0
        iface = document.network.interfaces[0]
        assert iface.rx_bytes_per_sec == 0.0
        assert iface.tx_bytes_per_sec == 0.0

    def test_rates_use_monotonic_time_not_wall_clock(self, host):
        wall = FakeClock()
        ticks = FakeClock(start=500.0)
        collector = StatsCollector(host, clock=wall, monotonic=ticks, hostname=lambda: "testhost")
        collector.collect()

        wall.advance(-3600)
        ticks.advance(2)
        write(host.proc_root / "net" / "dev", NET_DEV_HEADER + net_dev_line("eth0", 300, 500))
        document = collector.collect()

        assert document.timestamp == int(wall.now)
        iface = document.network.interfaces[0]
        assert iface.rx_bytes_per_sec == 100.0
        assert iface.tx_bytes_per_sec == 200.0

    def test_wire_format(self, host, make_collector):
        payload = make_collector(host).collect().to_dict()

        assert payload["schema"] == "v1"
        assert payload["agentVersion"] == "1.0.0"
        assert "errors" not in payload
        assert payload["cpu"] == {
            "available": False,
            "loadavg1": 0.0,
            "loadavg5": 0.0,
            "loadavg15": 0.0,
            "coreCount": 2,
        }
        assert payload["disk"]["devices"] == [{"name": "nvme0n1"}]
        assert payload["disk"]["filesystems"][0]["mountPoint"] == "/"
        assert payload["disk"]["filesystems"][0]["usagePercent"] == 40.0
        assert payload["gpu"] == {"available": False}
        assert payload["thermals"]["sensors"][0] == {"name": "hwmon0_temp1", "tempCelsius": 40.0}
        assert payload["features"]["nvmeAvailable"] is True


class TestErrorHandling:
    def test_errors_repeat_per_pass_but_log_once(self, host, make_collector, clock, caplog):
        (host.proc_root / "stat").unlink()
        collector = make_collector(host)

        with caplog.at_level(logging.WARNING):
            first = collector.collect()
            clock.advance(1)
            second = collector.collect()

        cpu_logs = [record for record in caplog.records if record.getMessage().startswith("cpu: failed to read")]
        assert len(cpu_logs) == 1
        assert len(first.errors) == 1
        assert second.errors == first.errors
        assert first.to_dict()["errors"][0].startswith("cpu: failed to read")

    def test_errors_do_not_accumulate_across_passes(self, host, make_collector, clock):
        stat = host.proc_root / "stat"
        content = stat.read_text()
        stat.unlink()
        collector = make_collector(host)
        assert collector.collect().errors

        write(stat, content)
        clock.advance(1)

        assert collector.collect().errors == ()

    def test_unexpected_provider_failure_degrades_family(self, host, make_collector, monkeypatch):
        def _boom(*args, **kwargs):
            raise RuntimeError("parser bug")

        monkeypatch.setattr(collector_module, "collect_network_report", _boom)

        document = make_collector(host).collect()

        assert document.network.available is False
        assert document.errors == ("network: unexpected RuntimeError: parser bug",)
        assert document.cpu is not None

    def test_everything_missing_still_yields_a_document(self, tmp_path, make_collector):
        env = Environment(proc_root=tmp_path / "nope", sys_root=tmp_path / "nada")

        document = make_collector(env).collect()

        assert document.cpu.available is False
        assert document.memory.available is False
        assert document.disk.available is False
        assert document.network.available is False
        assert document.thermals.available is False
        components = [error.split(":", 1)[0] for error in document.errors]
        assert components == ["cpu", "memory", "disk", "filesystem", "network"]


class TestConcurrency:
    def test_concurrent_collects_are_serialized(self, host, make_collector, monkeypatch):
        guard = threading.Lock()
        state = {"active": 0, "peak": 0, "calls": 0}

        def _slow_gpu():
            with guard:
                state["active"] += 1
                state["calls"] += 1
                state["peak"] = max(state["peak"], state["active"])
                call = state["calls"]
            time.sleep(0.02)
            with guard:
                state["active"] -= 1
            raise RuntimeError(f"pass {call}")

        monkeypatch.setattr(collector_module, "collect_gpu_report", _slow_gpu)
        collector = make_collector(host)
        workers = 8
        barrier = threading.Barrier(workers)
        documents = []

        def _worker():
            barrier.wait()
            documents.append(collector.collect())

        threads = [threading.Thread(target=_worker) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert state["peak"] == 1
        assert len(documents) == workers
        for document in documents:
            assert document.cpu.core_count == 2
            assert document.memory.available is True
            assert document.disk.available is True
            assert document.network.available is True
            assert document.thermals.available is True
            assert document.gpu.available is False
            assert document.features.nvme_available is True
            assert len(document.errors) == 1
            assert document.errors[0].startswith("gpu: unexpected RuntimeError: pass ")
        assert {document.errors[0] for document in documents} == {
            f"gpu: unexpected RuntimeError: pass {call}" for call in range(1, workers + 1)
        }
