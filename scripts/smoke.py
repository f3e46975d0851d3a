"""Smoke test for the agent's HTTP endpoints against the live host."""

from __future__ import annotations

import json
import sys
import threading
import time
import urllib.request
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from linux_stats_agent.core import AgentSettings
from linux_stats_agent.web.server import create_app


def fetch_json(url: str) -> dict[str, object]:
    with urllib.request.urlopen(url) as response:  # nosec - local smoke run
        payload = response.read().decode("utf-8")
    return json.loads(payload)


def run_smoke() -> None:
    server = create_app(AgentSettings(bind="127.0.0.1", port=0))
    address = server.server_address()
    print(f"Starting agent on {address}")

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        health = fetch_json(f"{address}/v1/health")
        assert health.get("ok") is True, "health endpoint not ok"
        fetch_json(f"{address}/v1/stats")
        time.sleep(1.0)  # second pass so rates are populated
        stats = fetch_json(f"{address}/v1/stats")
        assert stats.get("schema") == "v1", "unexpected schema"
        assert "cpu" in stats, "document without cpu report"
        print("SMOKE_OK", {
            "cpu_usage": stats.get("cpu", {}).get("usagePercent"),
            "errors": stats.get("errors", []),
        })
    finally:
        server.stop()
        thread.join()


if __name__ == "__main__":
    run_smoke()
