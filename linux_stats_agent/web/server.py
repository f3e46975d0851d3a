"""HTTP server exposing the agent's stats and health endpoints."""

from __future__ import annotations

import hmac
import json
import logging
import signal
import socket
import sys
import threading
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, ClassVar, Optional

from .collector import StatsCollector
from linux_stats_agent.core.config import (
    AGENT_VERSION,
    APP_NAME,
    SCHEMA_VERSION,
    AgentSettings,
    ConfigError,
)
from linux_stats_agent.core.logging_setup import configure_logging
from linux_stats_agent.data import detect_environment

logger = logging.getLogger(__name__)

STATS_PATH = "/v1/stats"
HEALTH_PATH = "/v1/health"
REQUEST_TIMEOUT = 10.0


class AgentRequestHandler(BaseHTTPRequestHandler):
    """Serves ``/v1/stats`` (bearer protected) and ``/v1/health``."""

    server_version: ClassVar[str] = "LinuxStatsAgent/" + AGENT_VERSION
    timeout = REQUEST_TIMEOUT

    def __init__(
        self,
        *args: Any,
        stats_collector: StatsCollector,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self._collector = stats_collector
        self._token = token or None
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:  # noqa: N802
        path = self.path.split("?", 1)[0]
        if path == HEALTH_PATH:
            self._send_health()
            return
        if path == STATS_PATH:
            if not self._check_bearer_token():
                self._send_error(HTTPStatus.UNAUTHORIZED, "Unauthorized")
                return
            self._send_stats()
            return
        self._send_error(HTTPStatus.NOT_FOUND, "Not found")

    def _reject_method(self) -> None:
        path = self.path.split("?", 1)[0]
        if path in (HEALTH_PATH, STATS_PATH):
            self._send_error(HTTPStatus.METHOD_NOT_ALLOWED, "Method not allowed")
        else:
            self._send_error(HTTPStatus.NOT_FOUND, "Not found")

    do_POST = _reject_method
    do_PUT = _reject_method
    do_PATCH = _reject_method
    do_DELETE = _reject_method
    do_HEAD = _reject_method
    do_OPTIONS = _reject_method

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002 - parity with BaseHTTPRequestHandler
        logger.debug("%s - %s", self.client_address[0], format % args)

    def _check_bearer_token(self) -> bool:
        if not self._token:
            return True
        header = self.headers.get("Authorization")
        if not header:
            return False
        scheme, _, provided = header.partition(" ")
        if scheme != "Bearer" or not provided:
            return False
        return hmac.compare_digest(provided.encode("utf-8"), self._token.encode("utf-8"))

    def _send_stats(self) -> None:
        document = self._collector.collect()
        body = (json.dumps(document.to_dict(), indent=2) + "\n").encode("utf-8")
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "application/json")
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_health(self) -> None:
        payload = {
            "ok": True,
            "schema": SCHEMA_VERSION,
            "agent_version": AGENT_VERSION,
            "hostname": socket.gethostname(),
        }
        body = (json.dumps(payload) + "\n").encode("utf-8")
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_error(self, status: HTTPStatus, message: str) -> None:
        body = (message + "\n").encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)


class AgentServer:
    """Wraps the HTTP server around a shared stats collector."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 9955,
        *,
        collector: StatsCollector | None = None,
        token: str | None = None,
    ) -> None:
        self._collector = collector or StatsCollector()
        handler = partial(
            AgentRequestHandler,
            stats_collector=self._collector,
            token=token,
        )
        self._httpd = ThreadingHTTPServer((host, port), handler)
        self._httpd.daemon_threads = True
        self._stopped = threading.Event()

    @property
    def collector(self) -> StatsCollector:
        return self._collector

    def serve_forever(self) -> None:
        try:
            self._httpd.serve_forever()
        finally:
            self._httpd.server_close()

    def stop(self) -> None:
        if self._stopped.is_set():
            return
        self._stopped.set()
        self._httpd.shutdown()

    def server_address(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"


def create_app(settings: AgentSettings | None = None, collector: StatsCollector | None = None) -> AgentServer:
    """Factory helper used by the CLI entry point, scripts and tests."""

    settings = settings or AgentSettings()
    if collector is None:
        collector = StatsCollector(
            detect_environment(settings.mount_fix),
            interval=settings.interval_seconds,
        )
    return AgentServer(settings.bind, settings.port, collector=collector, token=settings.token)


def _install_signal_handlers(server: AgentServer) -> None:
    def _handle(signum: int, _frame: Any) -> None:
        logger.info("received %s, shutting down server...", signal.Signals(signum).name)
        # shutdown() blocks until serve_forever returns, so it cannot run on the serving thread
        threading.Thread(target=server.stop, name="AgentShutdown", daemon=True).start()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(environ: dict[str, str] | None = None) -> int:
    try:
        settings = AgentSettings.from_env(environ)
    except ConfigError as exc:
        configure_logging("info")
        logger.error("%s", exc)
        return 1

    configure_logging(settings.log_level)
    logger.info("starting %s v%s", APP_NAME, AGENT_VERSION)
    logger.info(
        "config - port: %d, interval: %dms, auth: %s",
        settings.port,
        settings.interval_ms,
        settings.auth_enabled,
    )

    server = create_app(settings)
    _install_signal_handlers(server)
    logger.info("listening on %s", server.server_address())
    server.serve_forever()
    logger.info("server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
