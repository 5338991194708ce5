"""Prometheus-style metrics kept in memory and served over HTTP."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from txbot.query_info import QueryInfo, QueryType
from txbot.reportables import Report
from txbot.utils import bool_to_float

METRICS_PREFIX = "txbot_"

_logger = logging.getLogger(__name__)


@dataclass
class MetricsConfig:
    """Whether metrics are served, and on which ``host:port``."""

    enabled: bool = True
    listen_addr: str = ":9580"


class MetricKind(str, Enum):
    """The two kinds of metric the bot exposes."""

    GAUGE = "gauge"
    COUNTER = "counter"


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n")


def _label_text(value: Any) -> str:
    return str(value.value) if isinstance(value, Enum) else str(value)


class MetricFamily:
    """A named metric with a fixed set of labels and one value per label set."""

    def __init__(
        self,
        name: str,
        help: str,
        kind: MetricKind | str,
        label_names: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.help = help
        self.kind = MetricKind(kind)
        self.label_names = tuple(label_names)
        self._series: dict[tuple[str, ...], float] = {}
        self._lock = threading.Lock()

    def _key(self, labels: dict[str, Any]) -> tuple[str, ...]:
        if set(labels) != set(self.label_names):
            raise ValueError(
                f"metric {self.name} expects labels {sorted(self.label_names)}, "
                f"got {sorted(labels)}"
            )
        return tuple(_label_text(labels[name]) for name in self.label_names)

    def __len__(self) -> int:
        with self._lock:
            return len(self._series)

    def labels(self, **kwargs: Any) -> dict[str, str]:
        """Ensure a series exists for these labels and return them normalised."""
        key = self._key(kwargs)
        with self._lock:
            self._series.setdefault(key, 0.0)
        return dict(zip(self.label_names, key))

    def value(self, **kwargs: Any) -> float:
        """Current value of a series; 0 if it has never been touched."""
        key = self._key(kwargs)
        with self._lock:
            return self._series.get(key, 0.0)

    def set(self, value: float, **kwargs: Any) -> None:
        """Set a gauge series to a value."""
        if self.kind is MetricKind.COUNTER:
            raise TypeError(f"counter {self.name} cannot be set")
        key = self._key(kwargs)
        with self._lock:
            self._series[key] = float(value)

    def inc(self, amount: float = 1.0, **kwargs: Any) -> None:
        """Add to a series; counters only go up."""
        if self.kind is MetricKind.COUNTER and amount < 0:
            raise ValueError(f"counter {self.name} cannot decrease")
        key = self._key(kwargs)
        with self._lock:
            self._series[key] = self._series.get(key, 0.0) + float(amount)

    def render(self) -> str:
        """Text exposition of this family."""
        lines = [
            f"# HELP {self.name} {_escape_help(self.help)}",
            f"# TYPE {self.name} {self.kind.value}",
        ]
        with self._lock:
            series = sorted(self._series.items())
        for key, value in series:
            if key:
                labels = ",".join(
                    f'{name}="{_escape_label(label)}"'
                    for name, label in zip(self.label_names, key)
                )
                lines.append(f"{self.name}{{{labels}}} {_format_value(value)}")
            else:
                lines.append(f"{self.name} {_format_value(value)}")
        return "\n".join(lines) + "\n"


def _parse_listen_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"listen address {addr!r}: missing port")
    if not port.isdigit() or int(port) > 65535:
        raise ValueError(f"listen address {addr!r}: invalid port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


class MetricsManager:
    """Holds every metric the bot reports and serves them when enabled."""

    def __init__(self, config: MetricsConfig | None = None) -> None:
        self.config = config if config is not None else MetricsConfig()
        p = METRICS_PREFIX
        gauge, counter = MetricKind.GAUGE, MetricKind.COUNTER

        self.last_block_height = MetricFamily(
            p + "last_height", "Height of the last block processed", gauge, ["chain"]
        )
        self.last_block_time = MetricFamily(
            p + "last_time", "Time of the last block processed", gauge, ["chain"]
        )
        self.chain_info = MetricFamily(
            p + "chain_info",
            "Chain info, with constant 1 as value and pretty_name and chain as labels",
            gauge,
            ["chain", "pretty_name"],
        )
        self.successful_queries = MetricFamily(
            p + "node_successful_queries_total",
            "Counter of successful node queries",
            counter,
            ["chain", "node", "type"],
        )
        self.failed_queries = MetricFamily(
            p + "node_failed_queries_total",
            "Counter of failed node queries",
            counter,
            ["chain", "node", "type"],
        )
        self.events_total = MetricFamily(
            p + "events_total", "WebSocket events received by node", counter, ["chain", "node"]
        )
        self.events_filtered = MetricFamily(
            p + "events_filtered",
            "WebSocket events filtered out by chain, type and reason",
            counter,
            ["chain", "type", "reason"],
        )
        self.node_connected = MetricFamily(
            p + "node_connected",
            "Whether the node is successfully connected (1 if yes, 0 if no)",
            gauge,
            ["chain", "node"],
        )
        self.reconnects = MetricFamily(
            p + "reconnects_total", "Node reconnects count", counter, ["chain", "node"]
        )
        self.reporter_enabled = MetricFamily(
            p + "reporter_enabled",
            "Reporter info, with name and type, always returns 1 as value",
            gauge,
            ["name", "type"],
        )
        self.reporter_reports = MetricFamily(
            p + "reporter_reports",
            "Counter of reports sent successfully",
            counter,
            ["chain", "reporter", "type", "subscription"],
        )
        self.reporter_errors = MetricFamily(
            p + "reporter_errors",
            "Counter of failed reports sends",
            counter,
            ["chain", "reporter", "type", "subscription"],
        )
        self.report_entries = MetricFamily(
            p + "report_entries_total",
            "Counter of messages types per each successfully sent report",
            counter,
            ["chain", "reporter", "type", "subscription"],
        )
        self.reporter_queries = MetricFamily(
            p + "queries",
            "Counter of reporters' queries (like chain status, aliases etc.)",
            counter,
            ["reporter", "type"],
        )
        self.subscriptions_info = MetricFamily(
            p + "subscriptions",
            "Count of chain subscriptions per subscription",
            gauge,
            ["name", "reporter"],
        )
        self.events_matched = MetricFamily(
            p + "events_matched",
            "WebSocket events matching filters by chain",
            counter,
            ["chain", "type", "subscription"],
        )
        self.app_version = MetricFamily(p + "version", "App version", gauge, ["version"])
        self.start_time = MetricFamily(
            p + "start_time",
            "Unix timestamp on when the app was started. Useful for annotations.",
            gauge,
        )

        self._families = [
            self.last_block_height,
            self.last_block_time,
            self.chain_info,
            self.successful_queries,
            self.failed_queries,
            self.events_total,
            self.events_filtered,
            self.node_connected,
            self.reconnects,
            self.reporter_reports,
            self.reporter_errors,
            self.report_entries,
            self.reporter_enabled,
            self.reporter_queries,
            self.subscriptions_info,
            self.events_matched,
            self.app_version,
            self.start_time,
        ]
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> tuple[str, int] | None:
        """The address the server is bound to, or None when not serving."""
        if self._server is None:
            return None
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    def render(self) -> str:
        """Text exposition of every metric."""
        return "".join(family.render() for family in self._families)

    def _make_handler(self) -> type[BaseHTTPRequestHandler]:
        manager = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:  # noqa: N802
                path = self.path.split("?", 1)[0]
                if path == "/metrics":
                    body = manager.render().encode("utf-8")
                    content_type = "text/plain; version=0.0.4; charset=utf-8"
                    status = 200
                elif path == "/healthcheck":
                    body, content_type, status = b"ok", "text/plain; charset=utf-8", 200
                else:
                    body, content_type, status = b"404 page not found\n", "text/plain", 404
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args: Any) -> None:
                _logger.debug("metrics request: " + format, *args)

        return Handler

    def start(self) -> None:
        """Serve /metrics and /healthcheck in a background thread, if enabled.

        Raises ValueError for a malformed address and OSError if it cannot be bound.
        """
        if not self.config.enabled:
            _logger.info("Metrics not enabled")
            return

        host, port = _parse_listen_addr(self.config.listen_addr)
        try:
            server = ThreadingHTTPServer((host, port), self._make_handler())
        except OSError:
            _logger.error("Cannot start metrics handler on %s", self.config.listen_addr)
            raise
        server.daemon_threads = True
        self._server = server
        self._thread = threading.Thread(target=server.serve_forever, daemon=True)
        self._thread.start()
        _logger.info("Metrics handler listening on %s", self.config.listen_addr)

    def stop(self) -> None:
        """Shut the server down if it is running."""
        _logger.info("Shutting down server on %s...", self.config.listen_addr)
        server, thread = self._server, self._thread
        self._server = None
        self._thread = None
        if server is None:
            return
        server.shutdown()
        server.server_close()
        if thread is not None:
            thread.join(timeout=5)

    def set_all_default_metrics(self, config: Any) -> None:
        """Record start time, chain info and subscription counts from the app config."""
        self.start_time.set(time.time() // 1)
        for chain in config.chains:
            self.set_default_metrics(chain)
        for subscription in config.subscriptions:
            self.subscriptions_info.set(
                len(subscription.chain_subscriptions),
                name=subscription.name,
                reporter=subscription.reporter,
            )

    def set_default_metrics(self, chain: Any) -> None:
        """Create the per-chain and per-node series so they start at zero."""
        self.chain_info.set(1, chain=chain.name, pretty_name=chain.pretty_name)
        for node in chain.tendermint_nodes:
            self.events_total.inc(0, chain=chain.name, node=node)
            self.reconnects.inc(0, chain=chain.name, node=node)

    def log_last_height(self, chain: str, height: int, block_time: datetime) -> None:
        self.last_block_height.set(height, chain=chain)
        self.last_block_time.set(math.floor(block_time.timestamp()), chain=chain)

    def log_node_connection(self, chain: str, node: str, connected: bool) -> None:
        self.node_connected.set(bool_to_float(connected), chain=chain, node=node)

    def log_query(self, chain: str, query: QueryInfo, query_type: QueryType | str) -> None:
        family = self.successful_queries if query.success else self.failed_queries
        family.inc(chain=chain, node=query.node, type=query_type)

    def log_report(self, report: Report, reporter_name: str, success: bool) -> None:
        reportable = report.reportable
        chain = report.chain.name
        subscription = report.subscription.name
        if not success:
            self.reporter_errors.inc(
                chain=chain, reporter=reporter_name, type=reportable.type, subscription=subscription
            )
            return

        self.reporter_reports.inc(
            chain=chain, reporter=reporter_name, type=reportable.type, subscription=subscription
        )
        for entry in reportable.get_messages():
            self.report_entries.inc(
                chain=chain, reporter=reporter_name, type=entry.type, subscription=subscription
            )

    def log_reporter_enabled(self, name: str, reporter_type: str) -> None:
        self.reporter_enabled.set(1, name=name, type=reporter_type)

    def log_app_version(self, version: str) -> None:
        self.app_version.set(1, version=version)

    def log_ws_event(self, chain: str, node: str) -> None:
        self.events_total.inc(chain=chain, node=node)

    def log_filtered_event(self, chain: str, event_type: str, reason: Any) -> None:
        self.events_filtered.inc(chain=chain, type=event_type, reason=reason)

    def log_matched_event(self, chain: str, event_type: str, subscription: str) -> None:
        self.events_matched.inc(chain=chain, type=event_type, subscription=subscription)

    def log_reporter_query(self, reporter_name: str, query: Any) -> None:
        self.reporter_queries.inc(reporter=reporter_name, type=query)

    def log_node_reconnect(self, chain: str, node: str) -> None:
        self.reconnects.inc(chain=chain, node=node)