"""Probe for the health of monitored links."""

from __future__ import annotations

from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

_PATH = "api/v2/monitor/system/link-monitor"
_LABELS = ("vdom", "monitor", "link")

LINK_STATUS = Desc(
    "fortigate_link_status",
    "Signals the status of the link. 1 means that this state is present in every other case the value is 0",
    ("vdom", "monitor", "link", "state"),
)
LINK_LATENCY = Desc(
    "fortigate_link_latency_seconds",
    "Average latency of this link based on the last 30 probes in seconds",
    _LABELS,
)
LINK_JITTER = Desc(
    "fortigate_link_latency_jitter_seconds",
    "Average of the latency jitter  on this link based on the last 30 probes in seconds",
    _LABELS,
)
LINK_PACKET_LOSS = Desc(
    "fortigate_link_packet_loss_ratio",
    "Percentage of packets lost relative to  all sent based on the last 30 probes",
    _LABELS,
)
LINK_PACKET_SENT = Desc(
    "fortigate_link_packet_sent_total", "Number of packets sent on this link", _LABELS
)
LINK_PACKET_RECEIVED = Desc(
    "fortigate_link_packet_received_total", "Number of packets received on this link", _LABELS
)
LINK_SESSIONS = Desc(
    "fortigate_link_active_sessions", "Number of sessions active on this link", _LABELS
)
LINK_BANDWIDTH_TX = Desc(
    "fortigate_link_bandwidth_tx_byte_per_second",
    "Bandwidth available on this link for sending",
    _LABELS,
)
LINK_BANDWIDTH_RX = Desc(
    "fortigate_link_bandwidth_rx_byte_per_second",
    "Bandwidth available on this link for sending",
    _LABELS,
)
LINK_STATUS_CHANGED = Desc(
    "fortigate_link_status_change_time_seconds",
    "Unix timestamp describing the time when the last status change has occurred",
    _LABELS,
)

_STATES = ("up", "down", "error", "unknown")
_REPORTING_STATES = frozenset({"up", "down"})

# (descriptor, kind, JSON key, divisor)
_MEASUREMENTS = (
    (LINK_LATENCY, ValueType.GAUGE, "latency", 1000.0),
    (LINK_JITTER, ValueType.GAUGE, "jitter", 1000.0),
    (LINK_PACKET_LOSS, ValueType.GAUGE, "packet_loss", 100.0),
    (LINK_PACKET_SENT, ValueType.COUNTER, "packet_sent", 1.0),
    (LINK_PACKET_RECEIVED, ValueType.COUNTER, "packet_received", 1.0),
    (LINK_SESSIONS, ValueType.GAUGE, "session", 1.0),
    (LINK_BANDWIDTH_TX, ValueType.GAUGE, "tx_bandwidth", 8.0),
    (LINK_BANDWIDTH_RX, ValueType.GAUGE, "rx_bandwidth", 8.0),
    (LINK_STATUS_CHANGED, ValueType.GAUGE, "state_changed", 1.0),
)


def _list(data: Any, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProbeError(f"{what}: expected a JSON array")
    return data


def _object(data: Any, what: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProbeError(f"{what}: expected a JSON object")
    return data


def _num(obj: dict, key: str) -> float:
    return float(obj.get(key) or 0)


def probe_system_link_monitor(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report state and, for links in a known good or down state, probe statistics."""
    responses = _list(client.get(_PATH, "vdom=*"), "link monitor")
    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "link monitor response")
        vdom = response.get("vdom") or ""
        groups = _object(response.get("results"), "link monitor results")
        for group_name, group in groups.items():
            for link_name, link in _object(group, "link group").items():
                link = _object(link, "link")
                status = link.get("status")
                state = status if status in ("up", "down", "error") else "unknown"
                for candidate in _STATES:
                    metrics.append(
                        LINK_STATUS.metric(
                            ValueType.GAUGE,
                            1.0 if candidate == state else 0.0,
                            vdom,
                            group_name,
                            link_name,
                            candidate,
                        )
                    )
                if state not in _REPORTING_STATES:
                    continue
                metrics.extend(
                    desc.metric(kind, _num(link, key) / divisor, vdom, group_name, link_name)
                    for desc, kind, key, divisor in _MEASUREMENTS
                )
    return metrics