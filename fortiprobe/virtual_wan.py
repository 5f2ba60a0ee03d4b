"""Probe for SD-WAN health checks."""

from __future__ import annotations

from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

_PATH = "api/v2/monitor/virtual-wan/health-check"
_LABELS = ("vdom", "sla", "interface")

VWAN_STATUS = Desc(
    "fortigate_virtual_wan_status",
    "Status of the Interface. If the SD-WAN interface is disabled, disable will be returned. "
    "If the interface does not participate in the health check, error will be returned.",
    ("vdom", "sla", "interface", "state"),
)
VWAN_LATENCY = Desc(
    "fortigate_virtual_wan_latency_seconds", "Measured latency for this Health check", _LABELS
)
VWAN_JITTER = Desc(
    "fortigate_virtual_wan_latency_jitter_seconds",
    "Measured latency jitter for this Health check",
    _LABELS,
)
VWAN_PACKET_LOSS = Desc(
    "fortigate_virtual_wan_packet_loss_ratio",
    "Measured packet loss in percentage for this Health check",
    _LABELS,
)
VWAN_PACKET_SENT = Desc(
    "fortigate_virtual_wan_packet_sent_total",
    "Number of packets sent for this Health check",
    _LABELS,
)
VWAN_PACKET_RECEIVED = Desc(
    "fortigate_virtual_wan_packet_received_total",
    "Number of packets received for this Health check",
    _LABELS,
)
VWAN_SESSIONS = Desc(
    "fortigate_virtual_wan_active_sessions",
    "Active Session count for the health check interface",
    _LABELS,
)
VWAN_BANDWIDTH_TX = Desc(
    "fortigate_virtual_wan_bandwidth_tx_byte_per_second",
    "Upload bandwidth of the health check interface",
    _LABELS,
)
VWAN_BANDWIDTH_RX = Desc(
    "fortigate_virtual_wan_bandwidth_rx_byte_per_second",
    "Download bandwidth of the health check interface",
    _LABELS,
)
VWAN_STATUS_CHANGED = Desc(
    "fortigate_virtual_wan_status_change_time_seconds",
    "Unix timestamp describing the time when the last status change has occurred",
    _LABELS,
)

_STATES = ("up", "down", "error", "disable", "unknown")

# (descriptor, JSON key, divisor)
_MEASUREMENTS = (
    (VWAN_LATENCY, "latency", 1000.0),
    (VWAN_JITTER, "jitter", 1000.0),
    (VWAN_PACKET_LOSS, "packet_loss", 100.0),
    (VWAN_PACKET_SENT, "packet_sent", 1.0),
    (VWAN_PACKET_RECEIVED, "packet_received", 1.0),
    (VWAN_SESSIONS, "session", 1.0),
    (VWAN_BANDWIDTH_TX, "tx_bandwidth", 8.0),
    (VWAN_BANDWIDTH_RX, "rx_bandwidth", 8.0),
    (VWAN_STATUS_CHANGED, "state_changed", 1.0),
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


def probe_virtual_wan_health_check(
    client: FortiClient, meta: TargetMetadata | None
) -> list[Metric]:
    """Report member state of every health check, with statistics for members that are up."""
    responses = _list(client.get(_PATH, "vdom=*"), "health checks")
    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "health check response")
        vdom = response.get("vdom") or ""
        for sla_name, sla in _object(response.get("results"), "health check results").items():
            for member_name, member in _object(sla, "health check").items():
                member = _object(member, "health check member")
                status = member.get("status")
                state = status if status in _STATES[:-1] else "unknown"
                for candidate in _STATES:
                    metrics.append(
                        VWAN_STATUS.metric(
                            ValueType.GAUGE,
                            1.0 if candidate == state else 0.0,
                            vdom,
                            sla_name,
                            member_name,
                            candidate,
                        )
                    )
                if state != "up":
                    continue
                metrics.extend(
                    desc.metric(
                        ValueType.GAUGE, _num(member, key) / divisor, vdom, sla_name, member_name
                    )
                    for desc, key, divisor in _MEASUREMENTS
                )
    return metrics