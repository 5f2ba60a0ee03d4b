"""Probe for NTP synchronisation status."""

from __future__ import annotations

import logging
from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

log = logging.getLogger(__name__)

_PATH = "api/v2/monitor/system/ntp/status"
_LABELS = ("ip", "server", "reachable", "selected", "version", "vdom")

NTP_EXPIRES = Desc("fortigate_system_ntp_expires_seconds", "NTP expire time, in seconds", _LABELS)
NTP_STRATUM = Desc("fortigate_system_ntp_stratum", "NTP stratum value", _LABELS)
NTP_REFTIME = Desc("fortigate_system_ntp_reftime_seconds", "NTP reftime in epoch seconds", _LABELS)
NTP_OFFSET = Desc("fortigate_system_ntp_offset_seconds", "NTP combined offset, in seconds", _LABELS)
NTP_DELAY = Desc("fortigate_system_ntp_delay_seconds", "NTP round trip delay, in seconds", _LABELS)
NTP_DISPERSION = Desc(
    "fortigate_system_ntp_dispersion_seconds",
    "NTP dispersion to primary clock, in seconds",
    _LABELS,
)
NTP_PEER_DISPERSION = Desc(
    "fortigate_system_ntp_dispersion_peer_seconds", "NTP peer dispersion, in seconds", _LABELS
)

# (descriptor, kind, JSON key, scale, whole number)
_MEASUREMENTS = (
    (NTP_EXPIRES, ValueType.GAUGE, "expires", 1.0, True),
    (NTP_STRATUM, ValueType.GAUGE, "stratum", 1.0, True),
    (NTP_REFTIME, ValueType.COUNTER, "reftime", 1.0, True),
    (NTP_OFFSET, ValueType.GAUGE, "offset", 0.001, False),
    (NTP_DELAY, ValueType.GAUGE, "delay", 0.001, False),
    (NTP_DISPERSION, ValueType.GAUGE, "dispersion", 0.001, False),
    (NTP_PEER_DISPERSION, ValueType.GAUGE, "peer_dispersion", 0.001, True),
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


def _bool_label(value: Any) -> str:
    return "true" if value else "false"


def _supported(meta: TargetMetadata | None) -> bool:
    if meta is None:
        return False
    return meta.version_major >= 7 and meta.version_minor >= 4


def probe_system_ntp_status(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report NTP server timing figures; only firmware 7.4 and later expose them."""
    responses = _list(client.get(_PATH, "vdom=*"), "NTP status")
    if not _supported(meta):
        log.info("NTP status is not available in versions under 7.4")
        return []

    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "NTP status response")
        vdom = response.get("vdom") or ""
        for server in _list(response.get("results"), "NTP status results"):
            server = _object(server, "NTP server")
            reachable = _bool_label(server.get("reachable"))
            # The device reports selection inconsistently, so reachability is used for both.
            labels = (
                server.get("ip") or "",
                server.get("server") or "",
                reachable,
                reachable,
                str(int(server.get("version") or 0)),
                vdom,
            )
            for desc, kind, key, scale, whole in _MEASUREMENTS:
                raw = server.get(key) or 0
                value = float(int(raw)) if whole else float(raw)
                metrics.append(desc.metric(kind, value * scale, *labels))
    return metrics