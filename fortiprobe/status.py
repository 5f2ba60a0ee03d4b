"""Probes for system status and system time."""

from __future__ import annotations

from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

VERSION_INFO = Desc(
    "fortigate_version_info",
    "System version and build information",
    ("serial", "version", "build"),
)
SYSTEM_TIME = Desc("fortigate_time_seconds", "System epoch time in seconds")


def _object(data: Any, what: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProbeError(f"{what}: expected a JSON object")
    return data


def probe_system_status(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report serial number, firmware version and build."""
    status = _object(client.get("api/v2/monitor/system/status", ""), "system status")
    build = int(status.get("build") or 0)
    return [
        VERSION_INFO.metric(
            ValueType.GAUGE,
            1.0,
            status.get("serial") or "",
            status.get("version") or "",
            str(build),
        )
    ]


def probe_system_time(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report the device clock as epoch seconds."""
    data = _object(client.get("api/v2/monitor/system/time", "vdom=root"), "system time")
    results = _object(data.get("results"), "system time results")
    return [SYSTEM_TIME.metric(ValueType.GAUGE, float(results.get("time") or 0))]