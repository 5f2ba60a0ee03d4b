"""Probes for CPU, memory and session usage, globally and per VDOM."""

from __future__ import annotations

from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

_PATH = "api/v2/monitor/system/resource/usage"

CPU_USAGE = Desc(
    "fortigate_cpu_usage_ratio",
    "Current resource usage ratio of system CPU, per core",
    ("processor",),
)
MEMORY_USAGE = Desc(
    "fortigate_memory_usage_ratio", "Current resource usage ratio of system memory"
)
SESSIONS = Desc(
    "fortigate_current_sessions", "Current amount of sessions, per IP version", ("protocol",)
)

VDOM_CPU_USAGE = Desc(
    "fortigate_vdom_cpu_usage_ratio", "Current resource usage ratio of CPU, per VDOM", ("vdom",)
)
VDOM_MEMORY_USAGE = Desc(
    "fortigate_vdom_memory_usage_ratio",
    "Current resource usage ratio of memory, per VDOM",
    ("vdom",),
)
VDOM_SESSIONS = Desc(
    "fortigate_vdom_current_sessions",
    "Current amount of sessions, per VDOM and IP version",
    ("vdom", "protocol"),
)


def _object(data: Any, what: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProbeError(f"{what}: expected a JSON object")
    return data


def _readings(container: dict, key: str) -> list[float]:
    entries = container.get(key) or []
    if not isinstance(entries, list):
        raise ProbeError(f"resource usage {key!r}: expected a JSON array")
    return [float(_object(entry, key).get("current") or 0) for entry in entries]


def _first(container: dict, key: str) -> float:
    readings = _readings(container, key)
    if not readings:
        raise ProbeError(f"resource usage has no {key!r} readings")
    return readings[0]


def probe_system_resource_usage(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report per-core CPU, memory and session counts for the whole device."""
    data = _object(client.get(_PATH, "interval=1-min&scope=global"), "resource usage")
    results = _object(data.get("results"), "resource usage results")

    # The first CPU reading is the average over all cores.
    metrics = [
        CPU_USAGE.metric(ValueType.GAUGE, current / 100.0, str(core))
        for core, current in enumerate(_readings(results, "cpu")[1:])
    ]
    metrics.append(MEMORY_USAGE.metric(ValueType.GAUGE, _first(results, "mem") / 100.0))
    metrics.append(SESSIONS.metric(ValueType.GAUGE, _first(results, "session"), "ipv4"))
    metrics.append(SESSIONS.metric(ValueType.GAUGE, _first(results, "session6"), "ipv6"))
    return metrics


def probe_system_resource_usage_per_vdom(
    client: FortiClient, meta: TargetMetadata | None
) -> list[Metric]:
    """Report CPU, memory and session counts for every VDOM."""
    responses = client.get(_PATH, "interval=1-min&vdom=*") or []
    if not isinstance(responses, list):
        raise ProbeError("resource usage per VDOM: expected a JSON array")

    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "resource usage")
        vdom = response.get("vdom") or ""
        results = _object(response.get("results"), "resource usage results")
        metrics.append(VDOM_CPU_USAGE.metric(ValueType.GAUGE, _first(results, "cpu") / 100.0, vdom))
        metrics.append(
            VDOM_MEMORY_USAGE.metric(ValueType.GAUGE, _first(results, "mem") / 100.0, vdom)
        )
        metrics.append(
            VDOM_SESSIONS.metric(ValueType.GAUGE, _first(results, "session"), vdom, "ipv4")
        )
        metrics.append(
            VDOM_SESSIONS.metric(ValueType.GAUGE, _first(results, "session6"), vdom, "ipv6")
        )
    return metrics