"""Probe for per-VDOM resource usage and object limits."""

from __future__ import annotations

import logging
from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

log = logging.getLogger(__name__)

_PATH = "api/v2/monitor/system/vdom-resource"
_VDOM = ("vdom",)
_OBJECT = ("vdom", "object")

_SCALARS = {
    "cpu": Desc(
        "fortigate_vdom_resource_cpu_usage_ratio", "Current VDOM CPU usage in percentage", _VDOM
    ),
    "memory": Desc(
        "fortigate_vdom_resource_memory_usage_ratio",
        "Current VDOM memory usage in percentage",
        _VDOM,
    ),
    "setup_rate": Desc(
        "fortigate_vdom_resource_setup_ratio", "Current VDOM memory usage in percentage", _VDOM
    ),
}
DELETABLE = Desc("fortigate_vdom_resource_deletable", "1 if VDOM is deletable", _VDOM)

_OBJECT_FIELDS = {
    "id": Desc("fortigate_vdom_resource_object_id", "Object Resource ID", _OBJECT),
    "custom_max": Desc("fortigate_vdom_resource_object_custom_max", "Object Custom Max", _OBJECT),
    "min_custom_value": Desc(
        "fortigate_vdom_resource_object_custom_min_value", "Object Minimum custom value", _OBJECT
    ),
    "max_custom_value": Desc(
        "fortigate_vdom_resource_object_custom_max_value", "Object Maximum custom value", _OBJECT
    ),
    "guaranteed": Desc(
        "fortigate_vdom_resource_object_guaranteed", "Object Guaranteed", _OBJECT
    ),
    "min_guaranteed_value": Desc(
        "fortigate_vdom_resource_object_guaranteed_max_value",
        "Object Minimum guaranteed value",
        _OBJECT,
    ),
    "max_guaranteed_value": Desc(
        "fortigate_vdom_resource_object_guaranteed_min_value",
        "Object Maximum guaranteed value",
        _OBJECT,
    ),
    "global_max": Desc(
        "fortigate_vdom_resource_object_global_max", "Object Global max", _OBJECT
    ),
    "current_usage": Desc(
        "fortigate_vdom_resource_object_current_usage", "Object Current usage", _OBJECT
    ),
    "usage_percent": Desc(
        "fortigate_vdom_resource_object_usage_ratio", "Object Usage percentage", _OBJECT
    ),
}

OBJECT_KINDS = frozenset(
    {
        "session",
        "ipsec-phase1",
        "ipsec-phase2",
        "ipsec-phase1-interface",
        "ipsec-phase2-interface",
        "dialup-tunnel",
        "firewall-policy",
        "firewall-address",
        "firewall-addrgrp",
        "custom-service",
        "service-group",
        "onetime-schedule",
        "recurring-schedule",
        "user",
        "user-group",
        "sslvpn",
        "proxy",
        "log-disk-quota",
    }
)


def _list(data: Any, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProbeError(f"{what}: expected a JSON array")
    return data


def _object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ProbeError(f"{what}: expected a JSON object")
    return data


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProbeError(f"{what}: expected a number")
    return float(value)


def probe_system_vdom_resource(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report usage ratios, deletability and object limits of every VDOM."""
    responses = _list(client.get(_PATH, "vdom=*"), "VDOM resources")
    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "VDOM resource response")
        vdom = response.get("vdom") or ""
        results = _object(response.get("results"), "VDOM resource results")
        for key, elem in results.items():
            if key in _SCALARS:
                metrics.append(
                    _SCALARS[key].metric(ValueType.GAUGE, _number(elem, key), vdom)
                )
            elif key == "is_deletable":
                if not isinstance(elem, bool):
                    raise ProbeError("is_deletable: expected a boolean")
                metrics.append(DELETABLE.metric(ValueType.GAUGE, 1.0 if elem else 0.0, vdom))
            elif key in OBJECT_KINDS:
                for field, value in _object(elem, key).items():
                    desc = _OBJECT_FIELDS.get(field)
                    if desc is None:
                        raise ProbeError(f"{key}: unknown field {field!r}")
                    metrics.append(
                        desc.metric(ValueType.GAUGE, _number(value, f"{key}.{field}"), vdom, key)
                    )
            else:
                log.warning("Missing handler for: %s", key)
    return metrics