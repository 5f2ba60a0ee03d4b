"""Probes for SDN connectors and FSSO agents."""

from __future__ import annotations

from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

_SDN_LABELS = ("vdom", "name", "type")

SDN_CONNECTOR_STATUS = Desc(
    "fortigate_system_sdn_connector_status",
    "Status of SDN connectors (0=Disabled, 1=Down, 2=Unknown, 3=Up, 4=Updating)",
    _SDN_LABELS,
)
SDN_CONNECTOR_LAST_UPDATE = Desc(
    "fortigate_system_sdn_connector_last_update_seconds",
    "Last update time for SDN connectors (in seconds from epoch)",
    _SDN_LABELS,
)
FSSO_INFO = Desc(
    "fortigate_user_fsso_info",
    "Info on Fsso defined connectors",
    ("vdom", "name", "id", "type", "status"),
)

_SDN_STATUS_CODES = {"Disabled": 0, "Down": 1, "Unknown": 2, "Up": 3, "Updating": 4}


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


def probe_system_sdn_connector(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report status code and last update time of every SDN connector."""
    responses = _list(
        client.get("api/v2/monitor/system/sdn-connector/status", "vdom=*"), "SDN connectors"
    )
    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "SDN connector response")
        vdom = response.get("vdom") or ""
        for connector in _list(response.get("results"), "SDN connector results"):
            connector = _object(connector, "SDN connector")
            labels = (vdom, connector.get("name") or "", connector.get("type") or "")
            code = _SDN_STATUS_CODES.get(connector.get("status"))
            if code is not None:
                metrics.append(SDN_CONNECTOR_STATUS.metric(ValueType.GAUGE, float(code), *labels))
            last_update = float(int(connector.get("last_update") or 0))
            metrics.append(SDN_CONNECTOR_LAST_UPDATE.metric(ValueType.GAUGE, last_update, *labels))
    return metrics


def probe_user_fsso(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report one info sample per FSSO connector; polling agents are named by id."""
    responses = _list(client.get("api/v2/monitor/user/fsso", "vdom=*"), "FSSO")
    metrics: list[Metric] = []
    for response in responses:
        response = _object(response, "FSSO response")
        vdom = response.get("vdom") or ""
        for agent in _list(response.get("results"), "FSSO results"):
            agent = _object(agent, "FSSO agent")
            kind = agent.get("type") or ""
            if kind == "fsso":
                name, ident = agent.get("name") or "", ""
            else:
                name, ident = "", str(int(agent.get("id") or 0))
            metrics.append(
                FSSO_INFO.metric(
                    ValueType.GAUGE, 1.0, vdom, name, ident, kind, agent.get("status") or ""
                )
            )
    return metrics