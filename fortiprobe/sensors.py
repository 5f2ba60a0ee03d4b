"""Probe for hardware sensors: temperatures, fans, voltages and their thresholds."""

from __future__ import annotations

from typing import Any

from fortiprobe.metrics import Desc, FortiClient, Metric, ProbeError, TargetMetadata, ValueType

_PATH = "api/v2/monitor/system/sensor-info"

SENSOR_TEMPERATURE = Desc(
    "fortigate_sensor_temperature_celsius", "Sensor temperature in degree celsius", ("name",)
)
SENSOR_FAN = Desc("fortigate_sensor_fan_rpm", "Sensor fan rotation speed in RPM", ("name",))
SENSOR_VOLTAGE = Desc("fortigate_sensor_voltage_volts", "Sensor voltage in volts", ("name",))
SENSOR_ALARM = Desc("fortigate_sensor_alarm_status", "Sensor alarm status", ("name",))
SENSOR_THRESHOLDS = Desc(
    "fortigate_sensor_thresholds", "Sensor threasholds", ("name", "threshold")
)

# (label value, JSON key), in the order the device documents them.
_THRESHOLDS = (
    ("LowerNonRec", "lower_non_recoverable"),
    ("LowerCrit", "lower_critical"),
    ("LowerNonCrit", "lower_non_critical"),
    ("UpperNonCrit", "upper_non_critical"),
    ("UpperCrit", "upper_critical"),
    ("UpperNonRec", "upper_non_recoverable"),
)

_VALUE_DESCS = {
    "temperature": SENSOR_TEMPERATURE,
    "fan": SENSOR_FAN,
    "voltage": SENSOR_VOLTAGE,
}


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


def probe_system_sensor_info(client: FortiClient, meta: TargetMetadata | None) -> list[Metric]:
    """Report sensor readings; firmware 7 also exposes alarm state and thresholds."""
    data = _object(client.get(_PATH, "vdom=root"), "sensor info")
    with_alarms = meta is not None and meta.version_major == 7

    metrics: list[Metric] = []
    for sensor in _list(data.get("results"), "sensor results"):
        sensor = _object(sensor, "sensor")
        name = sensor.get("name") or ""
        if with_alarms:
            alarm = 1.0 if sensor.get("alarm") else 0.0
            metrics.append(SENSOR_ALARM.metric(ValueType.GAUGE, alarm, name))
            thresholds = _object(sensor.get("thresholds"), "sensor thresholds")
            for label, key in _THRESHOLDS:
                value = _num(thresholds, key)
                if value != 0:
                    metrics.append(SENSOR_THRESHOLDS.metric(ValueType.GAUGE, value, name, label))
        desc = _VALUE_DESCS.get(sensor.get("type"))
        if desc is not None:
            metrics.append(desc.metric(ValueType.GAUGE, _num(sensor, "value"), name))
    return metrics