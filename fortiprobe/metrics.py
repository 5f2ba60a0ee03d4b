"""Metric descriptors, samples and the text exposition format."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Protocol


class ProbeError(Exception):
    """Raised when a device cannot be queried or answers with unusable data."""


class ValueType(Enum):
    """Kind of a metric sample."""

    GAUGE = "gauge"
    COUNTER = "counter"


@dataclass(frozen=True)
class Desc:
    """Name, help text and label names shared by a family of samples."""

    name: str
    help: str
    label_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_names", tuple(self.label_names))

    def metric(self, value_type: ValueType | str, value: float, *args: Any) -> Metric:
        """Build a sample of this family; one label value per label name."""
        if len(args) != len(self.label_names):
            raise ValueError(
                f"{self.name}: expected {len(self.label_names)} label values, got {len(args)}"
            )
        return Metric(
            desc=self,
            value_type=ValueType(value_type),
            value=float(value),
            label_values=tuple(str(arg) for arg in args),
        )


@dataclass(frozen=True)
class Metric:
    """A single sample with its label values."""

    desc: Desc
    value_type: ValueType
    value: float
    label_values: tuple[str, ...] = ()

    def labels(self) -> dict[str, str]:
        """Return the sample's labels as a name-to-value mapping."""
        return dict(zip(self.desc.label_names, self.label_values))


@dataclass(frozen=True)
class TargetMetadata:
    """Firmware version of the probed device."""

    version_major: int = 0
    version_minor: int = 0


class FortiClient(Protocol):
    """Anything that can fetch a decoded JSON document from the device API."""

    def get(self, path: str, query: str) -> Any:
        """Return the decoded JSON body for ``path``; raise ProbeError on failure."""
        ...


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    exponent = len(digits) + parts.exponent - 1
    if exponent < -4 or exponent >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "+" if exponent >= 0 else "-"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"
    point = exponent + 1
    if point <= 0:
        text = "0." + "0" * -point + digits
    elif point >= len(digits):
        text = digits + "0" * (point - len(digits))
    else:
        text = digits[:point] + "." + digits[point:]
    return sign + text


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _sample_line(metric: Metric) -> str:
    labels = sorted(metric.labels().items())
    value = _format_value(metric.value)
    if not labels:
        return f"{metric.desc.name} {value}"
    body = ",".join(f'{name}="{_escape_label(val)}"' for name, val in labels)
    return f"{metric.desc.name}{{{body}}} {value}"


def render(metrics: Iterable[Metric]) -> str:
    """Render samples in the text exposition format, families sorted by name."""
    families: dict[str, list[Metric]] = {}
    for metric in metrics:
        families.setdefault(metric.desc.name, []).append(metric)

    lines: list[str] = []
    for name in sorted(families):
        members = families[name]
        first = members[0]
        lines.append(f"# HELP {name} {_escape_help(first.desc.help)}")
        lines.append(f"# TYPE {name} {first.value_type.value}")
        for metric in sorted(members, key=lambda m: sorted(m.labels().items())):
            lines.append(_sample_line(metric))
    return "\n".join(lines) + "\n" if lines else ""