# fortiprobe

`fortiprobe` turns the JSON answers of a FortiGate's REST monitor API into
Prometheus metrics, and renders them in the text exposition format.

Each probe is a plain function taking a client and the target's metadata. It
asks the client for one API endpoint and returns the list of metrics built
from the answer.

## Installation

```
pip install fortiprobe
```

The package has no runtime dependencies.

## Building blocks

`fortiprobe.metrics` holds the shared pieces:

- `FortiClient`: the interface probes talk to. Its `get(path, query)` method
  returns the decoded JSON document for an API path such as
  `api/v2/monitor/system/status`, queried with a string such as `vdom=*`.
  It should raise `ProbeError` when the request fails. Any object with such a
  `get` method will do.
- `ProbeError`: the exception for failed requests. Probes also raise it when
  a document does not have the expected shape (for instance an object where
  an array is expected, or a resource-usage answer without readings).
- `TargetMetadata`: the firmware version of the probed device, as
  `version_major` and `version_minor` (both default to 0).
- `Desc`, `Metric` and `ValueType`: a metric family (name, help text, label
  names), one sample with its label values, and the sample kind
  (`ValueType.GAUGE` or `ValueType.COUNTER`).
  `Desc.metric(value_type, value, *label_values)` builds a `Metric` and raises
  `ValueError` if the number of label values does not match the label names.
  `Metric.labels()` returns the labels as a name-to-value dict.
- `render(metrics)`: formats metrics as exposition text. Samples are grouped
  per family under `# HELP` and `# TYPE` lines; families are sorted by name and
  samples by their labels. An empty list renders as an empty string.

## Probes

| Module | Function | Endpoint |
| --- | --- | --- |
| `fortiprobe.status` | `probe_system_status` | `system/status` |
| `fortiprobe.status` | `probe_system_time` | `system/time` |
| `fortiprobe.resources` | `probe_system_resource_usage` | `system/resource/usage` (global) |
| `fortiprobe.resources` | `probe_system_resource_usage_per_vdom` | `system/resource/usage` (per VDOM) |
| `fortiprobe.link_monitor` | `probe_system_link_monitor` | `system/link-monitor` |
| `fortiprobe.ntp` | `probe_system_ntp_status` | `system/ntp/status` |
| `fortiprobe.connectors` | `probe_system_sdn_connector` | `system/sdn-connector/status` |
| `fortiprobe.connectors` | `probe_user_fsso` | `user/fsso` |
| `fortiprobe.sensors` | `probe_system_sensor_info` | `system/sensor-info` |
| `fortiprobe.vdom_resource` | `probe_system_vdom_resource` | `system/vdom-resource` |
| `fortiprobe.virtual_wan` | `probe_virtual_wan_health_check` | `virtual-wan/health-check` |

All endpoints live under `api/v2/monitor/`.

Some behaviour depends on the firmware version:

- `probe_system_ntp_status` returns metrics only when the major version is at
  least 7 and the minor version at least 4; otherwise it returns an empty list.
- `probe_system_sensor_info` adds alarm and non-zero threshold metrics when
  the major version is 7.

Some probes leave out part of their output:

- `probe_system_resource_usage` skips the first CPU reading, which is the
  average over all cores, and numbers the remaining cores from 0.
- `probe_system_link_monitor` reports latency, loss, packet counts and
  bandwidth only for links whose state is `up` or `down`.
- `probe_virtual_wan_health_check` reports them only for members whose state
  is `up`.
- `probe_system_sdn_connector` reports a status code only for the known
  states `Disabled`, `Down`, `Unknown`, `Up` and `Updating`.
- `probe_system_vdom_resource` logs and skips keys it has no handler for.

## Example

```python
from fortiprobe.metrics import TargetMetadata, render
from fortiprobe.status import probe_system_status, probe_system_time


class CannedClient:
    """Answers every request from a fixed table of documents."""

    def __init__(self, documents):
        self.documents = documents

    def get(self, path, query):
        return self.documents[path]


client = CannedClient({
    "api/v2/monitor/system/status": {
        "status": "success",
        "serial": "FGVM000000000000",
        "version": "v7.4.1",
        "build": 2463,
    },
    "api/v2/monitor/system/time": {"results": {"time": 1630313596}},
})

meta = TargetMetadata(version_major=7, version_minor=4)
metrics = probe_system_status(client, meta) + probe_system_time(client, meta)
print(render(metrics))
```

## What it does not do

- It has no HTTP client: fetching documents from a device, authentication and
  TLS are left to the `FortiClient` you supply.
- It has no server or command line; serving `/metrics` or scheduling probes
  is up to the application that uses it.
- It has no probes for network interface counters or transceivers.

## Running the tests

```
pip install -e ".[test]"
pytest
```