import pytest

from fortiprobe.metrics import ProbeError, TargetMetadata, ValueType, render
from fortiprobe.virtual_wan import probe_virtual_wan_health_check

PATH = "api/v2/monitor/virtual-wan/health-check"


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, path, query):
        self.calls.append((path, query))
        if path not in self.responses:
            raise ProbeError(f"no response for {path}")
        return self.responses[path]


HEALTH = [
    {
        "http_method": "GET",
        "vdom": "root",
        "results": {
            "Internet Check": {
                "WAN1_VL300": {
                    "status": "up",
                    "latency": 5.611332893371582,
                    "jitter": 0.03116671182215214,
                    "packet_loss": 0,
                    "packet_sent": 306958,
                    "packet_received": 306895,
                    "sla_targets_met": [1],
                    "session": 710,
                    "tx_bandwidth": 117296,
                    "rx_bandwidth": 257003,
                    "state_changed": 1614107800,
                },
                "wan2": {"status": "disable"},
            }
        },
    }
]


def _values(metrics):
    return {(m.desc.name, tuple(sorted(m.labels().items()))): m for m in metrics}


def test_health_check_status_lines():
    client = FakeClient({PATH: HEALTH})
    metrics = probe_virtual_wan_health_check(client, TargetMetadata())
    assert client.calls == [(PATH, "vdom=*")]
    status = [m for m in metrics if m.desc.name == "fortigate_virtual_wan_status"]
    rendered = render(status).splitlines()[2:]
    assert rendered == [
        'fortigate_virtual_wan_status{interface="WAN1_VL300",sla="Internet Check",state="disable",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="WAN1_VL300",sla="Internet Check",state="down",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="WAN1_VL300",sla="Internet Check",state="error",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="WAN1_VL300",sla="Internet Check",state="unknown",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="WAN1_VL300",sla="Internet Check",state="up",vdom="root"} 1',
        'fortigate_virtual_wan_status{interface="wan2",sla="Internet Check",state="disable",vdom="root"} 1',
        'fortigate_virtual_wan_status{interface="wan2",sla="Internet Check",state="down",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="wan2",sla="Internet Check",state="error",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="wan2",sla="Internet Check",state="unknown",vdom="root"} 0',
        'fortigate_virtual_wan_status{interface="wan2",sla="Internet Check",state="up",vdom="root"} 0',
    ]


def test_health_check_measurements_for_up_member():
    metrics = probe_virtual_wan_health_check(FakeClient({PATH: HEALTH}), None)
    labels = (("interface", "WAN1_VL300"), ("sla", "Internet Check"), ("vdom", "root"))
    values = _values(metrics)
    assert values[("fortigate_virtual_wan_active_sessions", labels)].value == 710
    assert values[("fortigate_virtual_wan_bandwidth_rx_byte_per_second", labels)].value == 32125.375
    assert values[("fortigate_virtual_wan_bandwidth_tx_byte_per_second", labels)].value == 14662
    assert values[("fortigate_virtual_wan_latency_seconds", labels)].value == pytest.approx(
        0.005611332893371582
    )
    assert values[("fortigate_virtual_wan_latency_jitter_seconds", labels)].value == pytest.approx(
        3.116671182215214e-05
    )
    assert values[("fortigate_virtual_wan_packet_loss_ratio", labels)].value == 0
    assert values[("fortigate_virtual_wan_packet_received_total", labels)].value == 306895
    sent = values[("fortigate_virtual_wan_packet_sent_total", labels)]
    assert sent.value == 306958
    assert sent.value_type is ValueType.GAUGE
    assert values[("fortigate_virtual_wan_status_change_time_seconds", labels)].value == 1.6141078e9


def test_health_check_disabled_member_has_only_status():
    metrics = probe_virtual_wan_health_check(FakeClient({PATH: HEALTH}), None)
    wan2 = [m for m in metrics if m.labels()["interface"] == "wan2"]
    assert {m.desc.name for m in wan2} == {"fortigate_virtual_wan_status"}
    assert len(metrics) == 10 + 9


@pytest.mark.parametrize(
    "status,state", [("down", "down"), ("error", "error"), ("weird", "unknown"), (None, "unknown")]
)
def test_health_check_non_up_states(status, state):
    data = [{"vdom": "v", "results": {"sla": {"m": {"status": status, "latency": 3}}}}]
    metrics = probe_virtual_wan_health_check(FakeClient({PATH: data}), None)
    active = [m.labels()["state"] for m in metrics if m.value == 1.0]
    assert active == [state]
    assert len(metrics) == 5


def test_health_check_client_error_propagates():
    with pytest.raises(ProbeError):
        probe_virtual_wan_health_check(FakeClient({}), None)


def test_health_check_rejects_object_top_level():
    with pytest.raises(ProbeError):
        probe_virtual_wan_health_check(FakeClient({PATH: {"results": {}}}), None)