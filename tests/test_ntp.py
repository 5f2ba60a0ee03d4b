import pytest

from fortiprobe.metrics import ProbeError, TargetMetadata, ValueType
from fortiprobe.ntp import probe_system_ntp_status


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.queries = []

    def get(self, path, query):
        self.queries.append((path, query))
        if path not in self.responses:
            raise ProbeError(f"no such path {path}")
        return self.responses[path]


PATH = "api/v2/monitor/system/ntp/status"

SERVERS = [
    ("127.0.0.1", "HA-TEST", True, 145438),
    ("127.0.0.2", "HA-CAP", False, 124438),
    ("127.0.0.3", "HA-CODE", True, 245438),
]


def _server(ip, name, reachable, expires):
    return {
        "ip": ip,
        "server": name,
        "reachable": reachable,
        "expires": expires,
        "selected": reachable,
        "version": 1035,
        "stratum": 3,
        "reftime": 85742,
        "offset": 5482,
        "delay": 324,
        "dispersion": 342,
        "peer_dispersion": 123,
    }


NTP_DATA = [
    {"vdom": vdom, "results": [_server(*s) for s in SERVERS]}
    for vdom in ("google", "vdomtest")
]


def samples(metrics):
    return {
        (m.desc.name, tuple(sorted(m.labels().items()))): m.value for m in metrics
    }


def labels(ip, server, reachable, vdom):
    flag = "true" if reachable else "false"
    return tuple(
        sorted(
            {
                "ip": ip,
                "server": server,
                "reachable": flag,
                "selected": flag,
                "version": "1035",
                "vdom": vdom,
            }.items()
        )
    )


def test_ntp_status_on_7_4():
    client = FakeClient({PATH: NTP_DATA})
    got = samples(probe_system_ntp_status(client, TargetMetadata(7, 4)))
    assert len(got) == 7 * 6
    for vdom in ("google", "vdomtest"):
        for ip, server, reachable, expires in SERVERS:
            lbl = labels(ip, server, reachable, vdom)
            assert got[("fortigate_system_ntp_delay_seconds", lbl)] == pytest.approx(0.324)
            assert got[("fortigate_system_ntp_dispersion_seconds", lbl)] == pytest.approx(0.342)
            assert got[("fortigate_system_ntp_dispersion_peer_seconds", lbl)] == pytest.approx(
                0.123
            )
            assert got[("fortigate_system_ntp_expires_seconds", lbl)] == expires
            assert got[("fortigate_system_ntp_offset_seconds", lbl)] == pytest.approx(5.482)
            assert got[("fortigate_system_ntp_reftime_seconds", lbl)] == 85742
            assert got[("fortigate_system_ntp_stratum", lbl)] == 3


def test_reftime_is_counter():
    metrics = probe_system_ntp_status(FakeClient({PATH: NTP_DATA}), TargetMetadata(7, 4))
    kinds = {m.desc.name: m.value_type for m in metrics}
    assert kinds["fortigate_system_ntp_reftime_seconds"] is ValueType.COUNTER
    assert kinds["fortigate_system_ntp_stratum"] is ValueType.GAUGE


def test_ntp_status_before_7_4_is_empty():
    client = FakeClient({PATH: NTP_DATA})
    assert probe_system_ntp_status(client, TargetMetadata(7, 2)) == []
    assert client.queries == [(PATH, "vdom=*")]


def test_ntp_status_without_metadata_is_empty():
    assert probe_system_ntp_status(FakeClient({PATH: NTP_DATA}), None) == []


def test_client_failure_propagates():
    with pytest.raises(ProbeError):
        probe_system_ntp_status(FakeClient({}), TargetMetadata(7, 4))


def test_malformed_response_raises():
    with pytest.raises(ProbeError):
        probe_system_ntp_status(FakeClient({PATH: {"results": []}}), TargetMetadata(7, 4))