"""Tests for CalnexAPI against a fake device behind a mocked requests session."""

import os
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from calnex.device import CalnexAPI, Transport, parse_csv, resolve_target_name
from calnex.settings import Settings
from calnex.types import (
    CalnexError,
    Channel,
    DecodeError,
    HTTPStatusError,
    LocalIOError,
    Probe,
    Result,
    Status,
    TransportError,
    Version,
)

TEST_HOST = "calnex.test:8443"
BASE = f"https://{TEST_HOST}/api"


# ============================================================================
# Transport
# ============================================================================


class TestTransport:
    def test_tls_verified_by_default(self):
        api = CalnexAPI("localhost")
        assert api.transport.verify
        assert api.transport.session.verify is True
        api.close()

    def test_tls_insecure_on_request(self):
        api = CalnexAPI("localhost", insecure=True)
        assert not api.transport.verify
        assert api.transport.session.verify is False
        api.close()

    def test_timeout_passed_through(self, device):
        transport = Transport(session=device.session, timeout=2.5)
        CalnexAPI(TEST_HOST, transport=transport).fetch_settings()
        assert device.requests[-1][1]["timeout"] == 2.5

    def test_connection_failure(self, device, api):
        device.session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TransportError):
            api.fetch_status()

    def test_timeout_is_transport_error(self, device, api):
        device.session.request.side_effect = requests.Timeout("too slow")
        with pytest.raises(TransportError):
            api.fetch_settings()

    def test_http_error(self, device, api):
        device.route("getstatus", 404, "no such page")
        with pytest.raises(HTTPStatusError) as excinfo:
            api.fetch_status()
        assert excinfo.value.status_code == 404
        assert excinfo.value.body == "no such page"
        assert excinfo.value.url == f"{BASE}/getstatus"

    def test_errors_share_base(self, device, api):
        device.route("getsettings", 500, "")
        with pytest.raises(CalnexError):
            api.fetch_settings()


# ============================================================================
# Channels
# ============================================================================


class TestChannels:
    def test_fetch_csv(self, device, api):
        device.route("getdata", 200, "1607961193.773740,-000.000000250501\n")
        assert api.fetch_csv(Channel.A) == [
            ["1607961193.773740", "-000.000000250501"]
        ]
        query = parse_qs(urlsplit(device.last_request.url).query)
        assert query == {"channel": ["A"], "datatype": ["tie"]}

    def test_fetch_csv_packet_channel(self, device, api):
        device.route("getdata", 200, "1,2,3\n\n4,5,6\n")
        assert api.fetch_csv(Channel.ONE) == [["1", "2", "3"], ["4", "5", "6"]]
        query = parse_qs(urlsplit(device.last_request.url).query)
        assert query == {"channel": ["1"], "datatype": ["twoway"]}

    def test_fetch_csv_empty(self, device, api):
        device.route("getdata", 200, "")
        assert api.fetch_csv(Channel.B) == []

    def test_fetch_channel_probe_ntp(self, device, api):
        path = "get/measure/ch6/ptp_synce/mode/probe_type"
        device.route(path, 200, "measure/ch6/ptp_synce/mode/probe_type=2\n")
        assert api.fetch_channel_probe(Channel.ONE) is Probe.NTP
        assert device.last_request.url == f"{BASE}/{path}"

    def test_fetch_channel_probe_ptp(self, device, api):
        device.route(
            "get/measure/ch7/ptp_synce/mode/probe_type",
            200,
            "measure/ch7/ptp_synce/mode/probe_type=0\n",
        )
        assert api.fetch_channel_probe(Channel.TWO) is Probe.PTP

    def test_fetch_channel_probe_wrong_channel(self, device, api):
        device.route(
            "get/measure/ch6/ptp_synce/mode/probe_type",
            200,
            "measure/ch7/ptp_synce/mode/probe_type=2\n",
        )
        with pytest.raises(DecodeError):
            api.fetch_channel_probe(Channel.ONE)

    def test_fetch_channel_target_ip_ntp(self, device, api):
        device.route(
            "get/measure/ch6/ptp_synce/ntp/server_ip",
            200,
            "measure/ch6/ptp_synce/ntp/server_ip=fd00:3116:301a::3e\n",
        )
        assert (
            api.fetch_channel_target_ip(Channel.ONE, Probe.NTP) == "fd00:3116:301a::3e"
        )

    def test_fetch_channel_target_ip_ptp(self, device, api):
        device.route(
            "get/measure/ch7/ptp_synce/ptp/master_ip",
            200,
            "measure/ch7/ptp_synce/ptp/master_ip=fd00:3116:301a::3e\n",
        )
        assert (
            api.fetch_channel_target_ip(Channel.TWO, Probe.PTP) == "fd00:3116:301a::3e"
        )

    def test_fetch_channel_target_name(self, device, api, monkeypatch):
        device.route(
            "get/measure/ch7/ptp_synce/ptp/master_ip",
            200,
            "measure/ch7/ptp_synce/ptp/master_ip=127.0.0.1\n",
        )
        monkeypatch.setattr(
            "calnex.device.api.socket.gethostbyaddr",
            lambda addr: ("localhost", [], [addr]),
        )
        assert api.fetch_channel_target_name(Channel.TWO, Probe.PTP) == "localhost"

    def test_fetch_used_channels(self, device, api):
        device.route(
            "getsettings", 200, "[measure]\nch0\\used=Yes\nch6\\used=No\nch7\\used=Yes\n"
        )
        assert api.fetch_used_channels() == {Channel.A, Channel.TWO}


class TestResolveTargetName:
    def test_hostname_unchanged(self, monkeypatch):
        def fail(addr):
            raise AssertionError("no lookup expected")

        monkeypatch.setattr("calnex.device.api.socket.gethostbyaddr", fail)
        assert resolve_target_name("time.example.com") == "time.example.com"

    def test_lookup_failure_returns_address(self, monkeypatch):
        def fail(addr):
            raise OSError("unknown host")

        monkeypatch.setattr("calnex.device.api.socket.gethostbyaddr", fail)
        assert resolve_target_name("fd00::1") == "fd00::1"


def test_parse_csv_quoted_fields():
    assert parse_csv('a,"b,c"\n') == [["a", "b,c"]]


# ============================================================================
# Settings
# ============================================================================


class TestSettingsExchange:
    def test_fetch_settings(self, device, api):
        device.route("getsettings", 200, "[measure]\nch0\\synce_enabled=Off\n")
        settings = api.fetch_settings()
        assert settings.get_value("measure", "ch0\\synce_enabled") == "Off"

    def test_fetch_settings_malformed(self, device, api):
        device.route("getsettings", 200, "not a settings blob")
        with pytest.raises(DecodeError):
            api.fetch_settings()

    def test_push_settings(self, device, api):
        device.route("setsettings", 200, '{\n"result": true\n}')
        settings = Settings.from_text("[measure]\nch0\\synce_enabled=Off\n")
        result = api.push_settings(settings)
        assert result == Result(success=True)
        assert device.last_request.method == "POST"
        assert device.last_request.url == f"{BASE}/setsettings"
        assert device.last_request.body == settings.to_bytes()

    def test_push_settings_device_failure_is_returned(self, device, api):
        device.route(
            "setsettings", 200, '{"result": false, "message": "invalid key"}'
        )
        result = api.push_settings(Settings())
        assert not result.success
        assert result.message == "invalid key"

    def test_push_settings_non_envelope(self, device, api):
        device.route("setsettings", 200, "OK")
        with pytest.raises(DecodeError):
            api.push_settings(Settings())

    def test_push_empty_settings_http_error(self, device, api):
        device.route("setsettings", 404, "")
        with pytest.raises(HTTPStatusError) as excinfo:
            api.push_settings(Settings())
        assert excinfo.value.status_code == 404
        assert device.last_request.method == "POST"


# ============================================================================
# Status & firmware
# ============================================================================


class TestStatusAndFirmware:
    def test_fetch_status(self, device, api):
        device.route(
            "getstatus",
            200,
            '{\n"referenceReady": true,\n"modulesReady": true,\n'
            '"measurementActive": false\n}',
        )
        assert api.fetch_status() == Status(
            reference_ready=True, modules_ready=True, measurement_active=False
        )

    def test_fetch_status_missing_field(self, device, api):
        device.route("getstatus", 200, '{"referenceReady": true}')
        with pytest.raises(DecodeError):
            api.fetch_status()

    def test_fetch_status_string_flag(self, device, api):
        device.route(
            "getstatus",
            200,
            '{"referenceReady": "no", "modulesReady": true,'
            ' "measurementActive": false}',
        )
        with pytest.raises(DecodeError):
            api.fetch_status()
        assert not api.is_connected()

    def test_fetch_version(self, device, api):
        device.route("version", 200, '{"firmware": "2.13.1.0.5583D-20210924"}')
        assert api.fetch_version() == Version(firmware="2.13.1.0.5583D-20210924")

    def test_push_version(self, device, api, tmp_path):
        device.route(
            "updatefirmware",
            200,
            '{\n"result" : true,\n'
            '"message" : "Installing firmware Version: 2.13.1.0.5583D-20210924"\n}',
        )
        fw = tmp_path / "sentinel_fw_v2.13.1.tar"
        fw.write_bytes(b"Hello Calnex!\x00\xff" * 10000)
        result = api.push_version(fw)
        assert result == Result(
            success=True,
            message="Installing firmware Version: 2.13.1.0.5583D-20210924",
        )
        req = device.last_request
        assert req.method == "POST"
        assert req.url == f"{BASE}/updatefirmware"
        assert req.headers["Content-Type"] == "application/octet-stream"
        assert req.headers["Content-Length"] == str(fw.stat().st_size)
        # the device receives exactly the file contents
        assert req.body == fw.read_bytes()
        # the open file went to requests as a stream, not read into memory
        assert hasattr(device.requests[-1][1]["data"], "read")

    def test_push_version_missing_file(self, device, api, tmp_path):
        with pytest.raises(LocalIOError):
            api.push_version(tmp_path / "missing.tar")
        assert device.requests == []

    def test_push_version_http_error(self, device, api, tmp_path):
        device.route("updatefirmware", 413, "too large")
        fw = tmp_path / "fw.tar"
        fw.write_bytes(b"x")
        with pytest.raises(HTTPStatusError) as excinfo:
            api.push_version(fw)
        assert excinfo.value.status_code == 413

    def test_post(self, device, api):
        device.route("anything", 200, '{\n"result" : true,\n"message" : "LGTM"\n}')
        resp = api.post(api.url("anything"), data=b"payload")
        assert resp.status_code == 200
        assert resp.value == Result(success=True, message="LGTM")
        assert resp.ok
        assert device.last_request.body == b"payload"

    def test_post_device_failure(self, device, api):
        device.route("anything", 200, '{"result": false, "message": "nope"}')
        resp = api.post(api.url("anything"))
        assert resp.status_code == 200
        assert not resp.ok
        assert resp.value.message == "nope"


# ============================================================================
# Measurement control
# ============================================================================


class TestControl:
    @pytest.mark.parametrize(
        "operation, url",
        [
            ("start_measure", f"{BASE}/startmeasurement"),
            ("stop_measure", f"{BASE}/stopmeasurement"),
            ("clear_device", f"{BASE}/cleardevice?action=cleardevice"),
            ("reboot", f"{BASE}/reboot?action=reboot"),
        ],
    )
    def test_control(self, device, api, operation, url):
        device.default = (200, '{\n"result": true\n}')
        assert getattr(api, operation)() is None
        assert device.last_request.method == "GET"
        assert device.last_request.url == url

    def test_control_device_failure_does_not_raise(self, device, api):
        device.route("startmeasurement", 200, '{"result": false, "message": "busy"}')
        api.start_measure()

    def test_control_plain_body(self, device, api):
        device.route("stopmeasurement", 200, "OK")
        api.stop_measure()

    def test_control_http_error(self, device, api):
        device.route("reboot", 503, "")
        with pytest.raises(HTTPStatusError) as excinfo:
            api.reboot()
        assert excinfo.value.status_code == 503


# ============================================================================
# Connection
# ============================================================================


class TestConnection:
    def test_open(self, device, api):
        device.route("version", 200, '{"firmware": "2.13.1"}')
        ok, msg = api.open()
        assert ok
        assert "2.13.1" in msg

    def test_open_failure(self, device, api):
        device.route("version", 500, "")
        ok, msg = api.open()
        assert not ok
        assert "500" in msg

    def test_is_connected(self, device, api):
        assert not api.is_connected()
        device.route(
            "getstatus",
            200,
            '{"referenceReady": false, "modulesReady": false, '
            '"measurementActive": false}',
        )
        assert api.is_connected()

    def test_context_manager_closes_session(self, device, api):
        with api:
            pass
        device.session.close.assert_called_once()

    def test_config_types_validated(self):
        with pytest.raises(ValueError, match="host has wrong type"):
            CalnexAPI(1234)
        with pytest.raises(ValueError, match="insecure has wrong type"):
            CalnexAPI("localhost", insecure="yes")


# ============================================================================
# Problem report
# ============================================================================


class TestProblemReport:
    def test_fetch_problem_report(self, device, api, tmp_path):
        device.route("getproblemreport", 200, b"I am a problem report")
        path = api.fetch_problem_report(tmp_path)
        name = os.path.basename(path)
        assert name.startswith("calnex_problem_report_")
        assert name.endswith(".tar")
        with open(path, "rb") as f:
            assert f.read() == b"I am a problem report"
        assert device.requests[-1][1]["stream"] is True

    def test_reports_in_same_second_do_not_collide(self, device, api, tmp_path):
        device.route("getproblemreport", 200, b"report")
        first = api.fetch_problem_report(tmp_path)
        second = api.fetch_problem_report(tmp_path)
        assert first != second
        assert sorted(p.name for p in tmp_path.iterdir()) == sorted(
            os.path.basename(p) for p in (first, second)
        )
        for path in (first, second):
            with open(path, "rb") as f:
                assert f.read() == b"report"

    def test_missing_directory(self, device, api, tmp_path):
        device.route("getproblemreport", 200, b"report")
        with pytest.raises(LocalIOError):
            api.fetch_problem_report(tmp_path / "missing")

    def test_http_error_leaves_no_file(self, device, api, tmp_path):
        device.route("getproblemreport", 500, "")
        with pytest.raises(HTTPStatusError):
            api.fetch_problem_report(tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_interrupted_download_is_removed(self, device, api, tmp_path, monkeypatch):
        device.route("getproblemreport", 200, b"partial")

        def broken(self, chunk_size=1, decode_unicode=False):
            yield b"part"
            raise requests.exceptions.ChunkedEncodingError("connection reset")

        monkeypatch.setattr(requests.Response, "iter_content", broken)
        with pytest.raises(TransportError):
            api.fetch_problem_report(tmp_path)
        assert list(tmp_path.iterdir()) == []
