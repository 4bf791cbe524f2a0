import io
from urllib.parse import urlsplit

import pytest
import requests
from unittest.mock import MagicMock

from calnex.device import CalnexAPI, Transport
from calnex.util import TEST_LOGLEVEL, shutdown_client_log, start_client_log

TEST_HOST = "calnex.test:8443"


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")
    config.addinivalue_line(
        "markers", "hardware: marks test that require a physical device"
    )


def _make_response(status_code=200, body=b"", url=""):
    """A real requests.Response serving `body` from memory."""
    if isinstance(body, str):
        body = body.encode()
    resp = requests.Response()
    resp.status_code = status_code
    resp.raw = io.BytesIO(body)
    resp.url = url
    resp.encoding = "utf-8"
    return resp


class FakeDevice:
    """Stands in for the device behind a mocked requests.Session.

    Every request gets the default answer unless its path (relative to /api/)
    has a route. Requests are prepared with requests itself and recorded, so
    tests can check the exact bytes that would go over the wire. Streamed
    (file) bodies are read in full, as the device would receive them.
    """

    def __init__(self, status_code=200, body=""):
        self.default = (status_code, body)
        self.routes = {}
        self.requests = []
        self.session = MagicMock(spec=requests.Session)
        self.session.request.side_effect = self._handle

    def route(self, path, status_code=200, body=""):
        self.routes[path] = (status_code, body)

    def _handle(self, method, url, **kwargs):
        prepared = requests.Request(
            method,
            url,
            params=kwargs.get("params"),
            data=kwargs.get("data"),
            files=kwargs.get("files"),
            headers=kwargs.get("headers"),
        ).prepare()
        if hasattr(prepared.body, "read"):
            # streamed body, receive it the way a server would
            prepared.body = prepared.body.read()
        self.requests.append((prepared, kwargs))
        path = urlsplit(prepared.url).path.removeprefix("/api/")
        status_code, body = self.routes.get(path, self.default)
        return _make_response(status_code, body, prepared.url)

    @property
    def last_request(self) -> requests.PreparedRequest:
        return self.requests[-1][0]


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def api(device):
    transport = Transport(insecure=True, session=device.session)
    return CalnexAPI(TEST_HOST, insecure=True, transport=transport)


@pytest.fixture()
def client_log(tmp_path):
    start_client_log(
        log_to_file=True,
        log_path=str(tmp_path / "client.log"),
        log_level=TEST_LOGLEVEL,
    )
    yield tmp_path / "client.log"
    shutdown_client_log()
