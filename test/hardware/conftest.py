import os

import pytest

from calnex.device import CalnexAPI


@pytest.fixture(scope="session")
def device_host():
    """Address of the device under test, from CALNEX_TEST_HOST."""
    host = os.environ.get("CALNEX_TEST_HOST", "")
    if not host:
        pytest.skip("CALNEX_TEST_HOST not set")
    return host


@pytest.fixture(scope="session")
def api(device_host):
    """Connected client, skipping the session if the device is unreachable."""
    insecure = os.environ.get("CALNEX_TEST_INSECURE", "") not in ("", "0")
    api = CalnexAPI(device_host, insecure=insecure, timeout=30)
    ok, msg = api.open()
    if not ok:
        api.close()
        pytest.skip(f"Device {device_host} not available: {msg}")
    yield api
    api.close()
