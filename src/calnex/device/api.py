"""Client for the Calnex HTTPS control API.

Every operation follows the same shape: build the URL (and body for mutating
calls), perform the exchange through `Transport`, decode the body into the
expected type. Transport failures and non-2xx statuses raise; a device-level
failure (a `Result` with `success == False`) is returned for the caller to
inspect.

The client keeps no state between calls besides the immutable host and
transport configuration, so one instance can be shared between threads. It
does not track the measurement state either: `start_measure` on an already
running device returns whatever the device answers.

Examples
--------
```python
api = CalnexAPI("sentinel01.example.com")
settings = api.fetch_settings()
if configure_channel(settings, Channel.ONE, Probe.NTP, "fd00::3e"):
    result = api.push_settings(settings)
    if not result.success:
        raise RuntimeError(result.message)
api.start_measure()
```
"""

from __future__ import annotations

import csv
import io
import ipaddress
import os
import socket
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Type

import requests
from loguru import logger

from calnex.settings import Settings
from calnex.settings.decode import (
    probe_from_path_value,
    target_from_path_value,
    used_channels,
)
from calnex.settings.keys import PROBE_TYPE_PATH, target_path
from calnex.types.channel import Channel, Probe
from calnex.types.errors import (
    CalnexError,
    DecodeError,
    LocalIOError,
    TransportError,
)
from calnex.types.messages import M, ApiResponse, Result, Status, Version
from calnex.util.defaults import (
    CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    PROBLEM_REPORT_PREFIX,
    PROBLEM_REPORT_SUFFIX,
)

from .device import Device
from .transport import Transport

# paths relative to https://<host>/api/
DATA_PATH = "getdata"
GET_PATH = "get"
GET_SETTINGS_PATH = "getsettings"
SET_SETTINGS_PATH = "setsettings"
STATUS_PATH = "getstatus"
VERSION_PATH = "version"
FIRMWARE_PATH = "updatefirmware"
START_MEASURE_PATH = "startmeasurement"
STOP_MEASURE_PATH = "stopmeasurement"
CLEAR_DEVICE_PATH = "cleardevice?action=cleardevice"
REBOOT_PATH = "reboot?action=reboot"
PROBLEM_REPORT_PATH = "getproblemreport"


def resolve_target_name(target: str) -> str:
    """Best-effort reverse lookup of a literal address.

    Hostnames are returned unchanged. If the lookup fails the address itself is
    returned. No retries and no caching.
    """
    try:
        ipaddress.ip_address(target)
    except ValueError:
        return target
    try:
        name, _, _ = socket.gethostbyaddr(target)
    except OSError as e:
        logger.warning("Could not resolve {}: {}", target, e)
        return target
    return name


def parse_csv(text: str) -> list[list[str]]:
    """Rows of string fields, in order, blank lines dropped."""
    try:
        return [row for row in csv.reader(io.StringIO(text)) if row]
    except csv.Error as e:
        raise DecodeError(f"malformed CSV: {e}") from e


class CalnexAPI(Device):
    """Client bound to one device.

    Parameters
    ----------
    host : str
        Device address, optionally with port ("10.0.0.5", "sentinel:8443").
    insecure : bool, optional
        Skip TLS certificate verification, by default False.
    timeout : float | None, optional
        Per-request timeout passed to the transport, by default none.
    transport : Transport | None, optional
        Transport to use instead of building one from `insecure`/`timeout`.
    """

    host: str
    insecure: bool
    required_config = {"host": str, "insecure": bool}

    def __init__(
        self,
        host: str,
        insecure: bool = False,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
    ):
        super().__init__(host=host, insecure=insecure)
        if transport is None:
            transport = Transport(insecure=insecure, timeout=timeout)
        self.transport = transport
        self._base_url = f"https://{host}/api"

    def __repr__(self):
        return f"CalnexAPI(host={self.host!r}, insecure={self.insecure})"

    # ============================================================================
    # Connection
    # ============================================================================

    def open(self) -> tuple[bool, str]:
        try:
            version = self.fetch_version()
        except CalnexError as e:
            logger.error("Could not connect to {}: {}", self.host, e)
            return False, str(e)
        return True, f"Connected to {self.host} (firmware {version.firmware})"

    def close(self):
        self.transport.close()

    def is_connected(self) -> bool:
        try:
            self.fetch_status()
        except CalnexError:
            return False
        return True

    # ============================================================================
    # Request helpers
    # ============================================================================

    def url(self, path: str) -> str:
        return f"{self._base_url}/{path}"

    def _get_text(self, url: str, **kwargs) -> str:
        resp = self.transport.request("GET", url, **kwargs)
        return resp.text

    def _get_json(self, url: str, response_type: Type[M]) -> M:
        resp = self.transport.request("GET", url)
        try:
            return response_type.from_body(resp.content)
        except DecodeError as e:
            logger.error("Bad {} body from {}: {}", response_type.__name__, url, e)
            raise

    def post(
        self, url: str, data=None, files=None, headers=None
    ) -> ApiResponse[Result]:
        """POST and decode the result envelope.

        Returns both layers: the HTTP status and the device's `Result`. A
        `Result` with `success == False` is returned, not raised.
        """
        resp = self.transport.request(
            "POST", url, data=data, files=files, headers=headers
        )
        result = Result.from_body(resp.content)
        if not result.success:
            logger.warning("Device reported failure for {}: {}", url, result.message)
        return ApiResponse(status_code=resp.status_code, value=result)

    def _control(self, path: str) -> None:
        """GET a control endpoint. Only transport/HTTP failures raise."""
        url = self.url(path)
        resp = self.transport.request("GET", url)
        try:
            result = Result.from_body(resp.content)
        except DecodeError as e:
            logger.debug("Ignoring non-envelope body from {}: {}", url, e)
            return
        if not result.success:
            logger.warning("Device reported failure for {}: {}", url, result.message)

    # ============================================================================
    # Channels
    # ============================================================================

    def fetch_csv(self, channel: Channel) -> list[list[str]]:
        """Latest measurement data of `channel` as rows of string fields."""
        params = {"channel": channel.label, "datatype": channel.datatype}
        text = self._get_text(self.url(DATA_PATH), params=params)
        rows = parse_csv(text)
        logger.debug("Fetched {} CSV rows for channel {}", len(rows), channel)
        return rows

    def fetch_channel_probe(self, channel: Channel) -> Probe:
        """Probe configured on `channel`."""
        path = PROBE_TYPE_PATH.format(channel.index)
        body = self._get_text(self.url(f"{GET_PATH}/{path}"))
        return probe_from_path_value(body, channel)

    def fetch_channel_target_ip(self, channel: Channel, probe: Probe) -> str:
        """Raw address (or hostname) `probe` on `channel` measures against."""
        path = target_path(probe).format(channel.index)
        body = self._get_text(self.url(f"{GET_PATH}/{path}"))
        return target_from_path_value(body, channel, probe)

    def fetch_channel_target_name(self, channel: Channel, probe: Probe) -> str:
        """Reverse-resolved name of the channel target, the raw value if that fails."""
        return resolve_target_name(self.fetch_channel_target_ip(channel, probe))

    def fetch_used_channels(self) -> set[Channel]:
        """Channels marked as used in the device settings."""
        return used_channels(self.fetch_settings())

    # ============================================================================
    # Settings
    # ============================================================================

    def fetch_settings(self) -> Settings:
        text = self._get_text(self.url(GET_SETTINGS_PATH))
        return Settings.from_text(text)

    def push_settings(self, settings: Settings) -> Result:
        """Send the whole settings object back to the device."""
        return self.post(self.url(SET_SETTINGS_PATH), data=settings.to_bytes()).value

    # ============================================================================
    # Status & firmware
    # ============================================================================

    def fetch_status(self) -> Status:
        return self._get_json(self.url(STATUS_PATH), Status)

    def fetch_version(self) -> Version:
        return self._get_json(self.url(VERSION_PATH), Version)

    def push_version(self, path: str | os.PathLike) -> Result:
        """Upload a firmware file. The device installs it if `success` is True.

        The file is the raw request body, streamed from disk as it is sent.
        """
        path = Path(path)
        try:
            fw = path.open("rb")
        except OSError as e:
            logger.error("Could not open firmware file {}: {}", path, e)
            raise LocalIOError(f"could not open firmware {path}: {e}") from e
        with fw:
            try:
                resp = self.post(
                    self.url(FIRMWARE_PATH),
                    data=fw,
                    headers={"Content-Type": "application/octet-stream"},
                )
            except CalnexError:
                raise
            except OSError as e:
                # reading the file while streaming the upload
                logger.error("Could not read firmware file {}: {}", path, e)
                raise LocalIOError(f"could not read firmware {path}: {e}") from e
        logger.info("Firmware {} pushed to {}: {}", path.name, self.host, resp.value)
        return resp.value

    # ============================================================================
    # Measurement control
    # ============================================================================

    def start_measure(self) -> None:
        self._control(START_MEASURE_PATH)

    def stop_measure(self) -> None:
        self._control(STOP_MEASURE_PATH)

    def clear_device(self) -> None:
        self._control(CLEAR_DEVICE_PATH)

    def reboot(self) -> None:
        self._control(REBOOT_PATH)

    # ============================================================================
    # Problem report
    # ============================================================================

    def fetch_problem_report(self, directory: str | os.PathLike) -> str:
        """Download the diagnostic archive into `directory`.

        Returns
        -------
        str
            Path of the saved `calnex_problem_report_<timestamp>_<suffix>.tar`.
            The random suffix keeps reports fetched in the same second apart.
        """
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        resp = self.transport.request(
            "GET", self.url(PROBLEM_REPORT_PATH), stream=True
        )
        report_path = None
        done = False
        try:
            with resp:
                fd, name = tempfile.mkstemp(
                    prefix=f"{PROBLEM_REPORT_PREFIX}{stamp}_",
                    suffix=PROBLEM_REPORT_SUFFIX,
                    dir=directory,
                )
                report_path = Path(name)
                with os.fdopen(fd, "wb") as f:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
            done = True
        except requests.RequestException as e:
            logger.error("Problem report download from {} failed: {}", self.host, e)
            raise TransportError(f"problem report download failed: {e}") from e
        except OSError as e:
            target = report_path or directory
            logger.error("Could not write problem report to {}: {}", target, e)
            raise LocalIOError(
                f"could not write problem report to {target}: {e}"
            ) from e
        finally:
            if report_path is not None and not done:
                report_path.unlink(missing_ok=True)
        logger.info("Saved problem report to {}", report_path)
        return str(report_path)
