"""Key shapes used by the device configuration.

The device only ever emits a handful of key shapes, each a fixed prefix, the
channel index, and a fixed suffix. They come in two spellings:

- settings blob keys in the `[measure]` section, `\\` separated:
  `ch6\\ptp_synce\\mode\\probe_type`
- single-key get paths, `/` separated and rooted at the section:
  `measure/ch6/ptp_synce/mode/probe_type`

`KeyShape` matches and formats one of these. It is intentionally not a general
template engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from calnex.types.channel import Probe
from calnex.types.errors import DecodeError


@dataclass(frozen=True)
class KeyShape:
    """`<prefix><index><suffix>`, e.g. `ch` + `6` + `\\used`.

    The index is written the way the device writes it: ASCII digits, no
    leading zeros.
    """

    prefix: str
    suffix: str
    _pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        pattern = re.compile(
            "^"
            + re.escape(self.prefix)
            + r"(0|[1-9][0-9]*)"
            + re.escape(self.suffix)
            + "$"
        )
        object.__setattr__(self, "_pattern", pattern)

    def format(self, index: int) -> str:
        return f"{self.prefix}{index}{self.suffix}"

    def match(self, key: str) -> int | None:
        """Embedded channel index if `key` has this shape, else None."""
        m = self._pattern.match(key.strip())
        if m is None:
            return None
        return int(m.group(1))


# [measure] section keys
USED_KEY = KeyShape("ch", "\\used")
PROBE_TYPE_KEY = KeyShape("ch", "\\ptp_synce\\mode\\probe_type")
NTP_SERVER_KEY = KeyShape("ch", "\\ptp_synce\\ntp\\server_ip")
PTP_MASTER_KEY = KeyShape("ch", "\\ptp_synce\\ptp\\master_ip")

# single-key get paths
PROBE_TYPE_PATH = KeyShape("measure/ch", "/ptp_synce/mode/probe_type")
NTP_SERVER_PATH = KeyShape("measure/ch", "/ptp_synce/ntp/server_ip")
PTP_MASTER_PATH = KeyShape("measure/ch", "/ptp_synce/ptp/master_ip")

_TARGET_KEYS = {
    Probe.NTP: NTP_SERVER_KEY,
    Probe.PTP: PTP_MASTER_KEY,
}
_TARGET_PATHS = {
    Probe.NTP: NTP_SERVER_PATH,
    Probe.PTP: PTP_MASTER_PATH,
}


def target_key(probe: Probe) -> KeyShape:
    """Settings key holding the peer address for `probe`."""
    return _TARGET_KEYS[probe]


def target_path(probe: Probe) -> KeyShape:
    """Single-key get path holding the peer address for `probe`."""
    return _TARGET_PATHS[probe]


def parse_path_value(body: str, shape: KeyShape, index: int) -> str:
    """Value of a `path=value` response for the given shape and channel index.

    The device answers single-key gets with e.g.
    `measure/ch6/ptp_synce/mode/probe_type=2`. The path must match `shape` for
    exactly `index`; the value is returned as a raw string.

    Raises
    ------
    DecodeError
        If the body is not `path=value` or the path is not the one requested.
    """
    lines = body.strip().splitlines()
    line = lines[0] if lines else ""
    path, sep, value = line.partition("=")
    if not sep:
        raise DecodeError(f"expected 'path=value', got {line!r}")
    got = shape.match(path)
    if got is None:
        raise DecodeError(f"unexpected path in response: {path!r}")
    if got != index:
        raise DecodeError(
            f"response is for channel index {got}, requested index {index}"
        )
    value = value.strip()
    if not value:
        raise DecodeError(f"empty value for {path!r}")
    return value
