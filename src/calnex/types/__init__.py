"""
Domain types shared across the calnex package.

- `channel`: the `Channel` and `Probe` enumerations and their encodings
- `messages`: typed JSON bodies (`Status`, `Version`, `Result`) and the
  two-layer `ApiResponse`
- `errors`: the `CalnexError` hierarchy

Examples
--------
```python
from calnex.types import Channel, Probe

Channel.from_label("1").index  # 6
Probe.from_device_code("2")    # Probe.NTP
Probe.PTP.display_name         # "PTP slave"
```
"""

from .channel import (
    CHANNEL_TO_INDEX,
    INDEX_TO_CHANNEL,
    PROBE_TO_DEVICE_CODE,
    PROBE_TO_DISPLAY_NAME,
    Channel,
    Probe,
)
from .errors import (
    BadChannelError,
    BadProbeError,
    CalnexError,
    DecodeError,
    HTTPStatusError,
    LocalIOError,
    TransportError,
)
from .messages import ApiResponse, JSONMessage, Result, Status, Version

__all__ = [
    "CHANNEL_TO_INDEX",
    "INDEX_TO_CHANNEL",
    "PROBE_TO_DEVICE_CODE",
    "PROBE_TO_DISPLAY_NAME",
    "Channel",
    "Probe",
    "BadChannelError",
    "BadProbeError",
    "CalnexError",
    "DecodeError",
    "HTTPStatusError",
    "LocalIOError",
    "TransportError",
    "ApiResponse",
    "JSONMessage",
    "Result",
    "Status",
    "Version",
]
