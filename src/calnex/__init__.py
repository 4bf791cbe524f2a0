# -*- coding: utf-8 -*-
"""# Calnex Documentation

A (python) library for controlling a network-attached time-synchronization test
instrument (Calnex Sentinel and relatives) from automated NTP/PTP testbeds.

The library talks to the instrument over its HTTPS control channel and provides:

- Typed channel/probe model (`calnex.types`)
- Decoding and mutation of the device's path-keyed settings (`calnex.settings`)
- A request/response client for measurement control, settings, firmware and
  problem reports (`calnex.device`)
- A command-line interface (`calnex.cli`)

Examples
--------
```python
from calnex import CalnexAPI, Channel

api = CalnexAPI("sentinel01.example.com")
for channel in api.fetch_used_channels():
    probe = api.fetch_channel_probe(channel)
    print(channel, probe, api.fetch_channel_target_ip(channel, probe))
```
"""

from ._version import __version__
from .device import CalnexAPI
from .settings import Settings
from .types import Channel, Probe, Result, Status, Version

__all__ = [
    "__version__",
    "CalnexAPI",
    "Channel",
    "Probe",
    "Result",
    "Settings",
    "Status",
    "Version",
]
