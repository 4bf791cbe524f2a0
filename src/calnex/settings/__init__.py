"""
Device settings model and the channel/probe interpretation of it.

- `settings`: the `Settings` container (INI-style text, keys are raw paths)
- `keys`: the handful of key shapes the device emits
- `decode`: used channels, per-channel probe and target
- `apply`: mutate settings towards a desired channel layout
"""

from .apply import configure_channel, disable_channel
from .decode import (
    channel_probe,
    channel_target,
    probe_from_path_value,
    probe_from_raw,
    target_from_path_value,
    used_channels,
)
from .keys import KeyShape, parse_path_value, target_key, target_path
from .settings import MEASURE_SECTION, NO, OFF, ON, YES, Settings

__all__ = [
    "configure_channel",
    "disable_channel",
    "channel_probe",
    "channel_target",
    "probe_from_path_value",
    "probe_from_raw",
    "target_from_path_value",
    "used_channels",
    "KeyShape",
    "parse_path_value",
    "target_key",
    "target_path",
    "MEASURE_SECTION",
    "NO",
    "OFF",
    "ON",
    "YES",
    "Settings",
]
