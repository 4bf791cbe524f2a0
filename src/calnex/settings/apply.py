"""Mutating settings towards a desired channel layout.

Test automation typically fetches the settings, applies the channel layout it
needs, and pushes the settings back only if something changed:

```python
settings = api.fetch_settings()
if configure_channel(settings, Channel.ONE, Probe.NTP, "fd00:3116:301a::3e"):
    api.push_settings(settings)
```

The settings blob stores probes by display name ("NTP client"), unlike the
single-key get endpoint which reports numeric codes.
"""

from __future__ import annotations

from loguru import logger

from calnex.types.channel import Channel, Probe

from .keys import PROBE_TYPE_KEY, USED_KEY, target_key
from .settings import MEASURE_SECTION, NO, YES, Settings


def configure_channel(
    settings: Settings, channel: Channel, probe: Probe, target: str
) -> bool:
    """Use `channel` to run `probe` against `target`. Returns True if changed."""
    index = channel.index
    changed = False
    for key, value in (
        (USED_KEY.format(index), YES),
        (PROBE_TYPE_KEY.format(index), probe.display_name),
        (target_key(probe).format(index), target),
    ):
        if settings.set_value(MEASURE_SECTION, key, value):
            logger.debug("Set {}={} for channel {}", key, value, channel)
            changed = True
    return changed


def disable_channel(settings: Settings, channel: Channel) -> bool:
    """Mark `channel` unused. Returns True if changed."""
    changed = settings.set_value(MEASURE_SECTION, USED_KEY.format(channel.index), NO)
    if changed:
        logger.debug("Disabled channel {}", channel)
    return changed
