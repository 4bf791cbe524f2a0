"""Configuration decoder.

Answers three questions about a device configuration without the caller
knowing the device's key conventions:

1. which channels are in use (`used_channels`)
2. which probe runs on a channel (`channel_probe`, `probe_from_path_value`)
3. which peer a channel's probe measures against (`channel_target`,
   `target_from_path_value`)

Keys of unknown shape, and usage keys whose index has no public `Channel`,
are skipped when scanning: newer firmware adds keys and channels we do not
model. Only a channel the caller asked for explicitly can produce an error.

Targets are returned as stored (address or hostname); no DNS lookups happen
here.
"""

from __future__ import annotations

from loguru import logger

from calnex.types.channel import Channel, Probe
from calnex.types.errors import BadChannelError, DecodeError

from .keys import (
    PROBE_TYPE_KEY,
    PROBE_TYPE_PATH,
    USED_KEY,
    parse_path_value,
    target_key,
    target_path,
)
from .settings import MEASURE_SECTION, YES, Settings


def used_channels(settings: Settings) -> set[Channel]:
    """Channels whose `ch<N>\\used` key is "Yes"."""
    used = set()
    if not settings.has_section(MEASURE_SECTION):
        logger.debug("No [{}] section in settings, no channels used", MEASURE_SECTION)
        return used
    for key, value in settings.items(MEASURE_SECTION):
        index = USED_KEY.match(key)
        if index is None:
            continue
        try:
            channel = Channel.from_index(index)
        except BadChannelError:
            logger.trace("Ignoring usage key for unmapped channel index {}", index)
            continue
        if value.strip() == YES:
            used.add(channel)
    return used


def probe_from_raw(raw: str) -> Probe:
    """Probe from a stored value: numeric device code or display name."""
    raw = raw.strip()
    if raw.isdigit():
        return Probe.from_device_code(raw)
    return Probe.from_display_name(raw)


def channel_probe(settings: Settings, channel: Channel) -> Probe:
    """Probe configured on `channel`.

    Raises
    ------
    DecodeError
        If the settings carry no probe type for the channel.
    BadProbeError
        If the stored probe type is unknown.
    """
    key = PROBE_TYPE_KEY.format(channel.index)
    raw = settings.get_value(MEASURE_SECTION, key)
    if raw is None:
        raise DecodeError(f"no probe type configured for channel {channel} ({key})")
    return probe_from_raw(raw)


def channel_target(settings: Settings, channel: Channel, probe: Probe) -> str:
    """Raw peer address/hostname of `probe` on `channel`."""
    key = target_key(probe).format(channel.index)
    raw = settings.get_value(MEASURE_SECTION, key)
    if raw is None or not raw.strip():
        raise DecodeError(f"no {probe} target configured for channel {channel} ({key})")
    return raw.strip()


def probe_from_path_value(body: str, channel: Channel) -> Probe:
    """Probe from a `measure/ch<N>/ptp_synce/mode/probe_type=<code>` body."""
    return probe_from_raw(parse_path_value(body, PROBE_TYPE_PATH, channel.index))


def target_from_path_value(body: str, channel: Channel, probe: Probe) -> str:
    """Peer address from a `measure/ch<N>/ptp_synce/<ntp|ptp>/...=<addr>` body."""
    return parse_path_value(body, target_path(probe), channel.index)
