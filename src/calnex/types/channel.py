"""Channel and probe enumerations.

The device identifies measurement channels by an internal numeric index that
differs from the label printed on the front panel. Lettered channels (A-F) map
onto indices 0-5, the numbered packet channels (1, 2) onto 6 and 7. The mapping
is kept in one explicit table (`CHANNEL_TO_INDEX`) so the offset is visible and
testable, rather than derived arithmetically.

Probes (the protocol measured on a channel) have three unrelated encodings:

| probe | label | device code | display name |
|-------|-------|-------------|--------------|
| NTP   | ntp   | 2           | NTP client   |
| PTP   | ptp   | 0           | PTP slave    |

The label is what users and configs type, the device code is what the
single-key get endpoint returns, and the display name is what the settings
blob stores.

Both enums have their label as value, so they (de)serialize to the label inside
mashumaro dataclasses.
"""

from __future__ import annotations

from enum import Enum

from .errors import BadChannelError, BadProbeError


class Channel(Enum):
    """A physical measurement channel, valued by its front-panel label."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    ONE = "1"
    TWO = "2"

    @classmethod
    def _missing_(cls, value):
        # labels are case-insensitive ("c" == "C")
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Channel:
        """Decode a front-panel label such as "A" or "1".

        Raises
        ------
        BadChannelError
            If the label is not a known channel (including the empty string).
        """
        try:
            return cls(label)
        except ValueError as e:
            raise BadChannelError(f"unknown channel: {label!r}") from e

    @classmethod
    def from_index(cls, index: int | str) -> Channel:
        """Decode a device-internal channel index."""
        try:
            return INDEX_TO_CHANNEL[int(index)]
        except (KeyError, ValueError, TypeError) as e:
            raise BadChannelError(f"unknown channel index: {index!r}") from e

    @property
    def label(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        """Device-internal channel index."""
        return CHANNEL_TO_INDEX[self]

    @property
    def datatype(self) -> str:
        """Measurement data type requested when fetching CSV data."""
        return CHANNEL_TO_DATATYPE[self]


class Probe(Enum):
    """Protocol measured on a channel, valued by its label."""

    NTP = "ntp"
    PTP = "ptp"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lower = value.strip().lower()
            for member in cls:
                if member.value == lower:
                    return member
        return None

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Probe:
        """Decode a probe label ("ntp" or "ptp")."""
        try:
            return cls(label)
        except ValueError as e:
            raise BadProbeError(f"unknown probe: {label!r}") from e

    @classmethod
    def from_device_code(cls, code: int | str) -> Probe:
        """Decode the numeric probe code used by the device."""
        try:
            return DEVICE_CODE_TO_PROBE[int(str(code).strip())]
        except (KeyError, ValueError) as e:
            raise BadProbeError(f"unknown probe device code: {code!r}") from e

    @classmethod
    def from_display_name(cls, name: str) -> Probe:
        """Decode the probe display name stored in the settings blob."""
        for probe, display_name in PROBE_TO_DISPLAY_NAME.items():
            if display_name == name.strip():
                return probe
        raise BadProbeError(f"unknown probe display name: {name!r}")

    @property
    def label(self) -> str:
        return self.value

    @property
    def device_code(self) -> int:
        return PROBE_TO_DEVICE_CODE[self]

    @property
    def display_name(self) -> str:
        return PROBE_TO_DISPLAY_NAME[self]


# front-panel label <-> device index, the only place the offset is defined
CHANNEL_TO_INDEX: dict[Channel, int] = {
    Channel.A: 0,
    Channel.B: 1,
    Channel.C: 2,
    Channel.D: 3,
    Channel.E: 4,
    Channel.F: 5,
    Channel.ONE: 6,
    Channel.TWO: 7,
}
INDEX_TO_CHANNEL: dict[int, Channel] = {v: k for k, v in CHANNEL_TO_INDEX.items()}

# A/B measure physical signals (time interval error), the rest are packet probes
CHANNEL_TO_DATATYPE: dict[Channel, str] = {
    Channel.A: "tie",
    Channel.B: "tie",
    Channel.C: "twoway",
    Channel.D: "twoway",
    Channel.E: "twoway",
    Channel.F: "twoway",
    Channel.ONE: "twoway",
    Channel.TWO: "twoway",
}

PROBE_TO_DEVICE_CODE: dict[Probe, int] = {
    Probe.NTP: 2,
    Probe.PTP: 0,
}
DEVICE_CODE_TO_PROBE: dict[int, Probe] = {
    v: k for k, v in PROBE_TO_DEVICE_CODE.items()
}

PROBE_TO_DISPLAY_NAME: dict[Probe, str] = {
    Probe.NTP: "NTP client",
    Probe.PTP: "PTP slave",
}
