"""Exceptions raised by the calnex client.

All errors share the `CalnexError` base so test automation can catch every
client failure in one place, while the subclasses keep the failure kinds
distinguishable:

- `BadChannelError` / `BadProbeError`: unknown channel or probe encodings
- `TransportError`: the HTTP exchange itself failed (connection, TLS, timeout)
- `HTTPStatusError`: the device answered with a non-2xx status
- `DecodeError`: the body could not be decoded into the expected shape
- `LocalIOError`: reading or writing a local file failed

A device-level failure (a result envelope with a false success flag) is *not*
an error; see `calnex.types.messages.Result`.
"""

from __future__ import annotations


class CalnexError(Exception):
    """Base exception for calnex client errors."""

    pass


class BadChannelError(CalnexError, ValueError):
    """Unrecognised channel label or device channel index."""

    pass


class BadProbeError(CalnexError, ValueError):
    """Unrecognised probe label, device code or display name."""

    pass


class TransportError(CalnexError):
    """Network level failure talking to the device."""

    pass


class HTTPStatusError(CalnexError):
    """The device returned a non-2xx HTTP status."""

    def __init__(self, status_code: int, url: str = "", body: str = ""):
        self.status_code = status_code
        self.url = url
        self.body = body
        msg = f"HTTP {status_code} from {url}" if url else f"HTTP {status_code}"
        if body:
            msg += f": {body[:200]}"
        super().__init__(msg)


class DecodeError(CalnexError):
    """Malformed JSON, CSV, settings or path-value body."""

    pass


class LocalIOError(CalnexError, OSError):
    """Local file read/write failure (firmware upload, report download)."""

    pass
