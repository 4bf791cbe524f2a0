"""In-memory representation of the device settings blob.

The device exports its whole configuration as INI-style text:

```
[measure]
ch0\\used=Yes
ch6\\ptp_synce\\mode\\probe_type=NTP client
ch6\\ptp_synce\\ntp\\server_ip=fd00:3116:301a::3e
```

Keys carry backslash separated paths. The backslashes are part of the key
(data), so the parser is configured to leave keys untouched: no case folding,
no interpolation, `=` as the only delimiter.

Settings are always pushed back whole, never patched key by key.
"""

from __future__ import annotations

import io
from configparser import ConfigParser
from configparser import Error as ConfigParserError

from loguru import logger

from calnex.types.errors import DecodeError

ON = "On"
OFF = "Off"
YES = "Yes"
NO = "No"

MEASURE_SECTION = "measure"


class Settings(ConfigParser):
    """Device settings: named sections of ordered string key/value pairs."""

    def __init__(self) -> None:
        super().__init__(
            interpolation=None,
            delimiters=("=",),
            strict=False,
            empty_lines_in_values=False,
        )

    def optionxform(self, optionstr: str) -> str:
        # keys are case-sensitive paths
        return optionstr

    @classmethod
    def from_text(cls, text: str) -> Settings:
        """Parse a settings blob.

        Raises
        ------
        DecodeError
            If the text is not valid section/key=value data.
        """
        settings = cls()
        try:
            settings.read_string(text, source="<device settings>")
        except ConfigParserError as e:
            logger.error("Could not parse device settings: {}", e)
            raise DecodeError(f"malformed settings: {e}") from e
        return settings

    @classmethod
    def from_bytes(cls, data: bytes, encoding: str = "utf-8") -> Settings:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"settings are not {encoding}: {e}") from e
        return cls.from_text(text)

    def to_text(self) -> str:
        buf = io.StringIO()
        self.write(buf, space_around_delimiters=False)
        return buf.getvalue()

    def to_bytes(self, encoding: str = "utf-8") -> bytes:
        return self.to_text().encode(encoding)

    def get_value(
        self, section: str, key: str, default: str | None = None
    ) -> str | None:
        """Value of `key` in `section`, or `default` when either is missing."""
        if not self.has_section(section):
            return default
        return self[section].get(key, default)

    def set_value(self, section: str, key: str, value: str) -> bool:
        """Set `key` in `section`, creating the section if needed.

        Returns True if the stored value changed.
        """
        if not self.has_section(section):
            self.add_section(section)
        if self[section].get(key) == value:
            return False
        self[section][key] = value
        return True

    def __repr__(self) -> str:
        n_keys = sum(len(self[s]) for s in self.sections())
        return f"Settings(sections={self.sections()}, keys={n_keys})"
