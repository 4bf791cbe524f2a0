"""Device profiles stored in an INI file.

Testbeds usually talk to a fixed set of instruments, so the CLI (and scripts)
can refer to them by name instead of repeating host/TLS options. Profiles live
in `~/.calnex/devices.ini`:

[lab1]
host = sentinel01.example.com
insecure = true
timeout = 30

`insecure` disables TLS certificate verification and defaults to false; it is
only meant for lab devices with self-signed certificates.
"""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from mashumaro import DataClassDictMixin

from .defaults import CONFIG_DIR

DEVICES_FILE = "devices.ini"
_BOOL_STRINGS = ("1", "yes", "true", "on", "0", "no", "false", "off")


@dataclass(kw_only=True)
class DeviceConfig(DataClassDictMixin):
    """Connection settings of one named device."""

    name: str
    host: str
    insecure: bool = False
    timeout: float | None = None

    def to_section(self) -> dict[str, str]:
        section = {"host": self.host, "insecure": str(self.insecure).lower()}
        if self.timeout is not None:
            section["timeout"] = str(self.timeout)
        return section


def default_devices_path() -> Path:
    return Path(CONFIG_DIR) / DEVICES_FILE


def validate_device_config(config: ConfigParser, section: str) -> tuple[bool, str]:
    """Validate device profile section.

    Parameters
    ----------
    config : ConfigParser
        ConfigParser instance containing the profiles
    section : str
        Name of the section to validate

    Returns
    -------
    tuple[bool, str]
        (is_valid, error_message)
    """
    if "host" not in config[section] or not config[section]["host"].strip():
        return False, "Missing required field: host"

    insecure = config[section].get("insecure", "false").strip().lower()
    if insecure not in _BOOL_STRINGS:
        return False, f"Invalid insecure flag: {insecure}"

    if "timeout" in config[section]:
        try:
            timeout = float(config[section]["timeout"])
        except ValueError:
            return False, f"Invalid timeout: {config[section]['timeout']}"
        if timeout <= 0:
            return False, f"Timeout must be positive, got {timeout}"

    return True, ""


def _read(path: Path | None) -> tuple[ConfigParser, Path]:
    path = Path(path) if path is not None else default_devices_path()
    config = ConfigParser()
    if path.exists():
        config.read(path)
    return config, path


def load_device_config(name: str, path: Path | None = None) -> DeviceConfig:
    """Load the named device profile.

    Section lookup is case-insensitive.

    Raises
    ------
    ValueError
        If the profile is missing or invalid.
    """
    config, path = _read(path)
    for section in config.sections():
        if section.lower() != name.lower():
            continue
        is_valid, msg = validate_device_config(config, section)
        if not is_valid:
            logger.error("Invalid device profile '{}' in {}: {}", section, path, msg)
            raise ValueError(f"Invalid device profile '{section}': {msg}")
        timeout = config[section].get("timeout")
        return DeviceConfig(
            name=section,
            host=config[section]["host"].strip(),
            insecure=config[section].getboolean("insecure", fallback=False),
            timeout=float(timeout) if timeout is not None else None,
        )
    raise ValueError(f"Device '{name}' not found in {path}")


def list_device_configs(path: Path | None = None) -> list[str]:
    """Names of all profiles in the devices file."""
    config, _ = _read(path)
    return config.sections()


def save_device_config(device: DeviceConfig, path: Path | None = None) -> Path:
    """Add or replace a profile, keeping the other profiles in the file."""
    config, path = _read(path)
    for section in config.sections():
        if section.lower() == device.name.lower():
            config.remove_section(section)
    config[device.name] = device.to_section()

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        config.write(f)
    logger.debug("Saved device profile '{}' to {}", device.name, path)
    return path
