# -*- coding: utf-8 -*-
"""
Utility functions and constants for the calnex package.

- Logging configuration and management (`calnex.util.logging`)
- Defaults shared by the client and the CLI (`calnex.util.defaults`)
- Named device profiles (`calnex.util.devconfig`)

Examples
--------
Logging to stderr while scripting:
```python
from calnex.util import start_client_log
start_client_log(log_to_file=False, log_to_stdout=True, log_level="DEBUG")
```
"""

from .defaults import (
    CHUNK_SIZE,
    CONFIG_DIR,
    DEFAULT_LOGLEVEL,
    DEFAULT_TIMEOUT,
    PROBLEM_REPORT_PREFIX,
    PROBLEM_REPORT_SUFFIX,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
)
from .devconfig import (
    DeviceConfig,
    list_device_configs,
    load_device_config,
    save_device_config,
    validate_device_config,
)
from .logging import (
    clear_log,
    format_error_response,
    get_log_filename,
    log_default_path_client,
    shutdown_client_log,
    start_client_log,
)

__all__ = [
    "CHUNK_SIZE",
    "CONFIG_DIR",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_TIMEOUT",
    "PROBLEM_REPORT_PREFIX",
    "PROBLEM_REPORT_SUFFIX",
    "SINGLE_LINE_ERR_LOG",
    "TEST_LOGLEVEL",
    "DeviceConfig",
    "list_device_configs",
    "load_device_config",
    "save_device_config",
    "validate_device_config",
    "clear_log",
    "format_error_response",
    "get_log_filename",
    "log_default_path_client",
    "shutdown_client_log",
    "start_client_log",
]
