# -*- coding: utf-8 -*-
"""
Instrument clients for calnex.

- `Device`: base class with configuration validation and connection handling
- `Transport`: HTTP exchange with failure classification
- `CalnexAPI`: typed operations of the HTTPS control API

Examples
--------
```python
from calnex.device import CalnexAPI

with CalnexAPI("10.0.0.5", insecure=True) as api:
    print(api.fetch_status())
```

See Also
--------
calnex.settings : Settings model and decoding
calnex.types : Channel/probe model, messages and errors
"""

from .api import CalnexAPI, parse_csv, resolve_target_name
from .device import Device
from .transport import Transport

__all__ = [
    "CalnexAPI",
    "Device",
    "Transport",
    "parse_csv",
    "resolve_target_name",
]
