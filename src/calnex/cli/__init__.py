"""
Command-line interface for calnex.

The CLI is built using the Click framework. The device is chosen with
`--host` or a named profile (`--device`, see `calnex devices`).

Examples
--------
Checking a device with a self-signed certificate:
```bash
$ calnex --host 10.0.0.5 --insecure status
```

Pointing channel 1 at an NTP server and starting a measurement:
```bash
$ calnex -d lab1 configure 1 ntp fd00:3116:301a::3e
$ calnex -d lab1 start
```

CLI Tree
--------

```
$ calnex --tree
cli
└── channels
└── clear
└── configure
└── csv
└── devices
    └── add
    └── list
    └── show
└── disable
└── firmware
└── probe
└── reboot
└── report
└── settings
    └── get
    └── push
└── start
└── status
└── stop
└── target
└── version
```
"""

from .base import cli, tree_option
from .devices import devices
from .settings import configure, disable, settings

cli.add_command(settings)
cli.add_command(configure)
cli.add_command(disable)
cli.add_command(devices)
