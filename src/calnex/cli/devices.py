import click

from calnex.cli.base import tree_option
from calnex.util import (
    DeviceConfig,
    list_device_configs,
    load_device_config,
    save_device_config,
)


@click.group()
@tree_option
def devices():
    """Manage device profiles (~/.calnex/devices.ini)."""
    pass


@devices.command(name="list")
def list_devices():
    """List configured device profiles."""
    names = list_device_configs()
    click.echo("\nDevice profiles:")
    click.echo("----------------")
    if not names:
        click.echo("No device profiles found")
        click.echo("")
        return
    for name in names:
        click.echo(f"  - {name}")
    click.echo("")


@devices.command()
@click.argument("name")
def show(name: str):
    """Show the device profile NAME."""
    try:
        profile = load_device_config(name)
    except ValueError as e:
        raise click.ClickException(str(e))
    for key, value in profile.to_dict().items():
        click.echo(f"{key}: {value}")


@devices.command()
@click.argument("name")
@click.option("--host", "-H", required=True, help="Device address (host[:port])")
@click.option(
    "--insecure/--verify",
    default=False,
    help="Disable/enable TLS certificate verification (default: verify)",
)
@click.option("--timeout", "-t", type=float, default=None, help="Seconds")
def add(name: str, host: str, insecure: bool, timeout: float | None):
    """Add or replace the device profile NAME."""
    path = save_device_config(
        DeviceConfig(name=name, host=host, insecure=insecure, timeout=timeout)
    )
    click.echo(f"Saved device profile '{name}' to {path}")
