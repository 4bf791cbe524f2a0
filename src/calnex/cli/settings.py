import click
from loguru import logger

from calnex.cli.base import CHANNEL, PROBE, device_command, tree_option
from calnex.device import CalnexAPI
from calnex.settings import Settings, configure_channel, disable_channel
from calnex.types import Channel, Probe


@click.group()
@tree_option
def settings():
    """Read and write the device settings."""
    pass


@settings.command(name="get")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write settings to this file instead of stdout",
)
@device_command
def get_settings(api: CalnexAPI, output: str | None):
    """Fetch the full device settings."""
    text = api.fetch_settings().to_text()
    if output is None:
        click.echo(text, nl=False)
        return
    with open(output, "w") as f:
        f.write(text)
    click.echo(f"Settings saved to {output}")


@settings.command(name="push")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@device_command
def push_settings(api: CalnexAPI, path: str):
    """Replace the device settings with the contents of PATH."""
    with open(path) as f:
        new_settings = Settings.from_text(f.read())
    result = api.push_settings(new_settings)
    if not result.success:
        raise click.ClickException(f"Device rejected settings: {result.message}")
    click.echo(result.message or "Settings applied")


@click.command()
@click.argument("channel", type=CHANNEL)
@click.argument("probe", type=PROBE)
@click.argument("target")
@click.option(
    "--apply/--dry-run",
    default=True,
    help="Push the changed settings to the device (default: apply)",
)
@device_command
def configure(api: CalnexAPI, channel: Channel, probe: Probe, target: str, apply: bool):
    """Measure TARGET with PROBE on CHANNEL."""
    current = api.fetch_settings()
    if not configure_channel(current, channel, probe, target):
        click.echo(f"Channel {channel} already measures {probe} against {target}")
        return
    if not apply:
        click.echo(f"Channel {channel} would change (dry run, nothing pushed)")
        return
    result = api.push_settings(current)
    if not result.success:
        raise click.ClickException(f"Device rejected settings: {result.message}")
    logger.info("Configured channel {} for {} against {}", channel, probe, target)
    click.echo(f"Channel {channel} configured: {probe} -> {target}")


@click.command()
@click.argument("channel", type=CHANNEL)
@device_command
def disable(api: CalnexAPI, channel: Channel):
    """Mark CHANNEL as unused."""
    current = api.fetch_settings()
    if not disable_channel(current, channel):
        click.echo(f"Channel {channel} already unused")
        return
    result = api.push_settings(current)
    if not result.success:
        raise click.ClickException(f"Device rejected settings: {result.message}")
    click.echo(f"Channel {channel} disabled")
