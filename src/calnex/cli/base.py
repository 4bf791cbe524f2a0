from functools import wraps

import click
from loguru import logger

from calnex.device import CalnexAPI
from calnex.types import BadChannelError, BadProbeError, CalnexError, Channel, Probe
from calnex.util import (
    DEFAULT_LOGLEVEL,
    format_error_response,
    get_log_filename,
    load_device_config,
    shutdown_client_log,
    start_client_log,
)


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        if isinstance(sub_cmd, click.Group):
            click.echo(f"{prefix}└── {sub}")
            print_tree(sub_cmd, prefix + "    ", ctx)
        else:
            click.echo(f"{prefix}└── {sub}")


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


class ChannelType(click.ParamType):
    name = "channel"

    def convert(self, value, param, ctx):
        if isinstance(value, Channel):
            return value
        try:
            return Channel.from_label(value)
        except BadChannelError as e:
            self.fail(str(e), param, ctx)


class ProbeType(click.ParamType):
    name = "probe"

    def convert(self, value, param, ctx):
        if isinstance(value, Probe):
            return value
        try:
            return Probe.from_label(value)
        except BadProbeError as e:
            self.fail(str(e), param, ctx)


CHANNEL = ChannelType()
PROBE = ProbeType()


def get_api(ctx: click.Context) -> CalnexAPI:
    """Build the client from the group options, once per invocation."""
    obj = ctx.find_root().obj
    if obj.get("api") is not None:
        return obj["api"]

    host, insecure, timeout = obj["host"], obj["insecure"], obj["timeout"]
    if obj["device"]:
        try:
            profile = load_device_config(obj["device"])
        except ValueError as e:
            raise click.UsageError(str(e))
        host = host or profile.host
        insecure = profile.insecure if insecure is None else insecure
        timeout = profile.timeout if timeout is None else timeout
    if not host:
        raise click.UsageError("Must define either --host or --device")

    api = CalnexAPI(host, insecure=bool(insecure), timeout=timeout)
    obj["api"] = api
    ctx.find_root().call_on_close(api.close)
    return api


def device_command(f):
    """Pass the client as first argument and report client errors cleanly."""

    @click.pass_context
    @wraps(f)
    def wrapper(ctx, *args, **kwargs):
        api = get_api(ctx)
        try:
            return f(api, *args, **kwargs)
        except CalnexError as e:
            logger.error("{} failed:\n{}", ctx.info_name, format_error_response())
            msg = f"{type(e).__name__}: {e}"
            log_path = get_log_filename()
            if log_path:
                msg += f" (details in {log_path})"
            raise click.ClickException(msg)

    return wrapper


@click.group()
@tree_option
@click.option("--host", "-H", default=None, help="Device address (host[:port])")
@click.option(
    "--device",
    "-d",
    default=None,
    help="Name of a device profile in ~/.calnex/devices.ini",
)
@click.option(
    "--insecure/--verify",
    default=None,
    help="Disable/enable TLS certificate verification (default: verify)",
)
@click.option(
    "--timeout",
    "-t",
    type=float,
    default=None,
    help="Per-request timeout in seconds (default: none)",
)
@click.option(
    "--log-to-stdout/--no-log-to-stdout",
    "-lts/",
    default=True,
    help="Enable/disable console logging (default: enabled)",
)
@click.option(
    "--log-path",
    "-lp",
    default="",
    help="Log to this file as well (default: no log file)",
)
@click.option(
    "--log-level",
    "-ll",
    default=DEFAULT_LOGLEVEL,
    help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR) (default: INFO)",
)
@click.pass_context
def cli(ctx, host, device, insecure, timeout, log_to_stdout, log_path, log_level):
    """Calnex - control a network-attached time-sync test instrument.

    - Measurement control (start, stop, clear, reboot)

    - Channel/probe inspection and configuration

    - Firmware upload and problem report download
    """
    start_client_log(
        log_to_file=bool(log_path),
        log_to_stdout=log_to_stdout,
        log_path=log_path or None,
        clear_prev=False,
        log_level=log_level,
    )
    ctx.call_on_close(shutdown_client_log)
    ctx.obj = {
        "host": host,
        "device": device,
        "insecure": insecure,
        "timeout": timeout,
        "api": None,
    }


# ============================================================================
# Device state
# ============================================================================


@cli.command()
@device_command
def status(api: CalnexAPI):
    """Show reference/module readiness and measurement state."""
    st = api.fetch_status()
    click.echo(f"Reference ready:    {st.reference_ready}")
    click.echo(f"Modules ready:      {st.modules_ready}")
    click.echo(f"Measurement active: {st.measurement_active}")


@cli.command()
@device_command
def version(api: CalnexAPI):
    """Show the installed firmware version."""
    click.echo(api.fetch_version().firmware)


@cli.command()
@device_command
def start(api: CalnexAPI):
    """Start measuring on all used channels."""
    api.start_measure()
    click.echo("Measurement started")


@cli.command()
@device_command
def stop(api: CalnexAPI):
    """Stop the running measurement."""
    api.stop_measure()
    click.echo("Measurement stopped")


@cli.command()
@device_command
def clear(api: CalnexAPI):
    """Clear measurement data from the device."""
    api.clear_device()
    click.echo("Device cleared")


@cli.command()
@device_command
def reboot(api: CalnexAPI):
    """Reboot the device."""
    api.reboot()
    click.echo("Reboot requested")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@device_command
def firmware(api: CalnexAPI, path: str):
    """Upload firmware file PATH."""
    result = api.push_version(path)
    if not result.success:
        raise click.ClickException(f"Device rejected firmware: {result.message}")
    click.echo(result.message or "Firmware accepted")


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@device_command
def report(api: CalnexAPI, directory: str):
    """Download a problem report archive into DIRECTORY."""
    click.echo(api.fetch_problem_report(directory))


# ============================================================================
# Channels
# ============================================================================


@cli.command()
@device_command
def channels(api: CalnexAPI):
    """List the channels in use."""
    used = sorted(api.fetch_used_channels(), key=lambda c: c.index)
    if not used:
        click.echo("No channels in use")
        return
    for channel in used:
        click.echo(channel.label)


@cli.command()
@click.argument("channel", type=CHANNEL)
@device_command
def probe(api: CalnexAPI, channel: Channel):
    """Show the probe configured on CHANNEL."""
    click.echo(api.fetch_channel_probe(channel).label)


@cli.command()
@click.argument("channel", type=CHANNEL)
@click.option(
    "--probe",
    "-p",
    "probe_",
    type=PROBE,
    default=None,
    help="Probe to read the target of (default: the configured one)",
)
@click.option("--resolve", is_flag=True, help="Reverse-resolve the target address")
@device_command
def target(api: CalnexAPI, channel: Channel, probe_: Probe, resolve: bool):
    """Show the target CHANNEL measures against."""
    if probe_ is None:
        probe_ = api.fetch_channel_probe(channel)
    if resolve:
        click.echo(api.fetch_channel_target_name(channel, probe_))
    else:
        click.echo(api.fetch_channel_target_ip(channel, probe_))


@cli.command()
@click.argument("channel", type=CHANNEL)
@device_command
def csv(api: CalnexAPI, channel: Channel):
    """Print the latest measurement data of CHANNEL."""
    for row in api.fetch_csv(channel):
        click.echo(",".join(row))
