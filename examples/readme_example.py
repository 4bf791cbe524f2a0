import calnex
from calnex.settings import configure_channel
from calnex.util import start_client_log

HOST = "sentinel01.example.com"
NTP_SERVER = "fd00:3116:301a::3e"

start_client_log()  # log client messages to ~/.calnex/client.log

api = calnex.CalnexAPI(HOST, insecure=True)  # lab device, self-signed cert
ok, msg = api.open()
print(msg)

settings = api.fetch_settings()
if configure_channel(settings, calnex.Channel.ONE, calnex.Probe.NTP, NTP_SERVER):
    result = api.push_settings(settings)
    if not result.success:
        raise RuntimeError(f"Device rejected settings: {result.message}")

api.start_measure()
print(api.fetch_status())

for channel in sorted(api.fetch_used_channels(), key=lambda c: c.index):
    probe = api.fetch_channel_probe(channel)
    target = api.fetch_channel_target_name(channel, probe)
    print(f"{channel}: {probe} -> {target}")

api.close()
