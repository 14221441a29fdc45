"""Windows probe chain: netsh, then netsh through cmd."""

from wifiviewer.config import Settings
from wifiviewer.scanner.adapters import CommandAdapter
from wifiviewer.scanner.base import BaseAdapter
from wifiviewer.scanner.parsers import parse_netsh

PLATFORMS = ("windows",)

_NETSH_ARGV = ["netsh", "wlan", "show", "networks", "mode=bssid"]


def build_windows_adapters(cfg: Settings, platform: str) -> list[BaseAdapter]:
    return [
        CommandAdapter(
            name="netsh",
            argv=_NETSH_ARGV,
            parser=parse_netsh,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
        ),
        CommandAdapter(
            name="netsh_shell",
            argv=_NETSH_ARGV,
            parser=parse_netsh,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
            via_shell=True,
        ),
    ]
