"""Linux probe chain: NetworkManager, wireless-tools, nl80211, procfs."""

import asyncio

from wifiviewer.config import Settings
from wifiviewer.scanner.adapters import (
    INTERFACE_PLACEHOLDER,
    CommandAdapter,
    FileProbeAdapter,
    InterfaceScopedAdapter,
)
from wifiviewer.scanner.base import BaseAdapter, WirelessInterface
from wifiviewer.scanner.interfaces import list_wireless_interfaces
from wifiviewer.scanner.parsers import (
    parse_iw,
    parse_iwlist,
    parse_nmcli,
    parse_proc_net_wireless,
)

PLATFORMS = ("linux",)


def build_linux_adapters(cfg: Settings, platform: str) -> list[BaseAdapter]:
    async def interfaces(cancel: asyncio.Event | None) -> list[WirelessInterface]:
        return await list_wireless_interfaces(
            cfg.sys_class_net,
            cfg.fallback_interfaces,
            timeout=cfg.probe_timeout,
            cancel=cancel,
        )

    return [
        CommandAdapter(
            name="nmcli",
            argv=["nmcli", "-f", "BSSID,SIGNAL,SSID", "device", "wifi", "list"],
            parser=parse_nmcli,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
        ),
        InterfaceScopedAdapter(
            name="iwlist",
            argv=["iwlist", INTERFACE_PLACEHOLDER, "scan"],
            parser=parse_iwlist,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
            interfaces=interfaces,
        ),
        InterfaceScopedAdapter(
            name="iw",
            argv=["iw", "dev", INTERFACE_PLACEHOLDER, "scan"],
            parser=parse_iw,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
            interfaces=interfaces,
        ),
        FileProbeAdapter(
            name="proc_net_wireless",
            path=cfg.proc_net_wireless,
            parser=parse_proc_net_wireless,
            platforms=PLATFORMS,
            platform=platform,
        ),
    ]
