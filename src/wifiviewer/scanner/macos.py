"""macOS probe chain: airport, airport through the shell, system_profiler."""

from wifiviewer.config import Settings
from wifiviewer.scanner.adapters import CommandAdapter
from wifiviewer.scanner.base import BaseAdapter
from wifiviewer.scanner.parsers import parse_airport, parse_system_profiler

PLATFORMS = ("darwin",)


def build_macos_adapters(cfg: Settings, platform: str) -> list[BaseAdapter]:
    return [
        CommandAdapter(
            name="airport",
            argv=[cfg.airport_path, "-s"],
            parser=parse_airport,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
        ),
        # Signed app bundles may be refused a direct exec of the private
        # framework binary while /bin/sh is still allowed.
        CommandAdapter(
            name="airport_shell",
            argv=[cfg.airport_path, "-s"],
            parser=parse_airport,
            platforms=PLATFORMS,
            platform=platform,
            timeout=cfg.probe_timeout,
            via_shell=True,
        ),
        CommandAdapter(
            name="system_profiler",
            argv=["system_profiler", "SPAirPortDataType"],
            parser=parse_system_profiler,
            platforms=PLATFORMS,
            platform=platform,
            # system_profiler is slow to enumerate hardware
            timeout=cfg.probe_timeout * 3,
        ),
    ]
