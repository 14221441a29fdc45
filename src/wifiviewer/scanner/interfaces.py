"""Find wireless-capable network interfaces on Linux hosts.

Interface-scoped probes (iwlist, iw) need a concrete interface name.
Three sources are tried in order and the first non-empty one wins:

1. every entry under /sys/class/net that has a ``wireless`` child
2. a list of conventional wireless names checked for the same marker
3. ``ip link show``, keeping names that look wireless
"""

import asyncio
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from wifiviewer.scanner.base import WirelessInterface
from wifiviewer.scanner.parsers import parse_ip_link
from wifiviewer.scanner.process import run_command

logger = logging.getLogger(__name__)

_VALID_INTERFACE_RE = re.compile(r"^[a-zA-Z0-9_.-]{1,15}$")


def is_valid_interface_name(name: str) -> bool:
    """Reject names that are unsafe to pass as command arguments."""
    return bool(name) and bool(_VALID_INTERFACE_RE.match(name))


def _has_wireless_marker(sys_class_net: Path, name: str) -> bool:
    try:
        return (sys_class_net / name / "wireless").exists()
    except OSError:
        return False


def _from_sysfs(sys_class_net: Path) -> list[str]:
    try:
        entries = sorted(p.name for p in sys_class_net.iterdir())
    except OSError as e:
        logger.debug("Cannot list %s: %s", sys_class_net, e)
        return []
    return [name for name in entries if _has_wireless_marker(sys_class_net, name)]


def _from_conventional_names(sys_class_net: Path, names: Iterable[str]) -> list[str]:
    return [name for name in names if _has_wireless_marker(sys_class_net, name)]


async def _from_ip_link(timeout: float, cancel: asyncio.Event | None) -> list[str]:
    result = await run_command(["ip", "link", "show"], timeout=timeout, cancel=cancel)
    if not result.ok:
        logger.debug("ip link show failed: %s", result.describe_failure())
        return []
    return parse_ip_link(result.stdout)


def _finalize(names: Iterable[str]) -> list[WirelessInterface]:
    seen: list[str] = []
    for name in names:
        if not is_valid_interface_name(name):
            logger.warning("Ignoring interface with unsafe name %r", name)
            continue
        if name not in seen:
            seen.append(name)
    return [WirelessInterface(name=name) for name in seen]


async def list_wireless_interfaces(
    sys_class_net: Path,
    fallback_names: Iterable[str],
    timeout: float,
    cancel: asyncio.Event | None = None,
) -> list[WirelessInterface]:
    """Return wireless interfaces, trying each source until one is non-empty."""
    found = _finalize(_from_sysfs(sys_class_net))
    if found:
        logger.debug("Wireless interfaces from sysfs: %s", [i.name for i in found])
        return found

    found = _finalize(_from_conventional_names(sys_class_net, fallback_names))
    if found:
        logger.debug("Wireless interfaces by conventional name: %s", [i.name for i in found])
        return found

    found = _finalize(await _from_ip_link(timeout, cancel))
    if found:
        logger.debug("Wireless interfaces from ip link: %s", [i.name for i in found])
    else:
        logger.info("No wireless interfaces found")
    return found
