"""Parsers for the text emitted by each supported scanning tool.

Every parser takes raw stdout and returns a ParseResult. Parsers never
raise: a line that does not fit the expected format is skipped and
described in ``notes`` so it can show up in the diagnostic payload.
Records leaving a parser carry a validated, uppercase BSSID.
"""

import re
from dataclasses import dataclass

from wifiviewer.scanner.base import (
    UNKNOWN_SSID,
    ParseResult,
    WifiRecord,
    is_valid_bssid,
    normalize_bssid,
)


_NETSH_SSID_RE = re.compile(r"^SSID\s*\d*\s*:\s?(.*)$")
_NETSH_BSSID_RE = re.compile(r"^BSSID\s*\d*\s*:\s*(.*)$")
_NETSH_SIGNAL_RE = re.compile(r"^Signal\s*:\s*(\S+)")
_IWLIST_ESSID_RE = re.compile(r'ESSID:"(.*)"')
_IWLIST_SIGNAL_RE = re.compile(r"Signal level[=:]\s*(-?\d+(?:\.\d+)?(?:/\d+)?)")


def _add_candidate(
    result: ParseResult, candidate: str, ssid: str, signal: str, line_no: int
) -> bool:
    candidate = candidate.strip()
    if not is_valid_bssid(candidate):
        result.notes.append(f"line {line_no}: invalid BSSID {candidate!r} skipped")
        return False
    result.records.append(
        WifiRecord(ssid=ssid, bssid=normalize_bssid(candidate), signal=signal)
    )
    return True


# ---------------------------------------------------------------------------
# Tabular listings (one network per line, header first)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TabularLayout:
    """Fixed column positions for a whitespace-separated listing."""

    bssid_column: int
    ssid_column: int
    signal_column: int
    ssid_is_last: bool = False  # SSID swallows the rest of the line
    hidden_marker: str | None = None  # placeholder the tool prints for no SSID
    # SSID may contain spaces and sits right before the BSSID
    anchor_on_bssid: bool = False


NMCLI_LAYOUT = TabularLayout(
    bssid_column=0, signal_column=1, ssid_column=2, ssid_is_last=True, hidden_marker="--"
)
AIRPORT_LAYOUT = TabularLayout(
    bssid_column=1, ssid_column=0, signal_column=2, anchor_on_bssid=True
)

_TOKEN_RE = re.compile(r"\S+")


def _anchored_parts(line: str, layout: TabularLayout) -> list[str] | None:
    """Split ``line`` around the first valid BSSID at or after the SSID column.

    Everything between the SSID column and that BSSID is the SSID, so
    ``My Home Net aa:bb:cc:dd:ee:ff -50`` keeps its spaces. Returns None
    when no token on the line is a BSSID.
    """
    tokens = list(_TOKEN_RE.finditer(line))
    anchor = next(
        (
            i
            for i in range(layout.ssid_column, len(tokens))
            if is_valid_bssid(tokens[i].group())
        ),
        None,
    )
    if anchor is None:
        return None
    if anchor > layout.ssid_column:
        ssid = line[tokens[layout.ssid_column].start() : tokens[anchor].start()].strip()
    else:
        ssid = ""
    leading = [t.group() for t in tokens[: layout.ssid_column]]
    return leading + [ssid] + [t.group() for t in tokens[anchor:]]


def parse_tabular(text: str, layout: TabularLayout) -> ParseResult:
    result = ParseResult()
    lines = text.splitlines()
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        parts = None
        if layout.anchor_on_bssid:
            parts = _anchored_parts(line, layout)
        if parts is None and layout.ssid_is_last:
            parts = line.split(maxsplit=layout.ssid_column)
        elif parts is None:
            parts = line.split()

        needed = max(layout.bssid_column, layout.signal_column) + 1
        if not layout.ssid_is_last:
            needed = max(needed, layout.ssid_column + 1)
        if len(parts) < needed:
            result.notes.append(f"line {line_no}: too few columns ({len(parts)})")
            continue

        ssid = parts[layout.ssid_column].strip() if len(parts) > layout.ssid_column else ""
        if layout.hidden_marker is not None and ssid == layout.hidden_marker:
            ssid = ""
        _add_candidate(
            result,
            parts[layout.bssid_column],
            ssid,
            parts[layout.signal_column],
            line_no,
        )
    return result


def parse_nmcli(text: str) -> ParseResult:
    """``nmcli -f BSSID,SIGNAL,SSID device wifi list``."""
    return parse_tabular(text, NMCLI_LAYOUT)


def parse_airport(text: str) -> ParseResult:
    """``airport -s``: SSID BSSID RSSI CHANNEL HT CC SECURITY."""
    return parse_tabular(text, AIRPORT_LAYOUT)


# ---------------------------------------------------------------------------
# Key-prefixed listings (free-form blocks with "Address:" / "BSSID" markers)
# ---------------------------------------------------------------------------


def parse_iwlist(text: str) -> ParseResult:
    """``iwlist <iface> scan``.

    Each cell opens with ``Cell NN - Address: <mac>``; ESSID and signal
    level follow inside the same cell.
    """
    result = ParseResult()
    pending: dict[str, str] | None = None

    def flush() -> None:
        if pending is not None:
            result.records.append(WifiRecord(**pending))

    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if "Address:" in stripped:
            flush()
            pending = None
            candidate = stripped.split("Address:", 1)[1].strip()
            if is_valid_bssid(candidate):
                pending = {"ssid": "", "bssid": normalize_bssid(candidate), "signal": ""}
            else:
                result.notes.append(f"line {line_no}: invalid BSSID {candidate!r} skipped")
            continue
        if pending is None:
            continue
        essid = _IWLIST_ESSID_RE.search(stripped)
        if essid:
            pending["ssid"] = essid.group(1)
            continue
        level = _IWLIST_SIGNAL_RE.search(stripped)
        if level:
            pending["signal"] = level.group(1)
    flush()
    return result


def parse_netsh(text: str) -> ParseResult:
    """``netsh wlan show networks mode=bssid``.

    ``SSID n : name`` opens a network; each ``BSSID n : mac`` under it is
    one access point whose ``Signal : NN%`` line follows.
    """
    result = ParseResult()
    current_ssid = ""
    pending: dict[str, str] | None = None

    def flush() -> None:
        if pending is not None:
            result.records.append(WifiRecord(**pending))

    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        # BSSID first: "BSSID" also contains "SSID"
        bssid_match = _NETSH_BSSID_RE.match(stripped)
        if bssid_match:
            flush()
            pending = None
            candidate = bssid_match.group(1).strip()
            if is_valid_bssid(candidate):
                pending = {
                    "ssid": current_ssid,
                    "bssid": normalize_bssid(candidate),
                    "signal": "",
                }
            else:
                result.notes.append(f"line {line_no}: invalid BSSID {candidate!r} skipped")
            continue
        ssid_match = _NETSH_SSID_RE.match(stripped)
        if ssid_match:
            flush()
            pending = None
            current_ssid = ssid_match.group(1).strip()
            continue
        signal_match = _NETSH_SIGNAL_RE.match(stripped)
        if signal_match and pending is not None:
            pending["signal"] = signal_match.group(1)
    flush()
    return result


def parse_system_profiler(text: str) -> ParseResult:
    """``system_profiler SPAirPortDataType``.

    Only ``BSSID:`` markers are read. The nesting of this report does not
    tie a name to an address reliably, so records carry UNKNOWN_SSID.
    """
    result = ParseResult()
    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped.startswith("BSSID:"):
            continue
        candidate = stripped.split("BSSID:", 1)[1].strip()
        _add_candidate(result, candidate, UNKNOWN_SSID, "", line_no)
    return result


# ---------------------------------------------------------------------------
# Section-header listings ("BSS <mac>(on wlan0)")
# ---------------------------------------------------------------------------


def parse_iw(text: str) -> ParseResult:
    """``iw dev <iface> scan``."""
    result = ParseResult()
    pending: dict[str, str] | None = None

    def flush() -> None:
        if pending is not None:
            result.records.append(WifiRecord(**pending))

    for line_no, line in enumerate(text.splitlines(), start=1):
        # Section headers are not indented; "\tBSS Load:" is a field
        if line.startswith("BSS "):
            flush()
            pending = None
            parts = line.split()
            if len(parts) < 2:
                result.notes.append(f"line {line_no}: BSS header without address")
                continue
            candidate = parts[1].split("(", 1)[0]
            if is_valid_bssid(candidate):
                pending = {"ssid": "", "bssid": normalize_bssid(candidate), "signal": ""}
            else:
                result.notes.append(f"line {line_no}: invalid BSSID {candidate!r} skipped")
            continue
        if pending is None:
            continue
        stripped = line.strip()
        if stripped.startswith("SSID:"):
            pending["ssid"] = stripped[len("SSID:"):].strip()
        elif stripped.startswith("signal:"):
            value = stripped[len("signal:"):].split()
            if value:
                pending["signal"] = value[0]
    flush()
    return result


# ---------------------------------------------------------------------------
# Presence-only sources
# ---------------------------------------------------------------------------


def parse_proc_net_wireless(text: str) -> ParseResult:
    """``/proc/net/wireless``: never yields records, only notes.

    The file lists interfaces with link quality; no access point
    addresses are exposed.
    """
    result = ParseResult()
    for line in text.splitlines()[2:]:
        if ":" not in line:
            continue
        name, _, rest = line.partition(":")
        columns = rest.split()
        if len(columns) >= 3:
            result.notes.append(
                f"interface {name.strip()} present (link {columns[1]}, level {columns[2]})"
            )
        else:
            result.notes.append(f"interface {name.strip()} present")
    if not result.notes:
        result.notes.append("no wireless interfaces listed")
    return result


def parse_ip_link(text: str) -> list[str]:
    """Names of likely-wireless links in ``ip link show`` output."""
    names: list[str] = []
    for line in text.splitlines():
        if line[:1].isspace():
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        name = parts[1].rstrip(":").split("@", 1)[0]
        if name.startswith(("wl", "wifi")) and name not in names:
            names.append(name)
    return names
