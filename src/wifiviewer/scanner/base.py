"""Record types, BSSID validation and the base interface for probe adapters."""

import asyncio
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

UNKNOWN_SSID = "<unknown network name>"

_BSSID_RE = re.compile(r"[0-9A-Fa-f]{2}(?::[0-9A-Fa-f]{2}){5}")


def is_valid_bssid(candidate: str) -> bool:
    """Check for six colon-separated two-digit hex groups, nothing else."""
    if not isinstance(candidate, str) or len(candidate) != 17:
        return False
    return _BSSID_RE.fullmatch(candidate) is not None


def normalize_bssid(bssid: str) -> str:
    """Uppercase canonical form (AA:BB:CC:DD:EE:FF)."""
    return bssid.strip().upper()


@dataclass(frozen=True)
class WifiRecord:
    """A single access point seen by one probe."""

    ssid: str  # "" when not broadcast, UNKNOWN_SSID when not recoverable
    bssid: str  # canonical uppercase
    signal: str  # opaque, unit depends on the tool ("-45", "72", "90%")


@dataclass(frozen=True)
class WirelessInterface:
    name: str


@dataclass
class ParseResult:
    """Records plus per-line notes produced by one parser run."""

    records: list[WifiRecord] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


@dataclass
class ProbeAttempt:
    """Outcome of invoking one adapter. Lives for a single discovery call."""

    adapter_name: str
    applicable: bool = True
    invoked: bool = False
    exit_succeeded: bool = False
    raw_output: str = ""
    raw_error: str = ""
    notes: list[str] = field(default_factory=list)
    timed_out: bool = False
    cancelled: bool = False

    @classmethod
    def not_applicable(cls, adapter_name: str, platform: str) -> "ProbeAttempt":
        return cls(
            adapter_name=adapter_name,
            applicable=False,
            raw_error=f"not applicable on platform {platform!r}",
        )


class BaseAdapter(ABC):
    """Abstract base for all probe adapters.

    An adapter wraps one external scanning mechanism and the parser for
    the text it emits. ``invoke`` must never raise for tool failures.
    """

    name: str
    platforms: tuple[str, ...]
    tools: tuple[str, ...] = ()

    def __init__(self, platform: str) -> None:
        self.platform = platform

    def is_applicable(self) -> bool:
        return self.platform in self.platforms

    @abstractmethod
    async def invoke(self, cancel: asyncio.Event | None = None) -> ProbeAttempt:
        """Run the probe and capture its output."""

    @abstractmethod
    def parse(self, raw_output: str) -> ParseResult:
        """Turn captured output into validated records."""
