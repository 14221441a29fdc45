"""Discovery chain: try probe adapters in order until one yields access points.

    idle -> probing(adapter 1) -> probing(adapter 2) -> ... -> succeeded
                                                          \\-> exhausted

The first adapter whose output holds at least one valid BSSID ends the
chain; later adapters are never started. Adapters that do not apply to
the running platform are recorded and skipped. If none succeeds the
result is a ScanDiagnostic listing every attempt.
"""

import asyncio
import enum
import logging
from collections.abc import Sequence

from wifiviewer.config import Settings, load_config
from wifiviewer.scanner.aggregate import aggregate_records
from wifiviewer.scanner.base import BaseAdapter, ParseResult, ProbeAttempt
from wifiviewer.scanner.diagnostics import (
    DiscoveryResult,
    ScanSuccess,
    build_diagnostic,
)
from wifiviewer.scanner.linux import build_linux_adapters
from wifiviewer.scanner.macos import build_macos_adapters
from wifiviewer.scanner.windows import build_windows_adapters

logger = logging.getLogger(__name__)


class ChainState(enum.StrEnum):
    idle = "idle"
    probing = "probing"
    succeeded = "succeeded"
    exhausted = "exhausted"


def build_default_adapters(cfg: Settings, platform: str | None = None) -> list[BaseAdapter]:
    """Full adapter registry in priority order; each adapter knows its platform."""
    platform = platform or cfg.resolve_platform()
    return [
        *build_linux_adapters(cfg, platform),
        *build_macos_adapters(cfg, platform),
        *build_windows_adapters(cfg, platform),
    ]


class DiscoveryChain:
    """One-shot walk over an ordered list of adapters."""

    def __init__(self, adapters: Sequence[BaseAdapter], excerpt_chars: int = 2000) -> None:
        self.adapters = list(adapters)
        self.excerpt_chars = excerpt_chars
        self.state = ChainState.idle

    def _required_tools(self) -> list[str]:
        tools: list[str] = []
        for adapter in self.adapters:
            if not adapter.is_applicable():
                continue
            for tool in adapter.tools:
                if tool not in tools:
                    tools.append(tool)
        return tools

    async def run(self, cancel: asyncio.Event | None = None) -> DiscoveryResult:
        if self.state != ChainState.idle:
            raise RuntimeError("DiscoveryChain instances run once; build a new one")

        attempts: list[ProbeAttempt] = []
        cancelled = False
        for adapter in self.adapters:
            if cancel is not None and cancel.is_set():
                cancelled = True
                break
            if not adapter.is_applicable():
                attempts.append(ProbeAttempt.not_applicable(adapter.name, adapter.platform))
                continue

            self.state = ChainState.probing
            attempt = await adapter.invoke(cancel)
            attempts.append(attempt)

            parsed = adapter.parse(attempt.raw_output) if attempt.exit_succeeded else ParseResult()
            attempt.notes.extend(parsed.notes)
            records = aggregate_records(parsed.records)

            if records:
                self.state = ChainState.succeeded
                logger.info("%s found %d access point(s)", adapter.name, len(records))
                return ScanSuccess(records=records, adapter_name=adapter.name, attempts=attempts)

            logger.debug("%s yielded no BSSID, moving on", adapter.name)
            if attempt.cancelled:
                cancelled = True
                break

        self.state = ChainState.exhausted
        if cancelled:
            logger.warning("Discovery cancelled after %d attempt(s)", len(attempts))
        else:
            logger.warning("No BSSID found after %d attempt(s)", len(attempts))
        return build_diagnostic(
            attempts,
            tools=self._required_tools(),
            cancelled=cancelled,
            excerpt_chars=self.excerpt_chars,
        )


async def _relay(source: asyncio.Event, target: asyncio.Event) -> None:
    await source.wait()
    target.set()


async def discover(
    context: object = None,
    *,
    adapters: Sequence[BaseAdapter] | None = None,
    settings: Settings | None = None,
    cancel: asyncio.Event | None = None,
    timeout: float | None = None,
) -> DiscoveryResult:
    """Scan for nearby access points.

    Args:
        context: Caller context such as a (building, room) pair. Not used
            for scanning.
        adapters: Adapter list to walk instead of the default registry.
        settings: Configuration; loaded from the environment when omitted.
        cancel: Event the caller sets to abort; the running tool is killed
            and the gathered diagnostics are returned.
        timeout: Budget for the whole chain in seconds, defaulting to
            ``settings.scan_timeout``. Expiry behaves like ``cancel``.

    Returns:
        ScanSuccess with deduplicated records, or ScanDiagnostic.
    """
    cfg = settings or load_config()
    if adapters is None:
        adapters = build_default_adapters(cfg)
    if timeout is None:
        timeout = cfg.scan_timeout

    chain = DiscoveryChain(adapters, excerpt_chars=cfg.diagnostic_excerpt_chars)
    stop = asyncio.Event()
    relay: asyncio.Task[None] | None = None
    if cancel is not None:
        if cancel.is_set():
            stop.set()
        else:
            relay = asyncio.create_task(_relay(cancel, stop))
    timer: asyncio.TimerHandle | None = None
    if timeout is not None:
        if timeout <= 0:
            stop.set()
        else:
            timer = asyncio.get_running_loop().call_later(timeout, stop.set)

    try:
        return await chain.run(stop)
    finally:
        if timer is not None:
            timer.cancel()
        if relay is not None:
            relay.cancel()


def discover_sync(context: object = None, **kwargs) -> DiscoveryResult:  # type: ignore[no-untyped-def]
    """Blocking wrapper around :func:`discover` for synchronous callers."""
    return asyncio.run(discover(context, **kwargs))
