"""Generic probe adapters shared by the per-platform modules."""

import asyncio
import logging
import shlex
import subprocess
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from wifiviewer.scanner.base import BaseAdapter, ParseResult, ProbeAttempt, WirelessInterface
from wifiviewer.scanner.process import CommandResult, run_command

logger = logging.getLogger(__name__)

Parser = Callable[[str], ParseResult]
InterfaceProvider = Callable[[asyncio.Event | None], Awaitable[list[WirelessInterface]]]

INTERFACE_PLACEHOLDER = "{interface}"


def shell_argv(argv: Sequence[str], platform: str) -> list[str]:
    """Wrap ``argv`` in the platform shell.

    Used as a second attempt when launching a tool directly is refused,
    e.g. by an app sandbox that only allows the system shell.
    """
    if platform == "windows":
        return ["cmd", "/c", subprocess.list2cmdline(list(argv))]
    return ["/bin/sh", "-c", shlex.join(argv)]


def _attempt_from_result(name: str, result: CommandResult) -> ProbeAttempt:
    return ProbeAttempt(
        adapter_name=name,
        invoked=result.started,
        exit_succeeded=result.ok,
        raw_output=result.stdout,
        raw_error=result.stderr if result.ok else _join(result.describe_failure(), result.stderr),
        timed_out=result.timed_out,
        cancelled=result.cancelled,
    )


def _join(*parts: str) -> str:
    return "\n".join(p.strip() for p in parts if p and p.strip())


class CommandAdapter(BaseAdapter):
    """Runs one fixed command and hands stdout to its parser."""

    def __init__(
        self,
        name: str,
        argv: Sequence[str],
        parser: Parser,
        platforms: tuple[str, ...],
        platform: str,
        timeout: float,
        via_shell: bool = False,
    ) -> None:
        super().__init__(platform)
        self.name = name
        self.argv = list(argv)
        self.parser = parser
        self.platforms = platforms
        self.timeout = timeout
        self.via_shell = via_shell
        self.tools = (Path(self.argv[0]).name,)

    def command(self) -> list[str]:
        if self.via_shell:
            return shell_argv(self.argv, self.platform)
        return list(self.argv)

    async def invoke(self, cancel: asyncio.Event | None = None) -> ProbeAttempt:
        argv = self.command()
        logger.info("Trying %s: %s", self.name, " ".join(argv))
        result = await run_command(argv, timeout=self.timeout, cancel=cancel)
        if not result.ok:
            logger.info("%s failed: %s", self.name, result.describe_failure())
        return _attempt_from_result(self.name, result)

    def parse(self, raw_output: str) -> ParseResult:
        return self.parser(raw_output)


class InterfaceScopedAdapter(BaseAdapter):
    """Runs a command once per wireless interface.

    ``argv`` holds INTERFACE_PLACEHOLDER where the interface name goes.
    All runs fold into a single ProbeAttempt: stdout from the runs that
    succeeded is concatenated, failures are collected in ``raw_error``.
    """

    def __init__(
        self,
        name: str,
        argv: Sequence[str],
        parser: Parser,
        platforms: tuple[str, ...],
        platform: str,
        timeout: float,
        interfaces: InterfaceProvider,
    ) -> None:
        super().__init__(platform)
        self.name = name
        self.argv = list(argv)
        self.parser = parser
        self.platforms = platforms
        self.timeout = timeout
        self.interfaces = interfaces
        self.tools = (self.argv[0],)

    def command_for(self, interface: str) -> list[str]:
        return [interface if arg == INTERFACE_PLACEHOLDER else arg for arg in self.argv]

    async def invoke(self, cancel: asyncio.Event | None = None) -> ProbeAttempt:
        interfaces = await self.interfaces(cancel)
        if not interfaces:
            logger.info("%s skipped: no wireless interfaces", self.name)
            return ProbeAttempt(
                adapter_name=self.name,
                raw_error="no wireless interfaces found",
            )

        attempt = ProbeAttempt(adapter_name=self.name)
        outputs: list[str] = []
        errors: list[str] = []
        for interface in interfaces:
            if cancel is not None and cancel.is_set():
                attempt.cancelled = True
                break
            argv = self.command_for(interface.name)
            logger.info("Trying %s on %s", self.name, interface.name)
            result = await run_command(argv, timeout=self.timeout, cancel=cancel)
            attempt.invoked = attempt.invoked or result.started
            attempt.timed_out = attempt.timed_out or result.timed_out
            attempt.cancelled = attempt.cancelled or result.cancelled
            if result.ok:
                attempt.exit_succeeded = True
                outputs.append(result.stdout)
            else:
                logger.info("%s on %s failed: %s", self.name, interface.name, result.describe_failure())
                errors.append(f"[{interface.name}] " + _join(result.describe_failure(), result.stderr))
            if result.cancelled:
                break

        attempt.raw_output = "\n".join(outputs)
        attempt.raw_error = "\n".join(errors)
        return attempt

    def parse(self, raw_output: str) -> ParseResult:
        return self.parser(raw_output)


class FileProbeAdapter(BaseAdapter):
    """Reads a pseudo-file for diagnostic context; never yields records."""

    def __init__(
        self,
        name: str,
        path: Path,
        parser: Parser,
        platforms: tuple[str, ...],
        platform: str,
    ) -> None:
        super().__init__(platform)
        self.name = name
        self.path = path
        self.parser = parser
        self.platforms = platforms

    async def invoke(self, cancel: asyncio.Event | None = None) -> ProbeAttempt:
        logger.info("Reading %s", self.path)
        try:
            content = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.info("Cannot read %s: %s", self.path, e)
            return ProbeAttempt(
                adapter_name=self.name,
                invoked=True,
                raw_error=f"{self.path} read error: {e}",
            )
        return ProbeAttempt(
            adapter_name=self.name,
            invoked=True,
            exit_succeeded=True,
            raw_output=content,
        )

    def parse(self, raw_output: str) -> ParseResult:
        result = self.parser(raw_output)
        # Presence probes only add context
        return ParseResult(records=[], notes=result.notes)
