"""Run external scanning tools without letting their failures escape.

A missing executable, a non-zero exit, a timeout or a caller-side cancel
all come back as a CommandResult. The child runs in its own process group,
which is killed and reaped before returning so no orphan outlives the
discovery call.
"""

import asyncio
import contextlib
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_WINDOWS = sys.platform == "win32"

# Seconds to wait for pipes to close and for taskkill after a kill
_DRAIN_TIMEOUT = 1.0


@dataclass
class CommandResult:
    argv: list[str]
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None  # set when the tool could not be started
    timed_out: bool = False
    cancelled: bool = False

    @property
    def started(self) -> bool:
        return self.error is None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and not self.timed_out
            and not self.cancelled
            and self.returncode == 0
        )

    def describe_failure(self) -> str:
        """One-line reason for a failed run, empty when it succeeded."""
        if self.error is not None:
            return self.error
        if self.cancelled:
            return f"{self.argv[0]}: cancelled"
        if self.timed_out:
            return f"{self.argv[0]}: timed out"
        if self.returncode != 0:
            return f"{self.argv[0]}: exited with status {self.returncode}"
        return ""


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _spawn_options() -> dict:
    # Own process group, so a shell wrapper and everything it started die together
    if _WINDOWS:
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


async def _kill_tree(proc: asyncio.subprocess.Process) -> None:
    if _WINDOWS:
        try:
            killer = await asyncio.create_subprocess_exec(
                "taskkill", "/T", "/F", "/PID", str(proc.pid),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await asyncio.wait_for(killer.wait(), _DRAIN_TIMEOUT)
        except (OSError, TimeoutError) as e:
            logger.debug("taskkill for pid %s failed: %s", proc.pid, e)
    else:
        with contextlib.suppress(ProcessLookupError, PermissionError):
            os.killpg(proc.pid, signal.SIGKILL)
    with contextlib.suppress(ProcessLookupError):
        proc.kill()


async def _kill(proc: asyncio.subprocess.Process, communicate: asyncio.Future) -> None:
    await _kill_tree(proc)
    # Drain the pipes; a grandchild that left the group may still hold them
    done, _ = await asyncio.wait({communicate}, timeout=_DRAIN_TIMEOUT)
    if communicate in done:
        return
    logger.warning("Output pipes of pid %s still open after kill", proc.pid)
    communicate.cancel()
    await asyncio.gather(communicate, return_exceptions=True)
    try:
        await asyncio.wait_for(proc.wait(), _DRAIN_TIMEOUT)
    except TimeoutError:
        logger.warning("pid %s was not reaped", proc.pid)


async def run_command(
    argv: Sequence[str],
    timeout: float | None,
    cancel: asyncio.Event | None = None,
) -> CommandResult:
    """Run ``argv`` with no stdin and capture decoded stdout/stderr."""
    argv = list(argv)
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **_spawn_options(),
        )
    except FileNotFoundError:
        logger.info("%s not found", argv[0])
        return CommandResult(argv=argv, error=f"{argv[0]}: command not found")
    except PermissionError as e:
        logger.info("%s not executable: %s", argv[0], e)
        return CommandResult(argv=argv, error=f"{argv[0]}: permission denied")
    except OSError as e:
        logger.warning("Failed to start %s: %s", argv[0], e)
        return CommandResult(argv=argv, error=f"{argv[0]}: {e}")

    communicate = asyncio.ensure_future(proc.communicate())
    waiters: set[asyncio.Future] = {communicate}
    cancel_waiter: asyncio.Future | None = None
    if cancel is not None:
        cancel_waiter = asyncio.ensure_future(cancel.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        await _kill(proc, communicate)
        raise
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()

    if communicate in done:
        stdout, stderr = communicate.result()
        return CommandResult(
            argv=argv,
            returncode=proc.returncode,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
        )

    cancelled = cancel is not None and cancel.is_set()
    if cancelled:
        logger.info("Cancelling %s", argv[0])
    else:
        logger.warning("%s timed out after %ss, killing it", argv[0], timeout)
    await _kill(proc, communicate)
    return CommandResult(
        argv=argv,
        returncode=proc.returncode,
        timed_out=not cancelled,
        cancelled=cancelled,
    )
