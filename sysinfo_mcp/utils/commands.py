"""Bounded execution of platform utilities (xrandr, system_profiler, PowerShell).

Commands run through asyncio subprocesses so a slow utility never blocks the
event loop. Every exit path (success, non-zero exit, timeout, cancellation)
reaps the child process.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single command invocation.

    Attributes:
        returncode: Process exit code (-1 when the process never ran or was killed).
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        timed_out: True if the command exceeded its timeout and was killed.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


async def run_command(cmd: Sequence[str], timeout: float) -> CommandResult:
    """Run ``cmd`` with an explicit timeout.

    Args:
        cmd: Program and arguments (no shell involved).
        timeout: Seconds to wait before the process is killed.

    Returns:
        CommandResult. Missing executables and OS errors are reported as
        ``returncode=-1`` instead of raising.
    """
    command = " ".join(cmd)
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.debug("Command not found: %s", cmd[0])
        return CommandResult(returncode=-1, stderr=f"{cmd[0]}: command not found")
    except OSError as e:
        logger.debug("Failed to start %s: %s", command, e)
        return CommandResult(returncode=-1, stderr=str(e))

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _terminate(process)
        logger.debug("Command timed out after %.1fs: %s", timeout, command)
        return CommandResult(returncode=-1, timed_out=True)
    except asyncio.CancelledError:
        await _terminate(process)
        raise

    returncode: Optional[int] = process.returncode
    result = CommandResult(
        returncode=returncode if returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace").strip(),
    )
    if not result.ok:
        logger.debug("Command failed: %s (rc=%d, stderr=%s)", command, result.returncode, result.stderr)
    return result


__all__ = ["CommandResult", "run_command"]
