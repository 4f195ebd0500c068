"""Run external processes to completion without blocking the event loop."""

import asyncio
import contextlib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ardunno_cli_gen.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostic(self) -> str:
        return (self.stderr or self.stdout).strip()


async def run_command(
    *args: str,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run a process to completion, capturing its output.

    A process that cannot be spawned is reported like a failed one with exit code 127.
    """
    logger.debug("executing", args=list(args))
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.debug("spawn failed", executable=args[0], error=str(e))
        return CommandResult(returncode=127, stdout="", stderr=str(e))
    try:
        stdout, stderr = await process.communicate()
    except BaseException:
        # the child never outlives the call
        logger.debug("killing", executable=args[0], pid=process.pid)
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
        raise
    result = CommandResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
    logger.debug("process exited", executable=args[0], returncode=result.returncode)
    return result
