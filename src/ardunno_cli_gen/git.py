"""Thin async wrapper around the `git` executable."""

import os
from pathlib import Path

from ardunno_cli_gen.process import CommandResult, run_command


class GitClient:
    """git operations against a local working copy.

    Each call runs `git` to completion and reports the outcome instead of raising.
    """

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def _env(self) -> dict[str, str]:
        # a missing repository must fail instead of prompting for credentials
        return {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

    async def clone(self, url: str, dest: str | Path) -> CommandResult:
        return await run_command(self.executable, "clone", url, str(dest), env=self._env())

    async def fetch_all(self, dest: str | Path) -> CommandResult:
        return await run_command(
            self.executable, "-C", str(dest), "fetch", "--all", "--tags", env=self._env()
        )

    async def checkout(self, dest: str | Path, ref: str) -> CommandResult:
        return await run_command(self.executable, "-C", str(dest), "checkout", ref, env=self._env())
