"""Host-side execution of assembled build tool invocations."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence
import logging
import shlex
import subprocess


logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs an argument vector and reports the child's exit status."""

    def run(self, command: Sequence[str], *, cwd: Path | None = None) -> int:
        raise NotImplementedError

    @staticmethod
    def format_command(command: Sequence[str]) -> str:
        return " ".join(shlex.quote(part) for part in command)


class SubprocessCommandRunner(CommandRunner):
    """Run commands via :mod:`subprocess` with output streamed to the terminal.

    Raises :class:`OSError` when the executable cannot be started.
    """

    def run(self, command: Sequence[str], *, cwd: Path | None = None) -> int:
        logger.debug("Running %s (cwd=%s)", self.format_command(command), cwd or ".")
        process = subprocess.run(list(command), cwd=str(cwd) if cwd else None, check=False)
        return process.returncode


__all__ = ["CommandRunner", "SubprocessCommandRunner"]
