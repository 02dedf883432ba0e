"""
External process execution for browserfetch.

Archive handling shells out to system tools (``file``, ``bzcat``, ``tar``,
``hdiutil``). This module defines the interface those callers depend on so an
alternative implementation (a fake in tests, or an in-process library) can be
swapped in without changing the installer's control flow.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of an external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(ABC):
    """
    Abstract interface for running external commands.

    Implementations must block until the command exits and report its exit
    status; they must not raise for a non-zero exit.
    """

    @abstractmethod
    def run(
        self, args: Sequence[str], stdout_path: Optional[Path] = None
    ) -> CommandResult:
        """
        Run a command.

        Args:
            args: Command and arguments (``args[0]`` is the program)
            stdout_path: If given, stdout is written to this file instead of
                being captured

        Returns:
            CommandResult with exit status and captured text output

        Raises:
            FileNotFoundError: If the program does not exist
        """
        pass


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by :mod:`subprocess`."""

    def run(
        self, args: Sequence[str], stdout_path: Optional[Path] = None
    ) -> CommandResult:
        args = [str(a) for a in args]
        logger.debug(f"Running: {' '.join(args)}")

        if stdout_path is not None:
            with open(stdout_path, "wb") as out:
                proc = subprocess.run(args, stdout=out, stderr=subprocess.PIPE)
            return CommandResult(
                returncode=proc.returncode,
                stderr=proc.stderr.decode(errors="replace"),
            )

        proc = subprocess.run(args, capture_output=True, text=True, errors="replace")
        return CommandResult(
            returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr
        )


__all__ = [
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
]
