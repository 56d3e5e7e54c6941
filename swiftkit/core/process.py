"""
Subprocess execution for swiftkit.

Wraps `subprocess.run` so that every external program (gpg, dpkg, yum)
is started the same way and every failure surfaces as a ProcessError.
Commands are run once; callers decide whether a failure is fatal.
"""

import logging
import subprocess
from typing import Sequence

from swiftkit.core.exceptions import ProcessError

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs external programs and reports failures as ProcessError."""

    def run(self, args: Sequence[str], quiet: bool = False) -> None:
        """
        Run a program to completion.

        Args:
            args: Program and arguments
            quiet: Capture (and discard) the program's output instead of
                letting it reach the terminal

        Raises:
            ProcessError: If the program is missing or exits non-zero
        """
        args = [str(a) for a in args]
        logger.debug(f"Running: {' '.join(args)}")

        try:
            result = subprocess.run(
                args,
                capture_output=quiet,
                text=True,
                check=False,
            )
        except (FileNotFoundError, PermissionError) as e:
            logger.debug(f"Failed to start {args[0]}: {e}")
            raise ProcessError(args) from e

        if result.returncode != 0:
            output = (result.stdout or "") + (result.stderr or "")
            raise ProcessError(args, result.returncode, output)

    def output(self, args: Sequence[str]) -> str:
        """
        Run a program and return its standard output.

        Args:
            args: Program and arguments

        Returns:
            Captured stdout

        Raises:
            ProcessError: If the program is missing or exits non-zero
        """
        args = [str(a) for a in args]
        logger.debug(f"Running: {' '.join(args)}")

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                check=False,
            )
        except (FileNotFoundError, PermissionError) as e:
            logger.debug(f"Failed to start {args[0]}: {e}")
            raise ProcessError(args) from e

        if result.returncode != 0:
            raise ProcessError(args, result.returncode, result.stderr)

        return result.stdout


__all__ = ["ProcessRunner"]
