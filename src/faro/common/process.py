"""Subprocess execution used by every scanner and updater.

Adapters receive a ``runner`` callable so tests can substitute canned output
without spawning processes.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence

from faro.common.logging_utils import Timer, extra_context, is_debug_enabled
from faro.errors import ScanError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def combined_output(self) -> str:
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


Runner = Callable[[Sequence[str], str], CommandResult]


def run_command(args: Sequence[str], cwd: str) -> CommandResult:
    """Run ``args`` in ``cwd`` and capture text output.

    Raises:
        ScanError: If the executable cannot be found or started.
    """
    with Timer() as t:
        try:
            proc = subprocess.run(  # noqa: S603
                list(args),
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ScanError(f"{args[0]} executable not found on PATH") from exc
        except OSError as exc:
            raise ScanError(f"failed to run {args[0]}: {exc}") from exc
    if is_debug_enabled(logger):
        logger.debug(
            "Command finished",
            extra=extra_context(
                event="subprocess",
                component="process",
                action=" ".join(args),
                outcome=proc.returncode,
                duration_ms=t.duration_ms(),
            ),
        )
    return CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")
