"""Abstract base class for ecosystem scanners."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from faro.common.logging_utils import Timer, extra_context, is_debug_enabled
from faro.common.process import CommandResult, Runner, run_command
from faro.constants import PackageManager
from faro.errors import ScanError
from faro.models import DependencyIndex, Module, ScanOptions

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Scanner(ABC):
    """Lists outdated modules and the manifest classification for one ecosystem.

    Args:
        work_dir: Project root holding the manifest.
        runner: Callable running an external command; defaults to ``run_command``.
        clock: Source of "now" for cooldown checks.
    """

    # True when get_updates already applied options.filter to names.
    applies_name_filter = True

    def __init__(
        self,
        work_dir: str = ".",
        runner: Optional[Runner] = None,
        clock: Optional[Clock] = None,
    ):
        self.work_dir = work_dir
        self.runner: Runner = runner or run_command
        self.clock: Clock = clock or utc_now

    @property
    @abstractmethod
    def manager(self) -> PackageManager:
        """Package manager this scanner wraps."""

    @abstractmethod
    def get_updates(self, options: ScanOptions) -> List[Module]:
        """Return modules with a candidate update.

        Args:
            options: Filter, category and cooldown options; never mutated.

        Returns:
            Modules carrying an ``UpdateInfo``.

        Raises:
            ScanError: The tool failed or its output could not be parsed.
        """

    @abstractmethod
    def get_dependency_index(self) -> DependencyIndex:
        """Return the manifest-derived classification (empty when there is no manifest)."""

    def _run(self, args: List[str], allowed_codes: tuple = (0,)) -> CommandResult:
        """Run ``args`` in the work dir, raising ScanError on an unexpected exit code."""
        with Timer() as t:
            result = self.runner(args, self.work_dir)
        if is_debug_enabled(logger):
            logger.debug(
                "Scan command finished",
                extra=extra_context(
                    event="scan",
                    component=str(self.manager),
                    action=" ".join(args),
                    outcome=result.returncode,
                    duration_ms=t.duration_ms(),
                ),
            )
        if result.returncode not in allowed_codes:
            raise ScanError(f"{' '.join(args)} failed: {result.combined_output or result.returncode}")
        return result

    def _load_json(self, text: str, what: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ScanError(f"failed to parse {what} output: {exc}") from exc
