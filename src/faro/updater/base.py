"""Abstract base class for ecosystem updaters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from faro.common.logging_utils import Timer, extra_context, is_debug_enabled
from faro.common.process import CommandResult, Runner, run_command
from faro.constants import PackageManager
from faro.errors import ScanError, UpdateError
from faro.models import Module

logger = logging.getLogger(__name__)


class Updater(ABC):
    """Applies candidate updates through the ecosystem's own tool.

    Args:
        work_dir: Project root the tool runs in.
        runner: Callable running an external command; defaults to ``run_command``.
    """

    def __init__(self, work_dir: str = ".", runner: Optional[Runner] = None):
        self.work_dir = work_dir
        self.runner: Runner = runner or run_command

    @property
    @abstractmethod
    def manager(self) -> PackageManager:
        """Package manager this updater drives."""

    @abstractmethod
    def _apply(self, modules: List[Module]) -> None:
        """Apply a non-empty batch of updates."""

    def update_packages(self, modules: Sequence[Module]) -> None:
        """Apply updates for ``modules`` as one logical operation.

        An empty sequence is a no-op. No rollback is attempted when a later
        command fails after an earlier one succeeded.

        Raises:
            UpdateError: The package manager rejected the update.
        """
        batch = list(modules)
        if not batch:
            return
        logger.info("Upgrading %d packages...", len(batch))
        self._apply(batch)

    def update_single_package(self, module: Module) -> None:
        self.update_packages([module])

    def _run(self, args: List[str]) -> CommandResult:
        with Timer() as t:
            try:
                result = self.runner(args, self.work_dir)
            except ScanError as exc:
                raise UpdateError(str(exc)) from exc
        if is_debug_enabled(logger):
            logger.debug(
                "Update command finished",
                extra=extra_context(
                    event="update",
                    component=str(self.manager),
                    action=" ".join(args),
                    outcome=result.returncode,
                    duration_ms=t.duration_ms(),
                ),
            )
        if not result.ok:
            raise UpdateError(f"{' '.join(args[:2])} failed", result.combined_output)
        return result


def pinned(module: Module, separator: str = "@") -> str:
    """``name<sep>candidate``, or the bare name when there is no candidate."""
    if module.update is not None and module.update.version:
        return f"{module.name}{separator}{module.update.version}"
    return module.name
