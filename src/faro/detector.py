"""Package-manager detection from the files present in a project directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from faro.constants import Constants, PackageManager
from faro.errors import DetectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    """A package manager whose marker files were found."""

    manager: PackageManager
    config_file: str
    lock_file: Optional[str] = None


# (manager, manifest, lock file, which of the two must exist), highest priority first.
_RULES: Tuple[Tuple[PackageManager, str, Optional[str], Tuple[str, ...]], ...] = (
    (PackageManager.GO, Constants.GO_MOD_FILE, Constants.GO_SUM_FILE, (Constants.GO_MOD_FILE,)),
    (PackageManager.PNPM, Constants.PACKAGE_JSON_FILE, Constants.PNPM_LOCK_FILE, (Constants.PNPM_LOCK_FILE,)),
    (PackageManager.YARN, Constants.PACKAGE_JSON_FILE, Constants.YARN_LOCK_FILE, (Constants.YARN_LOCK_FILE,)),
    (PackageManager.NPM, Constants.PACKAGE_JSON_FILE, Constants.PACKAGE_LOCK_FILE, (Constants.PACKAGE_LOCK_FILE,)),
    (
        PackageManager.POETRY,
        Constants.PYPROJECT_TOML_FILE,
        Constants.POETRY_LOCK_FILE,
        (Constants.POETRY_LOCK_FILE, Constants.PYPROJECT_TOML_FILE),
    ),
    (PackageManager.UV, Constants.PYPROJECT_TOML_FILE, Constants.UV_LOCK_FILE, (Constants.UV_LOCK_FILE,)),
    (PackageManager.PIP, Constants.REQUIREMENTS_FILE, None, (Constants.REQUIREMENTS_FILE,)),
)


def detect(directory: str) -> List[DetectionResult]:
    """Return every package manager detected in ``directory`` in priority order.

    Raises:
        DetectionError: If no supported manager is detected.
    """
    found = []
    for manager, config_file, lock_file, required in _RULES:
        if all(os.path.isfile(os.path.join(directory, name)) for name in required):
            found.append(DetectionResult(manager, config_file, lock_file))
    if not found:
        raise DetectionError(f"no supported package manager detected in {directory}")
    logger.debug("Detected package managers: %s", ", ".join(str(r.manager) for r in found))
    return found


def detect_single(directory: str) -> DetectionResult:
    return detect(directory)[0]


def validate(name: str) -> PackageManager:
    """Map a user-supplied manager name to ``PackageManager``.

    Raises:
        DetectionError: If the name is not supported.
    """
    try:
        return PackageManager(name.strip().lower())
    except ValueError as exc:
        raise DetectionError(
            f"unsupported package manager {name!r}; supported: {', '.join(Constants.SUPPORTED_MANAGERS)}"
        ) from exc
