"""Poetry scanner (``poetry show --outdated``)."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from faro.constants import PackageManager
from faro.filtering import name_matches
from faro.manifests import normalize_pypi_name
from faro.models import DependencyIndex, DependencyInfo, Module, ScanOptions, UpdateInfo
from faro.scanner.base import Scanner
from faro.scanner.pip import TRANSITIVE, keep_python_module, pyproject_index

logger = logging.getLogger(__name__)

NOT_INSTALLED_MARKER = "(!)"


def parse_show_line(line: str) -> Optional[Tuple[str, str, str]]:
    """Split ``name [(!)] current latest description`` into its first three fields."""
    fields = [f for f in line.split() if f != NOT_INSTALLED_MARKER]
    if len(fields) < 3:
        return None
    return fields[0], fields[1], fields[2]


class PoetryScanner(Scanner):
    """Scanner for Poetry projects."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.POETRY

    def get_dependency_index(self) -> DependencyIndex:
        return pyproject_index(self.work_dir)

    def get_updates(self, options: ScanOptions) -> List[Module]:
        index = self.get_dependency_index()
        result = self.runner(["poetry", "show", "--outdated"], self.work_dir)
        if not result.ok:
            # Poetry fails on projects without a lock file; nothing to report then.
            logger.debug("poetry show --outdated failed: %s", result.combined_output)
            return []

        modules = []
        for line in result.stdout.splitlines():
            parsed = parse_show_line(line)
            if parsed is None:
                continue
            raw_name, current, latest = parsed
            if latest == current:
                continue
            name = normalize_pypi_name(raw_name)
            info = index.get(name, DependencyInfo(direct=False, type=TRANSITIVE))
            if not keep_python_module(name, info, options, name_matches):
                continue
            modules.append(
                Module(
                    name=name,
                    version=current,
                    update=UpdateInfo(latest),
                    direct=info.direct,
                    dependency_type=info.type,
                )
            )
        return modules
