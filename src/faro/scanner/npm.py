"""npm scanner (``npm outdated --json``)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from faro.constants import Constants, PackageManager
from faro.filtering import name_matches
from faro.manifests import read_package_json
from faro.models import DependencyIndex, DependencyInfo, Module, ScanOptions, UpdateInfo
from faro.scanner.base import Scanner

logger = logging.getLogger(__name__)

DEPENDENCIES = "dependencies"
DEV_DEPENDENCIES = "devDependencies"
TRANSITIVE = "transitive"


def package_json_index(work_dir: str) -> DependencyIndex:
    """Classification from package.json shared by npm, yarn and pnpm.

    ``optionalDependencies`` count as regular dependencies; a name listed in
    both sections keeps the regular classification.
    """
    sections = read_package_json(os.path.join(work_dir, Constants.PACKAGE_JSON_FILE))
    index: DependencyIndex = {}
    for name in sections.get(DEV_DEPENDENCIES, {}):
        index[name] = DependencyInfo(direct=True, type=DEV_DEPENDENCIES)
    for key in ("optionalDependencies", DEPENDENCIES):
        for name in sections.get(key, {}):
            index[name] = DependencyInfo(direct=True, type=DEPENDENCIES)
    return index


def classify_npm_module(
    name: str, index: DependencyIndex, reported_type: Optional[str] = None
) -> DependencyInfo:
    info = index.get(name)
    if info is not None:
        return info
    if reported_type in (DEPENDENCIES, DEV_DEPENDENCIES):
        return DependencyInfo(direct=True, type=reported_type)
    return DependencyInfo(direct=False, type=TRANSITIVE)


def keep_npm_module(name: str, info: DependencyInfo, options: ScanOptions) -> bool:
    """Category and name filtering common to the npm family."""
    if not options.include_all and (info.type == DEV_DEPENDENCIES or not info.direct):
        return False
    return name_matches(name, options.filter)


def build_module(name: str, current: Any, latest: Any, info: DependencyInfo) -> Module:
    return Module(
        name=name,
        version=str(current or ""),
        update=UpdateInfo(str(latest)),
        direct=info.direct,
        dependency_type=info.type,
    )


class NpmScanner(Scanner):
    """Scanner for npm projects."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.NPM

    def get_dependency_index(self) -> DependencyIndex:
        return package_json_index(self.work_dir)

    def get_updates(self, options: ScanOptions) -> List[Module]:
        index = self.get_dependency_index()
        # npm exits 1 whenever something is outdated.
        result = self._run(["npm", "outdated", "--json"], allowed_codes=(0, 1))
        if not result.stdout.strip():
            return []
        data: Dict[str, Any] = self._load_json(result.stdout, "npm outdated")
        if not isinstance(data, dict):
            return []

        modules = []
        for name in sorted(data):
            entry = data[name]
            if isinstance(entry, list):
                # Workspaces report one entry per dependent.
                entry = entry[0] if entry else {}
            if not isinstance(entry, dict):
                continue
            latest = entry.get("latest")
            current = entry.get("current")
            if not latest or latest == current:
                continue
            info = classify_npm_module(name, index, entry.get("type"))
            if not keep_npm_module(name, info, options):
                continue
            modules.append(build_module(name, current, latest, info))
        logger.debug("npm reported %d outdated packages", len(modules))
        return modules
