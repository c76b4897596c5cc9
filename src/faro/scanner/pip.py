"""pip scanner (``pip list --outdated --format json``)."""

from __future__ import annotations

import os
from typing import Any, Callable, Iterable, List

from faro.constants import Constants, PackageManager
from faro.manifests import PYTHON_DEV, PYTHON_MAIN, normalize_pypi_name, read_pyproject, read_requirements_txt
from faro.models import DependencyIndex, DependencyInfo, Module, ScanOptions, UpdateInfo
from faro.scanner.base import Scanner

TRANSITIVE = "transitive"


def matches_ci(name: str, pattern: str) -> bool:
    """Case-insensitive substring match used by the Python adapters."""
    return not pattern or pattern.lower() in name.lower()


def pyproject_index(work_dir: str) -> DependencyIndex:
    """Classification from pyproject.toml shared by poetry and uv."""
    declared = read_pyproject(os.path.join(work_dir, Constants.PYPROJECT_TOML_FILE))
    return {name: DependencyInfo(direct=True, type=kind) for name, kind in declared.items()}


def keep_python_module(
    name: str, info: DependencyInfo, options: ScanOptions, matches: Callable[[str, str], bool] = matches_ci
) -> bool:
    if not options.include_all and (not info.direct or info.type == PYTHON_DEV):
        return False
    return matches(name, options.filter)


def modules_from_pip_json(
    entries: Iterable[Any], index: DependencyIndex, options: ScanOptions, default: DependencyInfo
) -> List[Module]:
    """Turn ``pip list --outdated --format json`` records into modules.

    Names not in ``index`` get the ``default`` classification.
    """
    modules = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        latest = entry.get("latest_version")
        if not latest:
            continue
        name = normalize_pypi_name(str(entry["name"]))
        info = index.get(name, default)
        if not keep_python_module(name, info, options):
            continue
        modules.append(
            Module(
                name=name,
                version=str(entry.get("version", "")),
                update=UpdateInfo(str(latest)),
                direct=info.direct,
                dependency_type=info.type,
            )
        )
    return sorted(modules, key=lambda m: m.name)


class PipScanner(Scanner):
    """Scanner for requirements.txt projects installed with pip."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.PIP

    def get_dependency_index(self) -> DependencyIndex:
        names = read_requirements_txt(os.path.join(self.work_dir, Constants.REQUIREMENTS_FILE))
        return {name: DependencyInfo(direct=True, type=PYTHON_MAIN) for name in names}

    def get_updates(self, options: ScanOptions) -> List[Module]:
        index = self.get_dependency_index()
        result = self._run(["pip", "list", "--outdated", "--format", "json"])
        if not result.stdout.strip():
            return []
        data = self._load_json(result.stdout, "pip list")
        return modules_from_pip_json(
            data if isinstance(data, list) else [],
            index,
            options,
            DependencyInfo(direct=False, type=TRANSITIVE),
        )
