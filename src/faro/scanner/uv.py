"""uv scanner (``uv pip list --outdated --format json``)."""

from __future__ import annotations

import os
from typing import List

from faro.constants import Constants, PackageManager
from faro.manifests import PYTHON_MAIN, normalize_pypi_name
from faro.models import DependencyIndex, DependencyInfo, Module, ScanOptions
from faro.scanner.base import Scanner
from faro.scanner.pip import modules_from_pip_json, pyproject_index

MAIN = DependencyInfo(direct=True, type=PYTHON_MAIN)


class UvScanner(Scanner):
    """Scanner for uv-managed environments.

    uv has no notion of dev or transitive packages in its listing, so every
    module it reports is treated as a direct main dependency unless the
    manifest says otherwise.
    """

    @property
    def manager(self) -> PackageManager:
        return PackageManager.UV

    def get_dependency_index(self) -> DependencyIndex:
        if os.path.isfile(os.path.join(self.work_dir, Constants.PYPROJECT_TOML_FILE)):
            return pyproject_index(self.work_dir)
        result = self._run(["uv", "pip", "list", "--format", "json"])
        data = self._load_json(result.stdout or "[]", "uv pip list")
        return {
            normalize_pypi_name(str(entry["name"])): MAIN
            for entry in (data if isinstance(data, list) else [])
            if isinstance(entry, dict) and entry.get("name")
        }

    def get_updates(self, options: ScanOptions) -> List[Module]:
        result = self._run(["uv", "pip", "list", "--outdated", "--format", "json"])
        if not result.stdout.strip():
            return []
        data = self._load_json(result.stdout, "uv pip list")
        return modules_from_pip_json(data if isinstance(data, list) else [], {}, options, MAIN)
