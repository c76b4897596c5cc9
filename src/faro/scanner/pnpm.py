"""pnpm scanner (``pnpm outdated --format json``)."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

from faro.constants import PackageManager
from faro.models import DependencyIndex, Module, ScanOptions
from faro.scanner.base import Scanner
from faro.scanner.npm import build_module, classify_npm_module, keep_npm_module, package_json_index


def _entries(data: Any) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Normalize both output shapes (mapping by name, or list of records)."""
    if isinstance(data, dict):
        for name in sorted(data):
            entry = data[name]
            if isinstance(entry, dict):
                yield name, entry
    elif isinstance(data, list):
        for entry in data:
            if isinstance(entry, dict) and entry.get("name"):
                yield str(entry["name"]), entry


class PnpmScanner(Scanner):
    """Scanner for pnpm projects."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.PNPM

    def get_dependency_index(self) -> DependencyIndex:
        return package_json_index(self.work_dir)

    def get_updates(self, options: ScanOptions) -> List[Module]:
        index = self.get_dependency_index()
        result = self._run(["pnpm", "outdated", "--format", "json"], allowed_codes=(0, 1))
        if not result.stdout.strip():
            return []
        data = self._load_json(result.stdout, "pnpm outdated")

        modules = []
        for name, entry in _entries(data):
            current = entry.get("current")
            latest = entry.get("latest")
            if not latest or latest == current:
                continue
            reported = entry.get("dependencyType") or entry.get("packageType")
            info = classify_npm_module(name, index, reported)
            if not keep_npm_module(name, info, options):
                continue
            modules.append(build_module(name, current, latest, info))
        return modules
