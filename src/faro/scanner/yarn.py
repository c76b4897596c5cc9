"""Yarn scanner (``yarn outdated --json``)."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from faro.constants import PackageManager
from faro.models import DependencyIndex, Module, ScanOptions
from faro.scanner.base import Scanner
from faro.scanner.npm import build_module, classify_npm_module, keep_npm_module, package_json_index

logger = logging.getLogger(__name__)


def table_rows(text: str) -> List[List[Any]]:
    """Collect body rows from the ``table`` records of yarn's NDJSON output."""
    rows: List[List[Any]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Skipping non-JSON yarn output line: %s", line)
            continue
        if not isinstance(record, dict) or record.get("type") != "table":
            continue
        body = (record.get("data") or {}).get("body") or []
        rows.extend(row for row in body if isinstance(row, list))
    return rows


class YarnScanner(Scanner):
    """Scanner for Yarn (classic) projects."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.YARN

    def get_dependency_index(self) -> DependencyIndex:
        return package_json_index(self.work_dir)

    def get_updates(self, options: ScanOptions) -> List[Module]:
        index = self.get_dependency_index()
        result = self._run(["yarn", "outdated", "--json"], allowed_codes=(0, 1))

        modules = []
        seen = set()
        for row in table_rows(result.stdout):
            if len(row) < 4:
                continue
            name, current, _wanted, latest = (str(cell) for cell in row[:4])
            if name in seen or not latest or latest == current:
                continue
            seen.add(name)
            reported = str(row[4]) if len(row) > 4 else None
            info = classify_npm_module(name, index, reported)
            if not keep_npm_module(name, info, options):
                continue
            modules.append(build_module(name, current, latest, info))
        return modules
