"""Go modules scanner (``go list -m -u -json all``)."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterator, List

from faro.constants import Constants, PackageManager
from faro.errors import ScanError
from faro.filtering import compile_filter, cooldown_eligible, name_matches
from faro.manifests import read_go_require_index
from faro.models import DependencyIndex, DependencyInfo, Module, ScanOptions, UpdateInfo
from faro.scanner.base import Scanner

logger = logging.getLogger(__name__)

DIRECT = "direct"
INDIRECT = "indirect"
TRANSITIVE = "transitive"


def iter_json_stream(text: str) -> Iterator[Dict[str, Any]]:
    """Yield each object from concatenated JSON documents."""
    decoder = json.JSONDecoder()
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return
        try:
            obj, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as exc:
            raise ScanError(f"failed to parse go list output: {exc}") from exc
        if isinstance(obj, dict):
            yield obj


class GoScanner(Scanner):
    """Scanner for Go modules."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.GO

    def _require_index(self) -> Dict[str, bool]:
        return read_go_require_index(os.path.join(self.work_dir, Constants.GO_MOD_FILE))

    def get_dependency_index(self) -> DependencyIndex:
        return {
            path: DependencyInfo(direct=not indirect, type=INDIRECT if indirect else DIRECT)
            for path, indirect in self._require_index().items()
        }

    def get_updates(self, options: ScanOptions) -> List[Module]:
        regex = compile_filter(options.filter) if options.filter else None
        requires = self._require_index()
        result = self._run(["go", "list", "-m", "-u", "-json", "all"])
        now = self.clock()

        modules: List[Module] = []
        for entry in iter_json_stream(result.stdout):
            if entry.get("Main"):
                continue
            update = entry.get("Update")
            if not update:
                continue
            path = entry.get("Path", "")
            if path in requires:
                indirect = requires[path]
                direct, dep_type = not indirect, INDIRECT if indirect else DIRECT
            else:
                if not options.include_all:
                    continue
                direct, dep_type = False, TRANSITIVE

            if options.filter and not name_matches(path, options.filter, regex):
                continue
            if not cooldown_eligible(update.get("Time"), options.cooldown_days, now):
                logger.debug("Cooldown skips %s@%s", path, update.get("Version"))
                continue

            modules.append(
                Module(
                    name=path,
                    version=entry.get("Version", ""),
                    time=entry.get("Time"),
                    update=UpdateInfo(update.get("Version", ""), update.get("Time")),
                    direct=direct,
                    dependency_type=dep_type,
                )
            )
        return modules
