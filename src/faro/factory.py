"""Maps a ``PackageManager`` to its scanner, updater, advisory client and labels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Type

from faro.common.process import Runner
from faro.constants import Constants, PackageManager
from faro.scanner.base import Scanner
from faro.scanner.gomod import GoScanner
from faro.scanner.npm import NpmScanner
from faro.scanner.pip import PipScanner
from faro.scanner.pnpm import PnpmScanner
from faro.scanner.poetry import PoetryScanner
from faro.scanner.uv import UvScanner
from faro.scanner.yarn import YarnScanner
from faro.updater.base import Updater
from faro.updater.gomod import GoUpdater
from faro.updater.npm import NpmUpdater, PnpmUpdater, YarnUpdater
from faro.updater.pip import PipUpdater, PoetryUpdater, UvUpdater
from faro.vuln import OSVClient

_SCANNERS: Dict[PackageManager, Type[Scanner]] = {
    PackageManager.GO: GoScanner,
    PackageManager.NPM: NpmScanner,
    PackageManager.YARN: YarnScanner,
    PackageManager.PNPM: PnpmScanner,
    PackageManager.PIP: PipScanner,
    PackageManager.POETRY: PoetryScanner,
    PackageManager.UV: UvScanner,
}

_UPDATERS: Dict[PackageManager, Type[Updater]] = {
    PackageManager.GO: GoUpdater,
    PackageManager.NPM: NpmUpdater,
    PackageManager.YARN: YarnUpdater,
    PackageManager.PNPM: PnpmUpdater,
    PackageManager.PIP: PipUpdater,
    PackageManager.POETRY: PoetryUpdater,
    PackageManager.UV: UvUpdater,
}

OSV_ECOSYSTEMS: Dict[PackageManager, str] = {
    PackageManager.GO: "Go",
    PackageManager.NPM: "npm",
    PackageManager.YARN: "npm",
    PackageManager.PNPM: "npm",
    PackageManager.PIP: "PyPI",
    PackageManager.POETRY: "PyPI",
    PackageManager.UV: "PyPI",
}


@dataclass(frozen=True)
class SectionLabels:
    """Headings for the Direct / Indirect / Transitive sections."""

    direct: str = Constants.DEFAULT_DIRECT_LABEL
    indirect: str = Constants.DEFAULT_INDIRECT_LABEL
    transitive: str = Constants.DEFAULT_TRANSITIVE_LABEL


_NPM_LABELS = SectionLabels("Dependencies (package.json)", "DevDependencies (package.json)", "Transitive")
_PY_LABELS = SectionLabels("Main dependencies", "Dev dependencies", "Transitive")

_LABELS: Dict[PackageManager, SectionLabels] = {
    PackageManager.GO: SectionLabels(
        "Direct dependencies (go.mod)",
        "Indirect dependencies (go.mod // indirect)",
        "Transitive (not in go.mod)",
    ),
    PackageManager.NPM: _NPM_LABELS,
    PackageManager.YARN: _NPM_LABELS,
    PackageManager.PNPM: _NPM_LABELS,
    PackageManager.PIP: SectionLabels("Main dependencies (requirements.txt)", "Transitive", "Transitive"),
    PackageManager.POETRY: _PY_LABELS,
    PackageManager.UV: _PY_LABELS,
}


def create_scanner(manager: PackageManager, work_dir: str, runner: Optional[Runner] = None) -> Scanner:
    return _SCANNERS[manager](work_dir, runner=runner)


def create_updater(manager: PackageManager, work_dir: str, runner: Optional[Runner] = None) -> Updater:
    return _UPDATERS[manager](work_dir, runner=runner)


def create_vuln_client(manager: PackageManager) -> OSVClient:
    return OSVClient(OSV_ECOSYSTEMS[manager])


def section_labels(manager: Optional[PackageManager]) -> SectionLabels:
    if manager is None:
        return SectionLabels()
    return _LABELS.get(manager, SectionLabels())
