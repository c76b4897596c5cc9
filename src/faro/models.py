"""Data models shared by scanners, updaters and the orchestrator."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional


@dataclass(frozen=True)
class UpdateInfo:
    """Candidate version for a module."""
    version: str
    time: Optional[str] = None  # RFC 3339 publish time, when the tool reports it


@dataclass(frozen=True)
class VulnInfo:
    """Advisory counts for one module version."""
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0
    total: int = 0


@dataclass
class Module:
    """One dependency with its current version and optional candidate update."""
    name: str  # Go module path, npm package name or normalized PyPI name
    version: str
    time: Optional[str] = None
    update: Optional[UpdateInfo] = None
    direct: bool = False
    # go: direct/indirect/transitive; npm family: dependencies/devDependencies;
    # python: main/dev
    dependency_type: str = ""
    vuln_current: VulnInfo = field(default_factory=VulnInfo)
    vuln_update: VulnInfo = field(default_factory=VulnInfo)


@dataclass(frozen=True)
class DependencyInfo:
    """Manifest classification of a single dependency."""
    direct: bool
    type: str


# Package name -> manifest classification.
DependencyIndex = Dict[str, DependencyInfo]


@dataclass(frozen=True)
class ScanOptions:
    """Options handed to every scanner."""
    filter: str = ""
    include_all: bool = False
    cooldown_days: int = 0
    work_dir: str = "."


def max_name_length(modules: Iterable[Module]) -> int:
    """Longest module name, used to align rendered rows."""
    return max((len(m.name) for m in modules), default=0)
