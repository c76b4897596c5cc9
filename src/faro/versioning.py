"""Version-delta classification used for grouped display and ordering."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

import semantic_version
from packaging.version import InvalidVersion, Version

from faro.models import Module

logger = logging.getLogger(__name__)


class VersionDelta(Enum):
    """Size of the jump from the current to the candidate version."""

    MAJOR = 0
    MINOR = 1
    PATCH = 2
    OTHER = 3

    @property
    def sort_key(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    VersionDelta.MAJOR: "Major   Potentially breaking API changes",
    VersionDelta.MINOR: "Minor   Backwards-compatible features",
    VersionDelta.PATCH: "Patch   Backwards-compatible bug fixes",
    VersionDelta.OTHER: "Other   Unrecognised version scheme",
}


def release_tuple(raw: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Return ``(major, minor, patch)`` for ``raw`` or None if it cannot be parsed.

    PEP 440 parsing (packaging) is tried first since it also accepts a leading
    ``v``; SemVer (semantic_version, coerced) covers npm pre-releases and Go
    pseudo-versions that PEP 440 rejects.
    """
    if not raw or not raw.strip():
        return None
    text = raw.strip()
    try:
        release = Version(text).release
        padded = tuple(release) + (0, 0, 0)
        return padded[0], padded[1], padded[2]
    except InvalidVersion:
        pass
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        sv = semantic_version.Version.coerce(text)
    except ValueError:
        logger.debug("Unrecognised version string: %s", raw)
        return None
    return sv.major, sv.minor, sv.patch


def version_delta(current: Optional[str], candidate: Optional[str]) -> VersionDelta:
    """Classify the bump from ``current`` to ``candidate``."""
    cur = release_tuple(current)
    new = release_tuple(candidate)
    if cur is None or new is None:
        return VersionDelta.OTHER
    if cur[0] != new[0]:
        return VersionDelta.MAJOR
    if cur[1] != new[1]:
        return VersionDelta.MINOR
    return VersionDelta.PATCH


def module_delta(module: Module) -> VersionDelta:
    if module.update is None:
        return VersionDelta.OTHER
    return version_delta(module.version, module.update.version)


def group_sort_key(module: Module) -> int:
    """Lower keys sort first: major < minor < patch < other."""
    return module_delta(module).sort_key


def group_label(module: Module) -> str:
    return module_delta(module).label
