"""Python updaters (pip, poetry, uv)."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, List

from packaging.requirements import InvalidRequirement, Requirement

from faro.constants import Constants, PackageManager
from faro.errors import UpdateError
from faro.manifests import PYTHON_DEV, normalize_pypi_name
from faro.models import Module
from faro.updater.base import Updater, pinned

logger = logging.getLogger(__name__)

_INLINE_COMMENT = re.compile(r"\s+#")


def _rewrite_line(line: str, versions: Dict[str, str]) -> str:
    stripped = line.strip()
    if not stripped or stripped.startswith(("#", "-")):
        return line
    match = _INLINE_COMMENT.search(line)
    body, tail = (line[: match.start()], line[match.start():]) if match else (line, "")
    try:
        req = Requirement(body.strip())
    except InvalidRequirement:
        return line
    version = versions.get(normalize_pypi_name(req.name))
    if version is None:
        return line
    extras = f"[{','.join(sorted(req.extras))}]" if req.extras else ""
    marker = f"; {req.marker}" if req.marker else ""
    return f"{req.name}{extras}=={version}{marker}{tail}"


def rewrite_requirements(text: str, versions: Dict[str, str]) -> str:
    """Pin every requirement named in ``versions`` (normalized names) to its new version."""
    lines = text.splitlines()
    out = [_rewrite_line(line, versions) for line in lines]
    trailing = "\n" if text.endswith("\n") else ""
    return "\n".join(out) + trailing


class PipUpdater(Updater):
    """``pip install name==version`` per module, then re-pin requirements.txt."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.PIP

    def _apply(self, modules: List[Module]) -> None:
        path = os.path.join(self.work_dir, Constants.REQUIREMENTS_FILE)
        if not os.path.isfile(path):
            raise UpdateError(f"{Constants.REQUIREMENTS_FILE} not found in {self.work_dir}")
        for module in modules:
            self._run(["pip", "install", pinned(module, "==")])

        versions = {
            normalize_pypi_name(m.name): m.update.version
            for m in modules
            if m.update is not None and m.update.version
        }
        try:
            with open(path, "r", encoding="utf-8") as fh:
                text = fh.read()
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(rewrite_requirements(text, versions))
        except OSError as exc:
            raise UpdateError(f"failed to update {path}: {exc}") from exc
        logger.debug("Pinned %d requirements in %s", len(versions), path)


class PoetryUpdater(Updater):
    """``poetry add name@version``, with ``--group dev`` for dev dependencies."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.POETRY

    def _apply(self, modules: List[Module]) -> None:
        main = [pinned(m) for m in modules if m.dependency_type != PYTHON_DEV]
        dev = [pinned(m) for m in modules if m.dependency_type == PYTHON_DEV]
        if main:
            self._run(["poetry", "add", *main])
        if dev:
            self._run(["poetry", "add", "--group", "dev", *dev])


class UvUpdater(Updater):
    """``uv pip install name==version`` per module."""

    @property
    def manager(self) -> PackageManager:
        return PackageManager.UV

    def _apply(self, modules: List[Module]) -> None:
        for module in modules:
            self._run(["uv", "pip", "install", pinned(module, "==")])
