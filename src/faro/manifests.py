"""Readers for the manifests that define direct dependencies.

Each reader returns an empty result when the manifest does not exist and
raises ``ManifestReadError`` when it exists but cannot be parsed.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from typing import Any, Dict, Iterable, List, Tuple

import requirements
from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from faro.errors import ManifestReadError

logger = logging.getLogger(__name__)

PYTHON_MAIN = "main"
PYTHON_DEV = "dev"


def normalize_pypi_name(name: str) -> str:
    """PEP 503 normalization (``Foo_Bar`` -> ``foo-bar``)."""
    return canonicalize_name(name.strip())


def _read_text(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except OSError as exc:
        raise ManifestReadError(path, exc) from exc


# ---------- go.mod ----------


def _parse_require_line(line: str) -> Tuple[str, bool] | None:
    body, _, comment = line.partition("//")
    fields = body.split()
    if len(fields) < 2:
        return None
    indirect = comment.strip().startswith("indirect")
    return fields[0], indirect


def read_go_require_index(path: str) -> Dict[str, bool]:
    """Map every ``require`` path in go.mod to whether it is marked ``// indirect``."""
    if not os.path.isfile(path):
        return {}
    index: Dict[str, bool] = {}
    in_block = False
    for raw in _read_text(path).splitlines():
        line = raw.strip()
        if not line or line.startswith("//"):
            continue
        if in_block:
            if line.startswith(")"):
                in_block = False
                continue
            parsed = _parse_require_line(line)
        elif line.startswith("require"):
            rest = line[len("require"):].strip()
            if rest.startswith("("):
                in_block = True
                continue
            parsed = _parse_require_line(rest)
        else:
            continue
        if parsed is not None:
            index[parsed[0]] = parsed[1]
    if in_block:
        raise ManifestReadError(path, "unterminated require block")
    return index


# ---------- package.json ----------


def read_package_json(path: str) -> Dict[str, Dict[str, str]]:
    """Return the dependency sections of package.json keyed by section name."""
    if not os.path.isfile(path):
        return {}
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as exc:
        raise ManifestReadError(path, exc) from exc
    if not isinstance(data, dict):
        raise ManifestReadError(path, "top-level value is not an object")
    sections: Dict[str, Dict[str, str]] = {}
    for key in ("dependencies", "devDependencies", "optionalDependencies"):
        value = data.get(key) or {}
        if isinstance(value, dict):
            sections[key] = value
    return sections


# ---------- requirements.txt ----------


def read_requirements_txt(path: str) -> List[str]:
    """Return normalized package names declared in requirements.txt."""
    if not os.path.isfile(path):
        return []
    body = _read_text(path)
    try:
        parsed = list(requirements.parse(body))
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ManifestReadError(path, exc) from exc
    names: List[str] = []
    for req in parsed:
        name = getattr(req, "name", None)
        if isinstance(name, str) and name:
            names.append(normalize_pypi_name(name))
    return list(dict.fromkeys(names))


# ---------- pyproject.toml ----------


def _pep508_names(entries: Iterable[Any]) -> List[str]:
    names = []
    for entry in entries:
        if not isinstance(entry, str):
            continue  # include-group tables in [dependency-groups]
        try:
            names.append(normalize_pypi_name(Requirement(entry).name))
        except InvalidRequirement:
            logger.debug("Skipping unparsable requirement: %s", entry)
    return names


def read_pyproject(path: str) -> Dict[str, str]:
    """Map normalized names declared in pyproject.toml to ``main`` or ``dev``.

    Covers Poetry tables, PEP 621 ``[project]`` and PEP 735
    ``[dependency-groups]``. Main declarations win over dev ones.
    """
    if not os.path.isfile(path):
        return {}
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ManifestReadError(path, exc) from exc

    result: Dict[str, str] = {}

    def add(names: Iterable[str], kind: str) -> None:
        for name in names:
            if kind == PYTHON_MAIN or name not in result:
                result[name] = kind

    poetry = data.get("tool", {}).get("poetry", {}) or {}
    add(
        (normalize_pypi_name(n) for n in (poetry.get("dependencies") or {}) if n.lower() != "python"),
        PYTHON_MAIN,
    )
    add((normalize_pypi_name(n) for n in (poetry.get("dev-dependencies") or {})), PYTHON_DEV)
    for group in (poetry.get("group") or {}).values():
        if isinstance(group, dict):
            add((normalize_pypi_name(n) for n in (group.get("dependencies") or {})), PYTHON_DEV)

    project = data.get("project", {}) or {}
    add(_pep508_names(project.get("dependencies") or []), PYTHON_MAIN)
    for extra in (project.get("optional-dependencies") or {}).values():
        add(_pep508_names(extra or []), PYTHON_DEV)
    for group in (data.get("dependency-groups") or {}).values():
        add(_pep508_names(group or []), PYTHON_DEV)
    return result
