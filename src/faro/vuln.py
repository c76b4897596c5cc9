"""Advisory lookups against the OSV.dev query API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

import requests

from faro.common.logging_utils import Timer, extra_context, is_debug_enabled
from faro.constants import Constants
from faro.errors import VulnLookupError
from faro.models import Module, VulnInfo

logger = logging.getLogger(__name__)

_SEVERITY_FIELDS = {
    "LOW": "low",
    "MODERATE": "medium",
    "MEDIUM": "medium",
    "HIGH": "high",
    "CRITICAL": "critical",
}


def count_severities(vulns: Iterable[Dict[str, Any]]) -> VulnInfo:
    """Count advisories by ``database_specific.severity``; unknown severities only add to the total."""
    counts = {"low": 0, "medium": 0, "high": 0, "critical": 0}
    total = 0
    for vuln in vulns:
        if not isinstance(vuln, dict):
            continue
        total += 1
        severity = str((vuln.get("database_specific") or {}).get("severity") or "").upper()
        field = _SEVERITY_FIELDS.get(severity)
        if field:
            counts[field] += 1
    return VulnInfo(total=total, **counts)


class OSVClient:
    """Queries OSV for advisories affecting one version of a package.

    Args:
        ecosystem: OSV ecosystem name (``Go``, ``npm``, ``PyPI``).
        session: Optional ``requests.Session``; plain ``requests.post`` otherwise.
        base_url: Query endpoint.
    """

    def __init__(
        self,
        ecosystem: str,
        session: Optional[requests.Session] = None,
        base_url: str = Constants.OSV_QUERY_URL,
    ):
        self.ecosystem = ecosystem
        self.session = session
        self.base_url = base_url

    def check_module(self, name: str, version: str) -> VulnInfo:
        """Return advisory counts for ``name`` at ``version``.

        Raises:
            VulnLookupError: On transport errors, non-200 answers or malformed JSON.
        """
        payload = {"package": {"name": name, "ecosystem": self.ecosystem}, "version": version}
        post = self.session.post if self.session is not None else requests.post
        with Timer() as t:
            try:
                res = post(self.base_url, json=payload, timeout=Constants.REQUEST_TIMEOUT)
            except requests.RequestException as exc:
                raise VulnLookupError(f"OSV lookup for {name}@{version} failed: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "OSV response",
                extra=extra_context(
                    event="http_response",
                    component="vuln",
                    action="POST",
                    target=f"{name}@{version}",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                ),
            )
        if res.status_code != 200:
            raise VulnLookupError(f"OSV lookup for {name}@{version} returned HTTP {res.status_code}")
        try:
            data = res.json()
        except ValueError as exc:
            raise VulnLookupError(f"OSV returned malformed JSON for {name}@{version}") from exc
        if not isinstance(data, dict):
            raise VulnLookupError(f"OSV returned a non-object response for {name}@{version}")
        return count_severities(data.get("vulns") or [])


def _lookup(client: OSVClient, name: str, version: str) -> VulnInfo:
    if not version:
        return VulnInfo()
    try:
        return client.check_module(name, version)
    except VulnLookupError as exc:
        logger.debug("Ignoring advisory lookup failure: %s", exc)
        return VulnInfo()


def enrich_vulnerabilities(modules: Iterable[Module], client: OSVClient) -> None:
    """Attach advisory counts for the current and candidate versions, one lookup at a time.

    A failed lookup leaves that snapshot at zero.
    """
    for module in modules:
        module.vuln_current = _lookup(client, module.name, module.version)
        if module.update is not None:
            module.vuln_update = _lookup(client, module.name, module.update.version)
