"""Run orchestration: scan, classify, filter, enrich, then render or interact."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from faro.classify import Buckets, classify
from faro.common.logging_utils import extra_context, is_debug_enabled
from faro.constants import Constants, PackageManager
from faro.detector import detect_single, validate
from faro.errors import DetectionError
from faro.factory import create_scanner, create_updater, create_vuln_client, section_labels
from faro.filtering import filter_buckets
from faro.formatting import parse_format_flag
from faro.models import ScanOptions, max_name_length
from faro.render import Renderer
from faro.scanner.base import Scanner
from faro.tui.picker import ViewOptions
from faro.tui.terminal import start_interactive
from faro.updater.base import Updater
from faro.vuln import OSVClient, enrich_vulnerabilities

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Resolved options for one run (CLI over config over defaults)."""

    upgrade: bool = False
    interactive: bool = False
    filter: str = ""
    all: bool = False
    cooldown: int = 0
    format: str = ""
    vulnerabilities: bool = False
    manager: str = ""
    work_dir: str = "."


def resolve_options(args: Any, config: Optional[Dict[str, Any]] = None) -> RunOptions:
    """Fold parsed CLI arguments over config file values."""
    config = config or {}

    def pick(cli_value, key, default):
        if cli_value is not None:
            return cli_value
        return config.get(key, default)

    return RunOptions(
        upgrade=bool(getattr(args, "UPGRADE", False)),
        interactive=bool(getattr(args, "INTERACTIVE", False)),
        filter=pick(getattr(args, "FILTER", None), "filter", ""),
        all=bool(pick(getattr(args, "ALL", None), "all", False)),
        cooldown=int(pick(getattr(args, "COOLDOWN", None), "cooldown", 0)),
        format=pick(getattr(args, "FORMAT", None), "format", ""),
        vulnerabilities=bool(pick(getattr(args, "VULNERABILITIES", None), "vulnerabilities", False)),
        manager=pick(getattr(args, "MANAGER", None), "manager", ""),
        work_dir=getattr(args, "DIRECTORY", None) or ".",
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Deps:
    """Collaborators of :func:`run`; tests replace any of them."""

    renderer: Renderer = field(default_factory=Renderer)
    now: Callable[[], datetime] = _utc_now
    start_interactive: Callable[..., Any] = start_interactive
    scanner: Optional[Scanner] = None
    updater: Optional[Updater] = None
    vuln_client: Optional[OSVClient] = None


def resolve_manager(opts: RunOptions) -> PackageManager:
    if opts.manager:
        return validate(opts.manager)
    try:
        return detect_single(opts.work_dir).manager
    except DetectionError as exc:
        raise DetectionError(f"failed to detect package manager: {exc}\nSpecify one with --manager") from exc


def run(opts: RunOptions, deps: Optional[Deps] = None) -> List[Any]:
    """Execute one faro run.

    Returns:
        The modules handed to the updater (empty when nothing was updated).

    Raises:
        FaroError: Any scan, detection, format or update failure.
    """
    deps = deps or Deps()
    out = deps.renderer
    work_dir = os.path.abspath(opts.work_dir)
    pm = resolve_manager(opts)
    scanner = deps.scanner or create_scanner(pm, work_dir)
    formats = parse_format_flag(opts.format)

    if not formats.lines:
        out.line(f"Using package manager: {pm}")
        out.line("Checking for updates...")

    modules = scanner.get_updates(
        ScanOptions(filter=opts.filter, include_all=opts.all, cooldown_days=opts.cooldown, work_dir=work_dir)
    )
    index = scanner.get_dependency_index()
    now = deps.now()
    buckets: Buckets = classify(modules, index, grouped=formats.group).visible(opts.all)
    name_filter = "" if scanner.applies_name_filter else opts.filter
    buckets = filter_buckets(buckets, name_filter, opts.cooldown, now)

    if is_debug_enabled(logger):
        logger.debug(
            "Updates after filtering",
            extra=extra_context(event="decision", component="app", action="filter", count=len(buckets)),
        )

    if not buckets:
        if not formats.lines:
            out.line(Constants.MSG_UP_TO_DATE)
        return []

    if opts.vulnerabilities:
        if not formats.lines:
            out.line("Checking vulnerabilities...")
        enrich_vulnerabilities(buckets.flatten(), deps.vuln_client or create_vuln_client(pm))

    labels = section_labels(pm)

    if opts.interactive:
        updater = deps.updater or create_updater(pm, work_dir)
        view = ViewOptions(labels=labels, group=formats.group, time=formats.time, now=now)
        return deps.start_interactive(buckets.direct, buckets.indirect, buckets.transitive, view, updater, out)

    if formats.lines:
        out.lines_format(buckets)
        return []

    out.line()
    out.line("Available updates:")
    width = max_name_length(buckets.flatten())
    for title, group in (
        (labels.direct, buckets.direct),
        (labels.indirect, buckets.indirect),
        (labels.transitive, buckets.transitive),
    ):
        out.section(title, group, width, formats.group, opts.vulnerabilities, formats.time, now)

    if not opts.upgrade:
        out.line()
        out.line(Constants.MSG_HINT)
        return []

    to_update = buckets.flatten()
    updater = deps.updater or create_updater(pm, work_dir)
    out.line()
    out.line("Upgrading...")
    updater.update_packages(to_update)
    out.line("Done.")
    return to_update
