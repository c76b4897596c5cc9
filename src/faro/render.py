"""Non-interactive output: banners, update tables and ``lines`` output."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from rich.console import Console
from rich.text import Text

from faro.classify import Buckets
from faro.common.timeutil import publish_age
from faro.models import Module, VulnInfo
from faro.versioning import VersionDelta, module_delta

DELTA_STYLES: Dict[VersionDelta, str] = {
    VersionDelta.MAJOR: "red",
    VersionDelta.MINOR: "yellow",
    VersionDelta.PATCH: "green",
    VersionDelta.OTHER: "",
}

_SEVERITY_TAGS = (("L", "low"), ("M", "medium"), ("H", "high"), ("C", "critical"))


def format_vuln_info(info: VulnInfo) -> str:
    """``[L (1), H (2)]`` listing the non-zero severities; empty when there are none."""
    if info.total <= 0:
        return ""
    parts = [f"{tag} ({getattr(info, field)})" for tag, field in _SEVERITY_TAGS if getattr(info, field)]
    if not parts:
        parts = [f"? ({info.total})"]
    return f"[{', '.join(parts)}]"


def format_vuln_counts(current: VulnInfo, update: VulnInfo) -> Text:
    """Advisory transition from the current to the candidate version."""
    current_str = format_vuln_info(current)
    text = Text()
    if not current_str:
        return text
    update_str = format_vuln_info(update)
    fixed = current.total - update.total
    text.append(current_str)
    if fixed > 0:
        text.append(" → ")
        if update_str:
            text.append(f"{update_str} ")
            text.append(f"(fixes {fixed})", style="green")
        else:
            text.append(f"✓ (fixes {fixed})", style="green")
    elif fixed < 0:
        text.append(f" → {update_str} ")
        text.append(f"(+{-fixed})", style="red")
    elif update.total > 0:
        text.append(f" → {update_str}")
    return text


def format_update(module: Module, width: int) -> Text:
    """``name  current  →  candidate`` with the candidate coloured by version delta."""
    candidate = module.update.version if module.update is not None else ""
    text = Text(module.name.ljust(width))
    text.append(f"  {module.version}  →  ")
    text.append(candidate, style=DELTA_STYLES[module_delta(module)])
    return text


def format_row(
    module: Module,
    width: int,
    show_vulns: bool = False,
    show_time: bool = False,
    now: Optional[datetime] = None,
) -> Text:
    row = Text(" ")
    row.append_text(format_update(module, width))
    if show_vulns and module.vuln_current.total > 0:
        row.append(" ")
        row.append_text(format_vuln_counts(module.vuln_current, module.vuln_update))
    if show_time and now is not None and module.update is not None:
        age = publish_age(module.update.time, now)
        if age:
            row.append(f"  {age}", style="dim")
    return row


def group_by_delta(modules: List[Module]) -> List[tuple]:
    """``[(label, modules), ...]`` ordered by group key, then label."""
    groups: Dict[VersionDelta, List[Module]] = {}
    for module in modules:
        groups.setdefault(module_delta(module), []).append(module)
    ordered = sorted(groups, key=lambda d: (d.sort_key, d.label))
    return [(delta.label, groups[delta]) for delta in ordered]


class Renderer:
    """Writes run output to a rich ``Console``."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def line(self, message: str = "", style: Optional[str] = None) -> None:
        self.console.print(Text(message, style=style or ""), soft_wrap=True)

    def lines_format(self, buckets: Buckets) -> None:
        """One ``name@candidate`` per line with no other text."""
        for module in buckets.flatten():
            if module.update is None:
                continue
            self.line(f"{module.name}@{module.update.version}")

    def section(
        self,
        title: str,
        modules: List[Module],
        width: int,
        grouped: bool = False,
        show_vulns: bool = False,
        show_time: bool = False,
        now: Optional[datetime] = None,
    ) -> None:
        if not modules:
            return
        self.line()
        self.line(title, style="bold")
        if grouped:
            for label, members in group_by_delta(modules):
                self.line()
                self.line(label, style="dim")
                for module in members:
                    self.console.print(format_row(module, width, show_vulns, show_time, now), soft_wrap=True)
        else:
            for module in modules:
                self.console.print(format_row(module, width, show_vulns, show_time, now), soft_wrap=True)
