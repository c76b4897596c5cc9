"""Parsing of the ``--format`` modifier list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from faro.constants import Constants
from faro.errors import FormatOptionError


@dataclass(frozen=True)
class FormatOptions:
    """Display modifiers.

    group: split each section by version-delta group.
    lines: machine readable ``name@version`` output without headings.
    time: append the candidate's publish age to each row.
    """
    group: bool = False
    lines: bool = False
    time: bool = False


def parse_format_flag(value: Optional[str]) -> FormatOptions:
    """Parse a comma-delimited modifier list such as ``"group,time"``.

    Raises:
        FormatOptionError: For any modifier outside ``group``, ``lines``, ``time``.
    """
    if not value:
        return FormatOptions()
    seen = set()
    for item in value.split(","):
        token = item.strip().lower()
        if not token:
            continue
        if token not in Constants.FORMAT_OPTIONS:
            raise FormatOptionError(
                f"invalid format option {item.strip()!r} "
                f"(supported: {', '.join(Constants.FORMAT_OPTIONS)})"
            )
        seen.add(token)
    return FormatOptions(group="group" in seen, lines="lines" in seen, time="time" in seen)
