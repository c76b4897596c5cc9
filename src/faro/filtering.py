"""Name filter and cooldown pipeline.

Both filters are pure over ``(modules, now)``; callers inject ``now``.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Pattern

from faro.classify import Buckets
from faro.common.timeutil import age_in_days
from faro.errors import FilterCompileError
from faro.models import Module

logger = logging.getLogger(__name__)


def compile_filter(pattern: str) -> Pattern[str]:
    """Compile ``pattern`` for scanners that insist on a valid regex.

    Raises:
        FilterCompileError: If the pattern is not a valid regular expression.
    """
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise FilterCompileError(f"invalid filter pattern {pattern!r}: {exc}") from exc


def _best_effort_regex(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern)
    except re.error:
        logger.debug("Filter %r is not a valid regex; using substring match only", pattern)
        return None


def name_matches(name: str, pattern: str, regex: Optional[Pattern[str]] = None) -> bool:
    """Case-sensitive substring match, or a regex search when one is given."""
    if not pattern:
        return True
    if pattern in name:
        return True
    return regex is not None and regex.search(name) is not None


def cooldown_eligible(update_time: Optional[str], cooldown_days: int, now: datetime) -> bool:
    """Return False only when the update is known to be younger than ``cooldown_days``.

    Missing or unparsable publish times keep the module.
    """
    if cooldown_days <= 0:
        return True
    age = age_in_days(update_time, now)
    if age is None:
        return True
    return age >= cooldown_days


def filter_modules(
    modules: Iterable[Module],
    pattern: str = "",
    cooldown_days: int = 0,
    now: Optional[datetime] = None,
) -> List[Module]:
    """Return the modules passing both the name filter and the cooldown."""
    regex = _best_effort_regex(pattern) if pattern else None
    kept: List[Module] = []
    for module in modules:
        if not name_matches(module.name, pattern, regex):
            continue
        if cooldown_days > 0 and module.update is not None:
            if now is None:
                raise ValueError("now is required when cooldown_days > 0")
            if not cooldown_eligible(module.update.time, cooldown_days, now):
                logger.debug("Cooldown excludes %s@%s", module.name, module.update.version)
                continue
        kept.append(module)
    return kept


def filter_buckets(
    buckets: Buckets,
    pattern: str = "",
    cooldown_days: int = 0,
    now: Optional[datetime] = None,
) -> Buckets:
    """Apply :func:`filter_modules` to every bucket, keeping bucket order."""
    return Buckets(
        filter_modules(buckets.direct, pattern, cooldown_days, now),
        filter_modules(buckets.indirect, pattern, cooldown_days, now),
        filter_modules(buckets.transitive, pattern, cooldown_days, now),
    )
