"""Classification of scanner output into Direct / Indirect / Transitive buckets.

Scanners disagree about categories (npm reports ``devDependencies``, go.mod
marks ``// indirect``, uv has no notion of either), so the manifest-derived
``DependencyIndex`` is treated as authoritative and the scanner's own fields
are only a fallback. Everything here is a pure function over its inputs.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from faro.common.logging_utils import extra_context, is_debug_enabled
from faro.models import DependencyIndex, Module
from faro.versioning import group_sort_key

logger = logging.getLogger(__name__)

DEV_LIKE_TYPES = frozenset({"devDependencies", "dev", "development"})
INDIRECT_LIKE_TYPES = frozenset({"indirect"})


class Bucket(Enum):
    """Display section a module belongs to."""

    DIRECT = "direct"
    INDIRECT = "indirect"
    TRANSITIVE = "transitive"


@dataclass
class Buckets:
    """Classified modules, each list in display order."""

    direct: List[Module] = field(default_factory=list)
    indirect: List[Module] = field(default_factory=list)
    transitive: List[Module] = field(default_factory=list)

    def visible(self, include_all: bool) -> "Buckets":
        """Drop the transitive bucket unless ``include_all`` is set."""
        return Buckets(
            list(self.direct),
            list(self.indirect),
            list(self.transitive) if include_all else [],
        )

    def flatten(self) -> List[Module]:
        return [*self.direct, *self.indirect, *self.transitive]

    def __len__(self) -> int:
        return len(self.direct) + len(self.indirect) + len(self.transitive)


def bucket_for(direct: bool, dependency_type: str, from_manifest: bool) -> Bucket:
    """Decide the bucket for one (already reconciled) classification."""
    if direct:
        if dependency_type in DEV_LIKE_TYPES or dependency_type in INDIRECT_LIKE_TYPES:
            return Bucket.INDIRECT
        return Bucket.DIRECT
    if from_manifest:
        # Declared in the manifest but not direct, e.g. a go.mod "// indirect" require.
        return Bucket.INDIRECT
    return Bucket.TRANSITIVE


def reconcile(module: Module, index: Optional[DependencyIndex]) -> tuple[Module, bool]:
    """Return a copy of ``module`` carrying the manifest classification, if any.

    The second element is True when the manifest supplied the classification.
    """
    info = index.get(module.name) if index else None
    if info is None:
        return module, False
    return dataclasses.replace(module, direct=info.direct, dependency_type=info.type), True


def sort_grouped(modules: Iterable[Module]) -> List[Module]:
    """Order by version-delta group (major first), then by name."""
    return sorted(modules, key=lambda m: (group_sort_key(m), m.name))


def classify(
    modules: Iterable[Module],
    index: Optional[DependencyIndex] = None,
    grouped: bool = False,
) -> Buckets:
    """Split ``modules`` into fresh Direct / Indirect / Transitive lists.

    Modules without a candidate update are dropped. Within a bucket the
    scanner's order is kept unless ``grouped`` is requested.
    """
    result = Buckets()
    targets = {
        Bucket.DIRECT: result.direct,
        Bucket.INDIRECT: result.indirect,
        Bucket.TRANSITIVE: result.transitive,
    }
    for module in modules:
        if module.update is None:
            continue
        reconciled, from_manifest = reconcile(module, index)
        bucket = bucket_for(reconciled.direct, reconciled.dependency_type, from_manifest)
        targets[bucket].append(reconciled)

    if grouped:
        result = Buckets(
            sort_grouped(result.direct),
            sort_grouped(result.indirect),
            sort_grouped(result.transitive),
        )

    if is_debug_enabled(logger):
        logger.debug(
            "Classified modules",
            extra=extra_context(
                event="decision",
                component="classify",
                action="classify",
                direct=len(result.direct),
                indirect=len(result.indirect),
                transitive=len(result.transitive),
            ),
        )
    return result
