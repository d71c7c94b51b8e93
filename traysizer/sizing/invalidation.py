"""
Result Invalidation
===================

Ties a sector's Results to the inputs that produced them.

Any change to the tray type, reserve percentage or installation layout, to a
cable group's cable, quantity or arrangement, or any added / removed cable
group discards the stored Results in the same update. Every mutation bumps the
sector version so results computed from an older snapshot can be refused.

Helpers never mutate the sector they receive; they return an updated copy for
the caller to persist.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

from .errors import CableGroupNotFoundError, StaleResultsError
from .models import CableGroup, Results, Sector

logger = logging.getLogger(__name__)

SECTOR_CALCULATION_FIELDS = frozenset({"tray_type", "reserve_percentage", "installation_layout"})
GROUP_CALCULATION_FIELDS = frozenset({"cable", "quantity", "arrangement"})


class ChangeKind(str, Enum):
    SECTOR_UPDATED = "sector_updated"
    GROUP_ADDED = "group_added"
    GROUP_UPDATED = "group_updated"
    GROUP_REMOVED = "group_removed"


@dataclass(frozen=True)
class SectorChange:
    kind: ChangeKind
    fields: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def sector_updated(cls, fields: Iterable[str]) -> "SectorChange":
        return cls(ChangeKind.SECTOR_UPDATED, frozenset(fields))

    @classmethod
    def group_added(cls) -> "SectorChange":
        return cls(ChangeKind.GROUP_ADDED)

    @classmethod
    def group_updated(cls, fields: Iterable[str]) -> "SectorChange":
        return cls(ChangeKind.GROUP_UPDATED, frozenset(fields))

    @classmethod
    def group_removed(cls) -> "SectorChange":
        return cls(ChangeKind.GROUP_REMOVED)


def requires_invalidation(change: SectorChange) -> bool:
    """True when the change can alter the sizing outcome."""
    if change.kind in (ChangeKind.GROUP_ADDED, ChangeKind.GROUP_REMOVED):
        return True
    if change.kind == ChangeKind.SECTOR_UPDATED:
        return bool(change.fields & SECTOR_CALCULATION_FIELDS)
    return bool(change.fields & GROUP_CALCULATION_FIELDS)


def _apply(sector: Sector, change: SectorChange, **updates: Any) -> Sector:
    data = dict(sector)
    data.update(updates)
    data["version"] = sector.version + 1
    if requires_invalidation(change):
        if sector.results is not None:
            logger.info("Invalidating results for sector %s (%s)", sector.id or sector.name, change.kind.value)
        data["results"] = None
    # Re-validate so bounds (reserve, quantity) hold after the update
    return Sector.model_validate(data)


def update_sector(sector: Sector, **changes: Any) -> Sector:
    """Apply sector-level field changes (tray_type, reserve_percentage, name, ...)."""
    unknown = set(changes) - set(Sector.model_fields)
    forbidden = {"results", "version", "cable_groups"} & set(changes)
    if unknown or forbidden:
        raise ValueError(f"Cannot update sector fields: {', '.join(sorted(unknown | forbidden))}")
    return _apply(sector, SectorChange.sector_updated(changes), **changes)


def add_cable_group(sector: Sector, group: CableGroup) -> Sector:
    if group.id is None:
        group = group.model_copy(update={"id": uuid.uuid4().hex})
    return _apply(sector, SectorChange.group_added(), cable_groups=[*sector.cable_groups, group])


def _group_index(sector: Sector, group_id: str) -> Optional[int]:
    for i, group in enumerate(sector.cable_groups):
        if group.id == group_id:
            return i
    return None


def update_cable_group(sector: Sector, group_id: str, **changes: Any) -> Sector:
    index = _group_index(sector, group_id)
    if index is None:
        raise CableGroupNotFoundError(f"Cable group with ID {group_id} not found in sector {sector.id}")
    if "id" in changes or set(changes) - set(CableGroup.model_fields):
        raise ValueError(f"Cannot update cable group fields: {', '.join(sorted(changes))}")

    current = sector.cable_groups[index]
    updated = CableGroup.model_validate({**dict(current), **changes})
    groups = list(sector.cable_groups)
    groups[index] = updated
    return _apply(sector, SectorChange.group_updated(changes), cable_groups=groups)


def remove_cable_group(sector: Sector, group_id: str) -> Sector:
    """Remove a cable group. Unknown ids leave the sector untouched."""
    if _group_index(sector, group_id) is None:
        return sector
    groups = [g for g in sector.cable_groups if g.id != group_id]
    return _apply(sector, SectorChange.group_removed(), cable_groups=groups)


def attach_results(sector: Sector, results: Results, computed_at_version: int) -> Sector:
    """
    Store freshly computed results.

    Raises StaleResultsError when the sector changed since the snapshot the
    results were computed from.
    """
    if computed_at_version != sector.version:
        raise StaleResultsError(
            f"Results computed at version {computed_at_version}, sector is at version {sector.version}"
        )
    return sector.model_copy(update={"results": results})
