from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .categories import CategoryMatch, resolve_category
from .models import (
    LADDER_HEIGHT_REDUCTION_MM,
    MAX_ALTERNATIVES,
    TrayCandidate,
    TrayProjection,
    TrayTechnicalDetails,
    TrayType,
)

if TYPE_CHECKING:
    from traysizer.catalog.base import CatalogRepository

logger = logging.getLogger(__name__)


def usable_area(
    candidate: TrayCandidate,
    ladder_height_reduction_mm: float = LADDER_HEIGHT_REDUCTION_MM,
) -> float:
    """
    Effective cross-section of a tray (mm²).

    Channel trays use the full width x height. Ladder trays lose
    `ladder_height_reduction_mm` of height to the rails.
    """
    if candidate.tray_type == TrayType.LADDER:
        return candidate.width_mm * max(0.0, candidate.height_mm - ladder_height_reduction_mm)
    return candidate.width_mm * candidate.height_mm


def filter_single_layer(
    catalog: "CatalogRepository",
    tray_type: TrayType,
    min_load_capacity: float,
    required_width: float,
    required_height: float,
) -> List[TrayCandidate]:
    """
    Trays for a single-layer installation.

    Width and height are compared against the full tray dimensions: no ladder
    height reduction is applied here (unlike the multi-layer filter).
    """
    found = catalog.query(
        tray_type,
        min_load_capacity,
        min_width=required_width,
        min_height=required_height,
    )
    return [
        c for c in found
        if c.is_active
        and c.tray_type == tray_type
        and c.load_capacity_kg_m >= min_load_capacity
        and c.width_mm >= required_width
        and c.height_mm >= required_height
    ]


def filter_multi_layer(
    catalog: "CatalogRepository",
    tray_type: TrayType,
    min_load_capacity: float,
    required_area: float,
    ladder_height_reduction_mm: float = LADDER_HEIGHT_REDUCTION_MM,
) -> List[TrayCandidate]:
    """Trays for a multi-layer installation, filtered on usable area client side."""
    found = catalog.query(tray_type, min_load_capacity)
    return [
        c for c in found
        if c.is_active
        and c.tray_type == tray_type
        and c.load_capacity_kg_m >= min_load_capacity
        and usable_area(c, ladder_height_reduction_mm) >= required_area
    ]


@dataclass(frozen=True)
class RankedCandidates:
    optimal: Optional[TrayCandidate]
    alternatives: Tuple[TrayCandidate, ...]
    considered: int


def rank_candidates(
    candidates: Sequence[TrayCandidate],
    max_alternatives: int = MAX_ALTERNATIVES,
) -> RankedCandidates:
    """
    Order by load capacity only (ascending, stable).

    The first tray is the smallest sufficient capacity; the next
    `max_alternatives` trays are the alternatives.
    """
    ordered = sorted(candidates, key=lambda c: c.load_capacity_kg_m)
    if not ordered:
        return RankedCandidates(optimal=None, alternatives=(), considered=0)
    return RankedCandidates(
        optimal=ordered[0],
        alternatives=tuple(ordered[1:1 + max_alternatives]),
        considered=len(ordered),
    )


def project_candidate(
    candidate: TrayCandidate,
    ladder_height_reduction_mm: float = LADDER_HEIGHT_REDUCTION_MM,
) -> Tuple[TrayProjection, CategoryMatch]:
    match = resolve_category(candidate.category)
    projection = TrayProjection(
        id=candidate.id,
        tray_type=candidate.tray_type,
        category=match.category,
        category_label=candidate.category,
        category_mapped=match.mapped,
        technical_details=TrayTechnicalDetails(
            thickness_mm=candidate.thickness_mm,
            width_mm=candidate.width_mm,
            height_mm=candidate.height_mm,
            usable_area_mm2=usable_area(candidate, ladder_height_reduction_mm),
            load_resistance_kg_m=candidate.load_capacity_kg_m,
        ),
    )
    return projection, match
