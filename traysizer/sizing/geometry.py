"""
Geometry Calculator
===================

Required tray cross-section for a cable set.

Single layer:
- side by side: width = sum(diameter * qty), height = largest diameter
- bundled (trefoil): cables of equal diameter form clover groups of three,
  each group 2 * diameter wide; height = 2 * largest diameter

Multi layer:
- area = sum(external area * qty), no width/height

Width and area are multiplied by the dimension safety factor and by
(1 + reserve / 100). Heights carry no factor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

import numpy as np

from .models import (
    Arrangement,
    CableGroup,
    DIMENSION_SAFETY_FACTOR,
    InstallationLayout,
)

CLOVER_SIZE = 3

ArrangementPolicy = Callable[[Sequence[CableGroup]], Arrangement]


@dataclass(frozen=True)
class ArrangementVote:
    """Outcome of the whole-set arrangement vote."""
    side_by_side: int
    bundled: int

    @property
    def total(self) -> int:
        return self.side_by_side + self.bundled

    @property
    def arrangement(self) -> Arrangement:
        # Majority of side-by-side groups (ties included) decides side by side
        if self.side_by_side >= self.total / 2:
            return Arrangement.SIDE_BY_SIDE
        return Arrangement.BUNDLED

    @property
    def mixed(self) -> bool:
        return self.side_by_side > 0 and self.bundled > 0

    @property
    def tied(self) -> bool:
        return self.total > 0 and 2 * self.side_by_side == self.total


def vote_arrangement(groups: Sequence[CableGroup]) -> ArrangementVote:
    side = sum(1 for g in groups if g.arrangement == Arrangement.SIDE_BY_SIDE)
    return ArrangementVote(side_by_side=side, bundled=len(groups) - side)


def classify_arrangement(groups: Sequence[CableGroup]) -> Arrangement:
    """
    Majority policy over the whole cable set.

    Groups are counted, not cables. The winning arrangement is applied to every
    group, so bundled groups inside a side-by-side majority are measured as side
    by side and vice versa.
    """
    if not groups:
        raise ValueError("cannot classify the arrangement of an empty cable set")
    return vote_arrangement(groups).arrangement


@dataclass(frozen=True)
class GeometryRequirement:
    layout: InstallationLayout
    raw_area_mm2: float
    arrangement: Optional[Arrangement] = None
    raw_width_mm: Optional[float] = None
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    area_mm2: Optional[float] = None


def reserve_multiplier(reserve_percentage: float) -> float:
    return 1.0 + float(reserve_percentage) / 100.0


def _diameters(groups: Sequence[CableGroup]) -> np.ndarray:
    return np.array([g.cable.external_diameter_mm for g in groups], dtype=float)


def _quantities(groups: Sequence[CableGroup]) -> np.ndarray:
    return np.array([g.quantity for g in groups], dtype=float)


def raw_cable_area(groups: Sequence[CableGroup]) -> float:
    """Un-factored cross-section occupied by the cables (mm²)."""
    if not groups:
        return 0.0
    areas = np.array([g.cable.external_area_mm2 for g in groups], dtype=float)
    return float(np.dot(areas, _quantities(groups)))


def clover_buckets(groups: Sequence[CableGroup]) -> Dict[float, int]:
    """Total cable count per exact external diameter."""
    if not groups:
        return {}
    diameters, inverse = np.unique(_diameters(groups), return_inverse=True)
    totals = np.bincount(inverse, weights=_quantities(groups))
    return {float(d): int(q) for d, q in zip(diameters, totals)}


def side_by_side_dimensions(
    groups: Sequence[CableGroup],
    reserve_percentage: float,
    dimension_safety_factor: float = DIMENSION_SAFETY_FACTOR,
) -> GeometryRequirement:
    diameters = _diameters(groups)
    raw_width = float(np.dot(diameters, _quantities(groups)))
    return GeometryRequirement(
        layout=InstallationLayout.SINGLE_LAYER,
        arrangement=Arrangement.SIDE_BY_SIDE,
        raw_area_mm2=raw_cable_area(groups),
        raw_width_mm=raw_width,
        width_mm=raw_width * dimension_safety_factor * reserve_multiplier(reserve_percentage),
        height_mm=float(np.max(diameters)),
    )


def bundled_dimensions(
    groups: Sequence[CableGroup],
    reserve_percentage: float,
    dimension_safety_factor: float = DIMENSION_SAFETY_FACTOR,
) -> GeometryRequirement:
    raw_width = 0.0
    for diameter, quantity in clover_buckets(groups).items():
        clover_groups = math.ceil(quantity / CLOVER_SIZE)
        raw_width += clover_groups * 2 * diameter
    return GeometryRequirement(
        layout=InstallationLayout.SINGLE_LAYER,
        arrangement=Arrangement.BUNDLED,
        raw_area_mm2=raw_cable_area(groups),
        raw_width_mm=raw_width,
        width_mm=raw_width * dimension_safety_factor * reserve_multiplier(reserve_percentage),
        height_mm=2.0 * float(np.max(_diameters(groups))),
    )


def multi_layer_area(
    groups: Sequence[CableGroup],
    reserve_percentage: float,
    dimension_safety_factor: float = DIMENSION_SAFETY_FACTOR,
) -> GeometryRequirement:
    raw_area = raw_cable_area(groups)
    return GeometryRequirement(
        layout=InstallationLayout.MULTI_LAYER,
        raw_area_mm2=raw_area,
        area_mm2=raw_area * dimension_safety_factor * reserve_multiplier(reserve_percentage),
    )


def required_geometry(
    groups: Sequence[CableGroup],
    layout: InstallationLayout,
    reserve_percentage: float,
    *,
    dimension_safety_factor: float = DIMENSION_SAFETY_FACTOR,
    arrangement_policy: ArrangementPolicy = classify_arrangement,
) -> GeometryRequirement:
    """Dispatch to the calculator for the layout (and, for single layer, the arrangement)."""
    if not groups:
        raise ValueError("cannot size an empty cable set")

    if layout == InstallationLayout.MULTI_LAYER:
        return multi_layer_area(groups, reserve_percentage, dimension_safety_factor)

    if arrangement_policy(groups) == Arrangement.BUNDLED:
        return bundled_dimensions(groups, reserve_percentage, dimension_safety_factor)
    return side_by_side_dimensions(groups, reserve_percentage, dimension_safety_factor)
