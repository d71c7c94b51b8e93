from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .models import CableGroup, WEIGHT_SAFETY_FACTOR


@dataclass(frozen=True)
class LoadSummary:
    raw_kg_m: float       # reported in Results
    adjusted_kg_m: float  # used only to filter trays
    safety_factor: float


def group_loads(groups: Sequence[CableGroup]) -> np.ndarray:
    """Per-group load contribution (kg/m)."""
    return np.array(
        [g.cable.weight_per_meter_kg * g.quantity for g in groups],
        dtype=float,
    )


def aggregate_load(
    groups: Sequence[CableGroup],
    weight_safety_factor: float = WEIGHT_SAFETY_FACTOR,
) -> LoadSummary:
    """
    Sum the cable mass carried per metre of tray.

    raw = sum(weight_per_meter * quantity); adjusted = raw * weight_safety_factor.
    An empty cable list yields zero for both.
    """
    loads = group_loads(groups)
    raw = float(np.sum(loads)) if loads.size else 0.0
    return LoadSummary(
        raw_kg_m=raw,
        adjusted_kg_m=raw * float(weight_safety_factor),
        safety_factor=float(weight_safety_factor),
    )
