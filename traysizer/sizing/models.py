from __future__ import annotations

import json
import uuid
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    confloat,
    conint,
    model_validator,
)

from .errors import SectorNotFoundError

# Default engineering constants (overridable through SizingFactors)
WEIGHT_SAFETY_FACTOR = 1.2
DIMENSION_SAFETY_FACTOR = 1.1
LADDER_HEIGHT_REDUCTION_MM = 15.0
MAX_ALTERNATIVES = 3
DEFAULT_RESERVE_PERCENTAGE = 30.0

GENERAL_SECTOR_NAME = "General"


def _lookup_alias(enum_cls, value, aliases: Dict[str, str]):
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    key = aliases.get(key, key)
    for member in enum_cls:
        if member.value == key:
            return member
    return None


class TrayType(str, Enum):
    """Tray construction types offered by the catalog."""
    LADDER = "ladder"
    CHANNEL = "channel"

    @classmethod
    def _missing_(cls, value):
        return _lookup_alias(cls, value, {"escalerilla": "ladder", "canal": "channel"})


class InstallationLayout(str, Enum):
    SINGLE_LAYER = "single_layer"
    MULTI_LAYER = "multi_layer"

    @classmethod
    def _missing_(cls, value):
        return _lookup_alias(
            cls,
            value,
            {
                "singlelayer": "single_layer",
                "single-layer": "single_layer",
                "multilayer": "multi_layer",
                "multi-layer": "multi_layer",
            },
        )


class Arrangement(str, Enum):
    """Cross-section layout of the cables: flat row or trefoil (clover) groups of three."""
    SIDE_BY_SIDE = "side_by_side"
    BUNDLED = "bundled"

    @classmethod
    def _missing_(cls, value):
        return _lookup_alias(
            cls,
            value,
            {
                "horizontal": "side_by_side",
                "side-by-side": "side_by_side",
                "clover": "bundled",
                "trefoil": "bundled",
            },
        )


class CanonicalCategory(str, Enum):
    SUPER_LIGHT = "super-light"
    LIGHT = "light"
    SEMI_HEAVY = "semi-heavy"
    HEAVY = "heavy"
    SUPER_HEAVY = "super-heavy"


class SizingFactors(BaseModel):
    """Safety constants applied by the sizing engine."""
    weight_safety_factor: confloat(ge=1.0) = Field(
        WEIGHT_SAFETY_FACTOR, description="Multiplier on cable load when filtering trays."
    )
    dimension_safety_factor: confloat(ge=1.0) = Field(
        DIMENSION_SAFETY_FACTOR, description="Multiplier on required width / area."
    )
    ladder_height_reduction_mm: confloat(ge=0) = Field(
        LADDER_HEIGHT_REDUCTION_MM,
        description="Height lost to ladder rails when computing usable area (multi layer only).",
    )
    max_alternatives: conint(ge=0, le=MAX_ALTERNATIVES) = Field(
        MAX_ALTERNATIVES, description="Number of alternatives reported after the optimal tray."
    )


def load_factors(path: str | Path) -> SizingFactors:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Factors JSON not found: {path}")
    return SizingFactors.model_validate(json.loads(p.read_text()))


class CableSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    nominal_section_mm2: str = Field("", description="Nominal section label in mm².")
    nominal_section_awg: str = Field("", description="Nominal section label in AWG.")
    external_diameter_mm: PositiveFloat = Field(..., description="External diameter (mm).")
    external_area_mm2: PositiveFloat = Field(..., description="External cross-section area (mm²).")
    weight_per_meter_kg: confloat(ge=0) = Field(..., description="Mass per unit length (kg/m).")


class CableGroup(BaseModel):
    id: Optional[str] = None
    cable: CableSpec
    quantity: conint(ge=1) = Field(..., description="Number of identical cables.")
    arrangement: Arrangement = Arrangement.SIDE_BY_SIDE


class TrayCandidate(BaseModel):
    """Catalog entry. Read-only to the engine."""
    model_config = ConfigDict(frozen=True)

    id: str
    tray_type: TrayType
    category: str = ""
    thickness_mm: PositiveFloat
    width_mm: PositiveFloat
    height_mm: PositiveFloat
    load_capacity_kg_m: PositiveFloat
    is_active: bool = True
    code: Optional[str] = None
    name: Optional[str] = None
    material: Optional[str] = None
    finish: Optional[str] = None


class TrayTechnicalDetails(BaseModel):
    thickness_mm: float
    width_mm: float
    height_mm: float
    usable_area_mm2: float
    load_resistance_kg_m: float


class TrayProjection(BaseModel):
    """Read-optimized copy of a catalog tray stored inside Results."""
    id: str
    tray_type: TrayType
    category: CanonicalCategory
    category_label: str = ""
    category_mapped: bool = True
    technical_details: TrayTechnicalDetails


class SizingRequirements(BaseModel):
    """Factored requirements the candidates were filtered against."""
    installation_layout: InstallationLayout
    arrangement: Optional[Arrangement] = None
    load_kg_m: float
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    area_mm2: Optional[float] = None


class Results(BaseModel):
    optimal: Optional[TrayProjection] = None
    alternatives: List[TrayProjection] = Field(default_factory=list, max_length=MAX_ALTERNATIVES)
    raw_load_kg_m: confloat(ge=0)
    raw_area_mm2: confloat(ge=0)
    requirements: SizingRequirements
    warnings: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ordered_by_capacity(self) -> "Results":
        if self.optimal is None:
            if self.alternatives:
                raise ValueError("alternatives require an optimal tray")
            return self
        previous = self.optimal.technical_details.load_resistance_kg_m
        for alt in self.alternatives:
            current = alt.technical_details.load_resistance_kg_m
            if current < previous:
                raise ValueError("alternatives must not decrease in load capacity")
            previous = current
        return self

    @property
    def found(self) -> bool:
        return self.optimal is not None


class Sector(BaseModel):
    id: Optional[str] = None
    name: str
    tray_type: TrayType = TrayType.LADDER
    reserve_percentage: confloat(ge=0, le=100) = Field(
        DEFAULT_RESERVE_PERCENTAGE, description="Extra margin for future cables (%)."
    )
    installation_layout: InstallationLayout = InstallationLayout.SINGLE_LAYER
    cable_groups: List[CableGroup] = Field(default_factory=list)
    results: Optional[Results] = None
    version: conint(ge=0) = Field(0, description="Incremented by every mutation.")


class Project(BaseModel):
    name: str
    company: str = ""
    location: str = ""
    sectors: List[Sector] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        name: str,
        company: str = "",
        location: str = "",
        *,
        has_sectors: bool = True,
    ) -> "Project":
        """
        New project. Without explicit sectoring it owns a single "General" sector
        with default parameters.
        """
        sectors: List[Sector] = []
        if not has_sectors:
            sectors.append(Sector(id=GENERAL_SECTOR_NAME.lower(), name=GENERAL_SECTOR_NAME))
        return cls(name=name, company=company, location=location, sectors=sectors)

    def sector(self, sector_id: str) -> Sector:
        for sector in self.sectors:
            if sector.id == sector_id:
                return sector
        raise SectorNotFoundError(f"Sector with ID {sector_id} not found in project {self.name}")

    def general_sector(self) -> Sector:
        for sector in self.sectors:
            if sector.name == GENERAL_SECTOR_NAME:
                return sector
        raise SectorNotFoundError(f'Project {self.name} has no "{GENERAL_SECTOR_NAME}" sector')

    def add_sector(self, sector: Sector) -> "Project":
        if sector.id is None:
            sector = sector.model_copy(update={"id": uuid.uuid4().hex})
        return self.model_copy(update={"sectors": [*self.sectors, sector]})

    def replace_sector(self, sector: Sector) -> "Project":
        self.sector(sector.id)
        sectors = [sector if s.id == sector.id else s for s in self.sectors]
        return self.model_copy(update={"sectors": sectors})
