from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from .errors import SectorValidationError
from .geometry import (
    ArrangementPolicy,
    GeometryRequirement,
    classify_arrangement,
    required_geometry,
    vote_arrangement,
)
from .invalidation import attach_results
from .loads import LoadSummary, aggregate_load
from .models import (
    Arrangement,
    InstallationLayout,
    Results,
    Sector,
    SizingFactors,
    SizingRequirements,
    TrayCandidate,
)
from .selection import filter_multi_layer, filter_single_layer, project_candidate, rank_candidates

if TYPE_CHECKING:
    from traysizer.catalog.base import CatalogRepository

logger = logging.getLogger(__name__)


def validate_sector(sector: Sector) -> None:
    """Reject sectors that cannot be sized. No state is changed."""
    if not sector.cable_groups:
        raise SectorValidationError("Sector must contain at least one cable group to be sized")
    reserve = float(sector.reserve_percentage)
    if not 0.0 <= reserve <= 100.0:
        raise SectorValidationError(f"Reserve percentage must be within [0, 100], got {reserve}")


def _no_candidate_warning(sector: Sector, load: LoadSummary, geometry: GeometryRequirement) -> str:
    if geometry.layout == InstallationLayout.MULTI_LAYER:
        needs = f"usable area >= {geometry.area_mm2:.1f} mm²"
    else:
        needs = f"width >= {geometry.width_mm:.1f} mm and height >= {geometry.height_mm:.1f} mm"
    return (
        f"No active {sector.tray_type.value} tray carries {load.adjusted_kg_m:.2f} kg/m "
        f"with {needs}. Adjust the sector parameters or the cables."
    )


class TraySizer:
    """
    Sizing orchestrator.

    Composes load aggregation, geometry, catalog filtering and ranking into a
    Results value. Holds no per-sector state: one compute call reads one
    snapshot of the cable list and issues exactly one catalog query.
    """

    def __init__(
        self,
        catalog: "CatalogRepository",
        factors: Optional[SizingFactors] = None,
        arrangement_policy: ArrangementPolicy = classify_arrangement,
    ):
        self.catalog = catalog
        self.factors = factors or SizingFactors()
        self.arrangement_policy = arrangement_policy

    def compute(self, sector: Sector) -> Results:
        """
        Select the optimal tray and up to three alternatives for a sector.

        Raises SectorValidationError for sectors without cables or with a reserve
        out of range. Catalog failures propagate unchanged. When no tray fits,
        the Results carry no optimal tray but still report load and area.
        """
        validate_sector(sector)
        f = self.factors
        groups = list(sector.cable_groups)
        warnings: List[str] = []

        load = aggregate_load(groups, f.weight_safety_factor)
        geometry = required_geometry(
            groups,
            sector.installation_layout,
            sector.reserve_percentage,
            dimension_safety_factor=f.dimension_safety_factor,
            arrangement_policy=self.arrangement_policy,
        )

        if geometry.layout == InstallationLayout.SINGLE_LAYER:
            vote = vote_arrangement(groups)
            logger.info(
                "Sector %s: %s arrangement (%d side by side / %d bundled groups)",
                sector.name, geometry.arrangement.value, vote.side_by_side, vote.bundled,
            )
            if vote.tied:
                warnings.append(
                    f"No clear arrangement majority ({vote.side_by_side} side by side, "
                    f"{vote.bundled} bundled groups); sized as {geometry.arrangement.value}."
                )
            elif vote.mixed:
                other = vote.bundled if geometry.arrangement == Arrangement.SIDE_BY_SIDE else vote.side_by_side
                warnings.append(
                    f"{other} cable group(s) measured as {geometry.arrangement.value} "
                    f"by the majority arrangement."
                )
            logger.info(
                "Sector %s requires width %.1f mm, height %.1f mm, load %.3f kg/m",
                sector.name, geometry.width_mm, geometry.height_mm, load.adjusted_kg_m,
            )
            candidates = filter_single_layer(
                self.catalog,
                sector.tray_type,
                load.adjusted_kg_m,
                geometry.width_mm,
                geometry.height_mm,
            )
        else:
            logger.info(
                "Sector %s requires area %.1f mm², load %.3f kg/m",
                sector.name, geometry.area_mm2, load.adjusted_kg_m,
            )
            candidates = filter_multi_layer(
                self.catalog,
                sector.tray_type,
                load.adjusted_kg_m,
                geometry.area_mm2,
                f.ladder_height_reduction_mm,
            )

        ranked = rank_candidates(candidates, f.max_alternatives)
        logger.debug("Sector %s: %d suitable trays", sector.name, ranked.considered)

        if ranked.optimal is None:
            warnings.append(_no_candidate_warning(sector, load, geometry))
            logger.info("Sector %s: no suitable tray", sector.name)

        optimal = self._project(ranked.optimal, warnings) if ranked.optimal is not None else None
        alternatives = [self._project(c, warnings) for c in ranked.alternatives]
        if optimal is not None:
            logger.info(
                "Sector %s: optimal tray %s (%.1f kg/m), %d alternatives",
                sector.name, optimal.id, optimal.technical_details.load_resistance_kg_m, len(alternatives),
            )

        return Results(
            optimal=optimal,
            alternatives=alternatives,
            raw_load_kg_m=load.raw_kg_m,
            raw_area_mm2=geometry.raw_area_mm2,
            requirements=SizingRequirements(
                installation_layout=geometry.layout,
                arrangement=geometry.arrangement,
                load_kg_m=load.adjusted_kg_m,
                width_mm=geometry.width_mm,
                height_mm=geometry.height_mm,
                area_mm2=geometry.area_mm2,
            ),
            warnings=warnings,
        )

    def _project(self, candidate: TrayCandidate, warnings: List[str]):
        projection, match = project_candidate(candidate, self.factors.ladder_height_reduction_mm)
        if not match.mapped:
            warnings.append(
                f"Tray {candidate.id}: category {candidate.category!r} is not recognized, "
                f"treated as {match.category.value}."
            )
        return projection

    def size(self, sector: Sector) -> Sector:
        """Compute and attach Results, returning the updated sector."""
        return attach_results(sector, self.compute(sector), computed_at_version=sector.version)


def compute_optimal_tray(
    sector: Sector,
    catalog: "CatalogRepository",
    factors: Optional[SizingFactors] = None,
) -> Results:
    """Select the optimal tray for a sector with the default arrangement policy."""
    return TraySizer(catalog, factors).compute(sector)
