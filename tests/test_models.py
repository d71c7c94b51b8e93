"""Tests for models.py: input aliases, bounds and the project aggregate."""
import pytest
from pydantic import ValidationError

from conftest import make_cable, make_group
from traysizer.sizing.errors import SectorNotFoundError
from traysizer.sizing.models import (
    Arrangement,
    CableGroup,
    InstallationLayout,
    Project,
    Results,
    Sector,
    SizingFactors,
    SizingRequirements,
    TrayProjection,
    TrayTechnicalDetails,
    TrayType,
    load_factors,
)


class TestEnums:
    @pytest.mark.parametrize(
        "enum_cls,value,expected",
        [
            (TrayType, "escalerilla", TrayType.LADDER),
            (TrayType, "Canal", TrayType.CHANNEL),
            (InstallationLayout, "singleLayer", InstallationLayout.SINGLE_LAYER),
            (InstallationLayout, "multi-layer", InstallationLayout.MULTI_LAYER),
            (Arrangement, "horizontal", Arrangement.SIDE_BY_SIDE),
            (Arrangement, "clover", Arrangement.BUNDLED),
            (Arrangement, "trefoil", Arrangement.BUNDLED),
        ],
    )
    def test_aliases(self, enum_cls, value, expected):
        assert enum_cls(value) is expected

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            TrayType("bandeja")


class TestSector:
    def test_defaults(self):
        sector = Sector(name="New")
        assert sector.reserve_percentage == 30
        assert sector.tray_type == TrayType.LADDER
        assert sector.installation_layout == InstallationLayout.SINGLE_LAYER
        assert sector.results is None
        assert sector.version == 0

    @pytest.mark.parametrize("reserve", [-1, 100.5])
    def test_reserve_bounds(self, reserve):
        with pytest.raises(ValidationError):
            Sector(name="Bad", reserve_percentage=reserve)

    def test_quantity_positive(self):
        with pytest.raises(ValidationError):
            CableGroup(cable=make_cable(), quantity=0)

    def test_cable_dimensions_positive(self):
        with pytest.raises(ValidationError):
            make_cable(diameter=0.0, area=1.0)

    def test_json_roundtrip(self, single_layer_sector):
        data = single_layer_sector.model_dump(mode="json")
        assert Sector.model_validate(data) == single_layer_sector


def _projection(tray_id, load):
    return TrayProjection(
        id=tray_id,
        tray_type=TrayType.LADDER,
        category="light",
        technical_details=TrayTechnicalDetails(
            thickness_mm=1.5, width_mm=100, height_mm=50, usable_area_mm2=3500,
            load_resistance_kg_m=load,
        ),
    )


class TestResults:
    REQ = SizingRequirements(installation_layout=InstallationLayout.SINGLE_LAYER, load_kg_m=1.0)

    def test_alternatives_must_not_decrease(self):
        with pytest.raises(ValidationError):
            Results(
                optimal=_projection("a", 40),
                alternatives=[_projection("b", 20)],
                raw_load_kg_m=1.0,
                raw_area_mm2=1.0,
                requirements=self.REQ,
            )

    def test_at_most_three_alternatives(self):
        with pytest.raises(ValidationError):
            Results(
                optimal=_projection("a", 10),
                alternatives=[_projection(str(i), 20 + i) for i in range(4)],
                raw_load_kg_m=1.0,
                raw_area_mm2=1.0,
                requirements=self.REQ,
            )

    def test_alternatives_need_optimal(self):
        with pytest.raises(ValidationError):
            Results(
                alternatives=[_projection("b", 20)],
                raw_load_kg_m=1.0,
                raw_area_mm2=1.0,
                requirements=self.REQ,
            )


class TestFactors:
    def test_defaults(self):
        factors = SizingFactors()
        assert factors.weight_safety_factor == 1.2
        assert factors.dimension_safety_factor == 1.1
        assert factors.ladder_height_reduction_mm == 15.0
        assert factors.max_alternatives == 3

    def test_load_factors(self, tmp_path):
        path = tmp_path / "factors.json"
        path.write_text('{"weight_safety_factor": 1.5}')
        factors = load_factors(path)
        assert factors.weight_safety_factor == 1.5
        assert factors.dimension_safety_factor == 1.1

    def test_factor_below_one_rejected(self):
        with pytest.raises(ValidationError):
            SizingFactors(dimension_safety_factor=0.9)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_factors(tmp_path / "missing.json")


class TestProject:
    def test_general_sector_created(self):
        project = Project.create("Planta", "ACME", "Santiago", has_sectors=False)
        assert len(project.sectors) == 1
        general = project.general_sector()
        assert general.name == "General"
        assert general.reserve_percentage == 30
        assert project.sector(general.id) is general

    def test_sectored_project_starts_empty(self):
        project = Project.create("Planta")
        assert project.sectors == []
        with pytest.raises(SectorNotFoundError):
            project.general_sector()

    def test_add_sector_assigns_id(self):
        project = Project.create("Planta").add_sector(Sector(name="Sala"))
        assert project.sectors[0].id

    def test_unknown_sector(self):
        project = Project.create("Planta")
        with pytest.raises(SectorNotFoundError, match="Sector with ID x not found"):
            project.sector("x")

    def test_replace_sector(self):
        project = Project.create("Planta", has_sectors=False)
        general = project.general_sector()
        updated = general.model_copy(update={"cable_groups": [make_group()]})
        project = project.replace_sector(updated)
        assert len(project.general_sector().cable_groups) == 1

    def test_replace_unknown_sector(self):
        project = Project.create("Planta")
        with pytest.raises(SectorNotFoundError):
            project.replace_sector(Sector(id="nope", name="Nope"))
