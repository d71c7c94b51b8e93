"""
Shared test fixtures for the tray sizing engine.
"""
import sys
from pathlib import Path

import pytest

# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from traysizer.catalog import FrameCatalog
from traysizer.sizing.models import (
    Arrangement,
    CableGroup,
    CableSpec,
    InstallationLayout,
    Sector,
    TrayType,
)


def make_cable(diameter=10.0, area=None, weight=0.5, section="4"):
    """CableSpec with a circular external area unless given."""
    if area is None:
        area = 3.141592653589793 * (diameter / 2) ** 2
    return CableSpec(
        nominal_section_mm2=section,
        nominal_section_awg="12",
        external_diameter_mm=diameter,
        external_area_mm2=area,
        weight_per_meter_kg=weight,
    )


def make_group(diameter=10.0, quantity=1, arrangement=Arrangement.SIDE_BY_SIDE, weight=0.5,
               area=None, group_id=None):
    return CableGroup(
        id=group_id,
        cable=make_cable(diameter=diameter, area=area, weight=weight),
        quantity=quantity,
        arrangement=arrangement,
    )


@pytest.fixture
def cable_10mm():
    """10 mm cable, 0.5 kg/m."""
    return make_cable(diameter=10.0, weight=0.5)


@pytest.fixture
def scenario_groups():
    """Three groups of 2 x 10 mm cables at 0.5 kg/m, side by side."""
    return [make_group(quantity=2, group_id=f"g{i}") for i in range(1, 4)]


@pytest.fixture
def bundled_groups():
    """Same cables as scenario_groups, marked bundled."""
    return [
        make_group(quantity=2, arrangement=Arrangement.BUNDLED, group_id=f"g{i}")
        for i in range(1, 4)
    ]


@pytest.fixture
def single_layer_sector(scenario_groups):
    return Sector(
        id="s1",
        name="Sala eléctrica",
        tray_type=TrayType.LADDER,
        reserve_percentage=30,
        installation_layout=InstallationLayout.SINGLE_LAYER,
        cable_groups=scenario_groups,
    )


@pytest.fixture
def multi_layer_sector(scenario_groups):
    return Sector(
        id="s2",
        name="Shaft",
        tray_type=TrayType.LADDER,
        reserve_percentage=30,
        installation_layout=InstallationLayout.MULTI_LAYER,
        cable_groups=scenario_groups,
    )


CATALOG_ROWS = [
    # Ladder trays
    {"id": "L-050-50", "tray_type": "ladder", "category": "liviana", "thickness_mm": 1.5,
     "width_mm": 50, "height_mm": 50, "load_capacity_kg_m": 20},
    {"id": "L-100-50", "tray_type": "ladder", "category": "liviana", "thickness_mm": 1.5,
     "width_mm": 100, "height_mm": 50, "load_capacity_kg_m": 40},
    {"id": "L-150-50", "tray_type": "ladder", "category": "semi pesadas", "thickness_mm": 2.0,
     "width_mm": 150, "height_mm": 50, "load_capacity_kg_m": 60},
    {"id": "L-200-100", "tray_type": "ladder", "category": "pesada", "thickness_mm": 2.5,
     "width_mm": 200, "height_mm": 100, "load_capacity_kg_m": 80},
    {"id": "L-300-100", "tray_type": "ladder", "category": "Super Pesada", "thickness_mm": 3.0,
     "width_mm": 300, "height_mm": 100, "load_capacity_kg_m": 120},
    {"id": "L-600-100", "tray_type": "ladder", "category": "xyz", "thickness_mm": 3.0,
     "width_mm": 600, "height_mm": 100, "load_capacity_kg_m": 150},
    {"id": "L-OLD", "tray_type": "ladder", "category": "liviana", "thickness_mm": 1.5,
     "width_mm": 1000, "height_mm": 150, "load_capacity_kg_m": 10, "is_active": False},
    # Channel trays
    {"id": "C-100-50", "tray_type": "channel", "category": "super liviana", "thickness_mm": 0.9,
     "width_mm": 100, "height_mm": 50, "load_capacity_kg_m": 15},
    {"id": "C-200-50", "tray_type": "channel", "category": "liviana", "thickness_mm": 1.2,
     "width_mm": 200, "height_mm": 50, "load_capacity_kg_m": 30},
]


@pytest.fixture
def catalog():
    return FrameCatalog.from_records(CATALOG_ROWS, name="test-catalog")
