"""
Sizing engine.

This package selects the cable tray for a sector: it aggregates the cable
load, derives the required cross-section for the installation layout, filters
catalog trays against those requirements and ranks them by load capacity.
"""

from .categories import normalize_category, resolve_category
from .errors import SectorValidationError, StaleResultsError, TraySizingError
from .geometry import classify_arrangement
from .models import (
    Arrangement,
    CableGroup,
    CableSpec,
    CanonicalCategory,
    InstallationLayout,
    Project,
    Results,
    Sector,
    SizingFactors,
    TrayCandidate,
    TrayProjection,
    TrayType,
)
from .sizer import TraySizer, compute_optimal_tray
