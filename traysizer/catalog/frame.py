"""
DataFrame Catalog
=================

In-memory tray catalog backed by a pandas DataFrame.

Accepts the column headers used by the manufacturer sheets (Spanish) as well
as the engine's own field names:
- Tipo / type, Categoría / category
- Espesor de plancha (en mm) / thickness
- Alto de bandeja (en mm) / height, Ancho de Bandeja (en mm) / width
- Carga de Servicio (en kg/ml) / loadCapacity

Rows with an unknown tray type or a missing / non-positive dimension or load
capacity are rejected and counted.
"""

import logging
import math
import numbers
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from traysizer.sizing.errors import CatalogError
from traysizer.sizing.models import TrayCandidate, TrayType

from .base import CatalogRepository

logger = logging.getLogger(__name__)

# Canonical column -> accepted header fragments (lower case)
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "_id"),
    "tray_type": ("tray_type", "tipo", "type"),
    "category": ("categoría", "categoria", "category"),
    "thickness_mm": ("thickness_mm", "espesor", "thickness"),
    "height_mm": ("height_mm", "alto", "height"),
    "width_mm": ("width_mm", "ancho", "width"),
    "load_capacity_kg_m": ("load_capacity_kg_m", "carga", "loadcapacity", "load_capacity"),
    "is_active": ("is_active", "isactive", "activo", "active"),
    "code": ("código", "codigo", "code"),
    "name": ("nombre", "name"),
    "material": ("material",),
    "finish": ("acabado", "finish"),
}

REQUIRED_COLUMNS = (
    "tray_type", "category", "thickness_mm", "height_mm", "width_mm", "load_capacity_kg_m",
)
NUMERIC_COLUMNS = ("thickness_mm", "height_mm", "width_mm", "load_capacity_kg_m")
OPTIONAL_TEXT_COLUMNS = ("code", "name", "material", "finish")

# Headers matched only exactly ("id" is a substring of "width")
_EXACT_ONLY = {"id"}

_FALSE_WORDS = {"false", "0", "no", "n", "inactive", "inactivo"}


def resolve_columns(headers: Iterable[Any]) -> Dict[str, str]:
    """
    Map canonical column names to the frame's headers.

    Exact matches are claimed first, then substring matches in alias order.
    Each header is used at most once.
    """
    headers = [str(h) for h in headers]
    lowered = {h: h.strip().lower() for h in headers}
    mapping: Dict[str, str] = {}
    claimed = set()

    for column, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            match = next((h for h in headers if h not in claimed and lowered[h] == alias), None)
            if match is not None:
                mapping[column] = match
                claimed.add(match)
                break

    for column, aliases in COLUMN_ALIASES.items():
        if column in mapping or column in _EXACT_ONLY:
            continue
        for alias in aliases:
            match = next((h for h in headers if h not in claimed and alias in lowered[h]), None)
            if match is not None:
                mapping[column] = match
                claimed.add(match)
                break

    return mapping


def parse_number(value: Any) -> float:
    """Numeric cell to float; NaN when blank or unparseable. Accepts decimal commas and units."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, numbers.Real):
        return float(value)
    cleaned = re.sub(r"[^\d.,]", "", str(value)).replace(",", ".", 1)
    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def parse_active(value: Any) -> bool:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_WORDS
    return bool(value)


def parse_tray_type(value: Any) -> Optional[str]:
    try:
        return TrayType(str(value).strip().lower()).value
    except ValueError:
        return None


def normalize_catalog_frame(raw: pd.DataFrame) -> Tuple[pd.DataFrame, int]:
    """
    Rename, clean and validate a raw catalog frame.

    Returns:
        (clean frame with canonical columns, number of rejected rows)
    """
    mapping = resolve_columns(raw.columns)
    missing = [c for c in REQUIRED_COLUMNS if c not in mapping]
    if missing:
        raise CatalogError(f"Catalog is missing required columns: {', '.join(missing)}")

    frame = pd.DataFrame(index=raw.index)
    for column, header in mapping.items():
        frame[column] = raw[header]

    for column in NUMERIC_COLUMNS:
        frame[column] = frame[column].map(parse_number).astype(float)
    frame["tray_type"] = frame["tray_type"].map(parse_tray_type)
    frame["category"] = frame["category"].fillna("").astype(str).str.strip()
    if "is_active" in frame:
        frame["is_active"] = frame["is_active"].map(parse_active).astype(bool)
    else:
        frame["is_active"] = True
    if "id" in frame:
        frame["id"] = frame["id"].astype(str)
    else:
        frame["id"] = [f"tray-{i + 1}" for i in range(len(frame))]

    valid = frame["tray_type"].notna()
    for column in NUMERIC_COLUMNS:
        valid &= frame[column] > 0

    rejected = int((~valid).sum())
    return frame[valid].reset_index(drop=True), rejected


def _row_to_candidate(row: Mapping[str, Any]) -> TrayCandidate:
    data = {}
    for key, value in row.items():
        if value is None or (isinstance(value, float) and math.isnan(value)):
            continue
        if key in OPTIONAL_TEXT_COLUMNS:
            value = str(value)
        data[key] = value
    return TrayCandidate.model_validate(data)


class FrameCatalog(CatalogRepository):
    """
    Tray catalog held in a pandas DataFrame.

    Queries are vectorized boolean masks over the clean frame; results keep
    catalog order.
    """

    def __init__(self, frame: pd.DataFrame, name: str = "in-memory"):
        """
        Initialize from a raw catalog frame.

        Args:
            frame: Catalog rows with manufacturer or canonical headers
            name: Catalog identifier used in logs
        """
        self._name = name
        self._frame, self.rejected_rows = normalize_catalog_frame(frame)
        logger.info(
            "Loaded catalog %s: %d trays (%d rejected rows)",
            name, len(self._frame), self.rejected_rows,
        )

    @classmethod
    def from_records(
        cls,
        records: Iterable[Union[Mapping[str, Any], TrayCandidate]],
        name: str = "in-memory",
    ) -> "FrameCatalog":
        rows = [
            r.model_dump(mode="json") if isinstance(r, TrayCandidate) else dict(r)
            for r in records
        ]
        columns = list(COLUMN_ALIASES) if not rows else None
        return cls(pd.DataFrame(rows, columns=columns), name=name)

    @classmethod
    def from_csv(cls, path: Union[str, Path], **read_csv_kwargs) -> "FrameCatalog":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Catalog CSV not found: {path}")
        return cls(pd.read_csv(p, **read_csv_kwargs), name=p.name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def frame(self) -> pd.DataFrame:
        """Copy of the clean catalog frame."""
        return self._frame.copy()

    def query(
        self,
        tray_type: TrayType,
        min_load_capacity: float,
        min_width: Optional[float] = None,
        min_height: Optional[float] = None,
    ) -> List[TrayCandidate]:
        df = self._frame
        mask = (
            (df["tray_type"] == TrayType(tray_type).value)
            & df["is_active"]
            & (df["load_capacity_kg_m"] >= min_load_capacity)
        )
        if min_width is not None:
            mask &= df["width_mm"] >= min_width
        if min_height is not None:
            mask &= df["height_mm"] >= min_height

        matches = df[mask]
        logger.debug(
            "Catalog %s query type=%s load>=%.3f width>=%s height>=%s: %d trays",
            self._name, TrayType(tray_type).value, min_load_capacity, min_width, min_height, len(matches),
        )
        return [_row_to_candidate(row) for row in matches.to_dict("records")]

    def active_candidates(self) -> List[TrayCandidate]:
        active = self._frame[self._frame["is_active"]]
        return [_row_to_candidate(row) for row in active.to_dict("records")]


# Factory function for building catalogs from common sources
def get_catalog(source: Any) -> CatalogRepository:
    """
    Build a catalog repository from a repository, DataFrame, CSV path or records.

    Args:
        source: CatalogRepository, pandas DataFrame, path to a CSV file, or an
            iterable of dicts / TrayCandidate

    Returns:
        CatalogRepository instance
    """
    if isinstance(source, CatalogRepository):
        return source
    if isinstance(source, pd.DataFrame):
        return FrameCatalog(source)
    if isinstance(source, (str, Path)):
        return FrameCatalog.from_csv(source)
    return FrameCatalog.from_records(source)
