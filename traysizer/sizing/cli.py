from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from traysizer.catalog import FrameCatalog
from traysizer.logging_config import setup_logging

from .errors import CatalogError, SectorValidationError
from .models import Sector, SizingFactors, load_factors
from .sizer import TraySizer


def load_sector(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Sector JSON not found: {path}")
    return json.loads(p.read_text())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Cable tray selection for one sector (optimal tray and alternatives)."
    )
    parser.add_argument(
        "--sector",
        "-s",
        required=True,
        help="Path to the sector JSON (tray type, reserve, layout, cable groups).",
    )
    parser.add_argument(
        "--catalog",
        "-c",
        required=True,
        help="Path to the tray catalog CSV.",
    )
    parser.add_argument(
        "--factors",
        help="Optional JSON overriding the safety factors.",
    )
    parser.add_argument(
        "--output",
        "-o",
        default="tray_results.json",
        help="Path to write the results JSON.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging.",
    )
    parser.add_argument(
        "--log-file",
        help="Optional path to also write the log to.",
    )

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        sector = Sector.model_validate(load_sector(args.sector))
        factors = load_factors(args.factors) if args.factors else SizingFactors()
        catalog = FrameCatalog.from_csv(args.catalog)
    except (FileNotFoundError, json.JSONDecodeError, CatalogError) as e:
        print(f"Input error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print("Input validation error:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    try:
        results = TraySizer(catalog, factors).compute(sector)
    except SectorValidationError as e:
        print(f"Sector error: {e}", file=sys.stderr)
        return 2

    Path(args.output).write_text(results.model_dump_json(indent=2))

    req = results.requirements
    print(f"Sector: {sector.name} ({sector.tray_type.value}, {sector.installation_layout.value}, "
          f"reserve {sector.reserve_percentage:.0f}%)")
    print(f"Cable load: {results.raw_load_kg_m:.2f} kg/m (filtered at {req.load_kg_m:.2f} kg/m)")
    print(f"Cable area: {results.raw_area_mm2:.1f} mm²")
    if req.area_mm2 is not None:
        print(f"Required usable area: {req.area_mm2:.1f} mm²")
    else:
        print(f"Required width x height: {req.width_mm:.1f} x {req.height_mm:.1f} mm ({req.arrangement.value})")

    if results.optimal is not None:
        t = results.optimal.technical_details
        print(f"Optimal tray: {results.optimal.id} [{results.optimal.category.value}] "
              f"{t.width_mm:.0f} x {t.height_mm:.0f} mm, {t.load_resistance_kg_m:.1f} kg/m")
        for alt in results.alternatives:
            a = alt.technical_details
            print(f"  alternative: {alt.id} [{alt.category.value}] "
                  f"{a.width_mm:.0f} x {a.height_mm:.0f} mm, {a.load_resistance_kg_m:.1f} kg/m")
    else:
        print("No suitable tray found.")

    if results.warnings:
        print("\nWarnings:", file=sys.stderr)
        for w in results.warnings:
            print(f"- {w}", file=sys.stderr)

    return 0 if results.found else 1


if __name__ == "__main__":
    raise SystemExit(main())
