"""
Cable Tray Sizing Engine
========================

Planning-level selection of cable-support trays for electrical installations:
- Cable load aggregation with weight safety factor
- Required width/height (single layer) or area (multi layer) with reserve
- Catalog candidate filtering and capacity ranking
- Catalog category normalization
- Result invalidation tied to the sector inputs

Architecture:
- sizing/: Data model, calculators, selection and the sizing orchestrator
- catalog/: Catalog repository contract and pandas-backed implementation
"""

__version__ = "1.0.0"
