from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .models import CanonicalCategory

logger = logging.getLogger(__name__)

C = CanonicalCategory

# Catalog label (lower case, trimmed) -> canonical category
CATEGORY_SYNONYMS: Dict[str, CanonicalCategory] = {
    # Spanish catalog labels, including variants found in imported sheets
    "super liviana": C.SUPER_LIGHT,
    "superliviana": C.SUPER_LIGHT,
    "super-liviana": C.SUPER_LIGHT,
    "liviana": C.LIGHT,
    "semi-pesada": C.SEMI_HEAVY,
    "semi pesada": C.SEMI_HEAVY,
    "semi pesadas": C.SEMI_HEAVY,
    "semipesada": C.SEMI_HEAVY,
    "pesada": C.HEAVY,
    "super pesada": C.SUPER_HEAVY,
    "superpesada": C.SUPER_HEAVY,
    "super-pesada": C.SUPER_HEAVY,
    # English labels
    "super light": C.SUPER_LIGHT,
    "super-light": C.SUPER_LIGHT,
    "superlight": C.SUPER_LIGHT,
    "light": C.LIGHT,
    "semi heavy": C.SEMI_HEAVY,
    "semi-heavy": C.SEMI_HEAVY,
    "semiheavy": C.SEMI_HEAVY,
    "heavy": C.HEAVY,
    "super heavy": C.SUPER_HEAVY,
    "super-heavy": C.SUPER_HEAVY,
    "superheavy": C.SUPER_HEAVY,
}

DEFAULT_CATEGORY = C.LIGHT

# Longest keys first so "super pesada" wins over "pesada" on partial matches
_PARTIAL_KEYS = sorted(CATEGORY_SYNONYMS, key=len, reverse=True)


@dataclass(frozen=True)
class CategoryMatch:
    label: str
    category: CanonicalCategory
    match: str  # "exact" | "partial" | "unmapped"
    key: Optional[str] = None

    @property
    def mapped(self) -> bool:
        return self.match != "unmapped"


def resolve_category(raw_label: Optional[str]) -> CategoryMatch:
    """
    Map a free-text catalog category to the canonical enumeration.

    Lookup order: exact synonym, then substring match in either direction,
    then the default (light). Unmapped labels keep the default for ranking but
    are reported as such so callers can surface them.
    """
    label = raw_label or ""
    normalized = label.strip().lower()

    if normalized in CATEGORY_SYNONYMS:
        return CategoryMatch(label, CATEGORY_SYNONYMS[normalized], "exact", normalized)

    if normalized:
        for key in _PARTIAL_KEYS:
            if key in normalized or normalized in key:
                logger.debug("Partial category match: %r -> %r", label, key)
                return CategoryMatch(label, CATEGORY_SYNONYMS[key], "partial", key)

    logger.warning("Unmapped tray category %r, using %s", label, DEFAULT_CATEGORY.value)
    return CategoryMatch(label, DEFAULT_CATEGORY, "unmapped")


def normalize_category(raw_label: Optional[str]) -> CanonicalCategory:
    return resolve_category(raw_label).category
