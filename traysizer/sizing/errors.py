"""
Sizing Errors
=============

Exceptions raised by the sizing engine and the sector mutation helpers.
A missing suitable tray is not an error: it is reported as Results with no
optimal tray.
"""


class TraySizingError(Exception):
    """Base class for all engine errors."""


class SectorValidationError(TraySizingError, ValueError):
    """Sector cannot be sized (no cables, reserve out of range)."""


class SectorNotFoundError(TraySizingError, KeyError):
    """Sector id is not part of the project."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class CableGroupNotFoundError(TraySizingError, KeyError):
    """Cable group id is not part of the sector."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class StaleResultsError(TraySizingError):
    """Results were computed from an older version of the sector."""


class CatalogError(TraySizingError):
    """Catalog source could not be loaded."""
