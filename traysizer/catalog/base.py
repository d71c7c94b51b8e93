"""
Catalog Repository
==================

Abstract interface for the tray catalog consulted by the sizing engine.
Implementations return active trays only; timeout and retry policy belong to
the implementation, the engine never retries.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from traysizer.sizing.models import TrayCandidate, TrayType


class CatalogRepository(ABC):
    """
    Abstract base class for tray catalogs.

    Each catalog must implement:
    - Candidate query by type, minimum load capacity and optional minimum
      width / height
    - Listing of every active tray
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Catalog identifier (e.g. source file name)"""
        pass

    @abstractmethod
    def query(
        self,
        tray_type: TrayType,
        min_load_capacity: float,
        min_width: Optional[float] = None,
        min_height: Optional[float] = None,
    ) -> List[TrayCandidate]:
        """
        Active trays of the given type meeting every supplied lower bound.

        Args:
            tray_type: Ladder or channel
            min_load_capacity: Minimum load capacity (kg/m)
            min_width: Minimum width (mm), ignored when None
            min_height: Minimum height (mm), ignored when None

        Returns:
            Matching catalog entries, in catalog order
        """
        pass

    @abstractmethod
    def active_candidates(self) -> List[TrayCandidate]:
        """Every active tray in the catalog"""
        pass

    def __len__(self) -> int:
        return len(self.active_candidates())
