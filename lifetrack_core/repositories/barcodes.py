# =============================================================================
# lifetrack_core/repositories/barcodes.py
# Supplement Barcode Repository
# =============================================================================
"""
Scanned barcode lookups, keyed by the barcode value rather than the record id.

A barcode nobody has saved yet resolves to a placeholder record so the scan
screen always has something to show and edit.
"""

from __future__ import annotations
import dataclasses
from typing import List, Optional

from lifetrack_core.domain.entities import SupplementBarcode
from lifetrack_core.domain.patches import SupplementBarcodePatch
from lifetrack_core.domain.query import Query
from lifetrack_core.errors import DataValidationError
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.repositories.supplements import SupplementRepository
from lifetrack_core.services.base_service import ServiceResult


class BarcodeRepository(SyncingRepository[SupplementBarcode]):
    """Community database of supplement barcodes."""

    ENTITY = SupplementBarcode

    supplement_repository: Optional[SupplementRepository] = None

    def set_supplement_repository(self, repository: SupplementRepository) -> None:
        """Enables the ``exists`` flag on lookups."""
        self.supplement_repository = repository

    def find_barcode(self, barcode: str) -> Optional[SupplementBarcode]:
        """Stored record for a barcode, or None."""
        matches = self.read(Query().where("barcode", barcode)).data or []
        return matches[0] if matches else None

    def lookup_barcode(self, barcode: str) -> SupplementBarcode:
        """
        Resolve a scanned barcode.

        Returns:
            The stored record with ``exists`` set when a supplement of the
            same name is already tracked, or a placeholder when unknown
        """
        found = self.find_barcode(barcode)
        if found is None:
            self.logger.debug(f"Barcode {barcode} not found, using placeholder")
            return SupplementBarcode.placeholder(barcode)

        found.exists = self._supplement_exists(found.name)
        return found

    def save_barcode_info(self, info: SupplementBarcode) -> ServiceResult:
        """
        Store product information for a barcode, updating the existing record
        for that barcode when there is one.
        """
        if not info.barcode:
            return ServiceResult.from_exception(
                DataValidationError("A barcode is required", field="barcode")
            )

        existing = self.find_barcode(info.barcode)
        if existing is None:
            self.logger.info(f"Saving new barcode {info.barcode}")
            return self.create(dataclasses.replace(info, id=None, exists=False))

        patch = SupplementBarcodePatch(
            **{name: getattr(info, name) for name in SupplementBarcodePatch.FIELD_TYPES}
        )
        self.logger.info(f"Updating barcode {info.barcode}")
        return self.update(existing.id, patch)

    def get_all_barcodes(self) -> List[SupplementBarcode]:
        return self.read(Query().order("barcode")).data or []

    def delete_barcode(self, barcode: str) -> bool:
        existing = self.find_barcode(barcode)
        if existing is None:
            self.logger.debug(f"Barcode {barcode} not found for deletion")
            return False
        return bool(self.delete(existing.id))

    def _supplement_exists(self, name: str) -> bool:
        if self.supplement_repository is None:
            return False
        return any(s.name == name for s in self.supplement_repository.get_supplements())
