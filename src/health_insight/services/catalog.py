"""Shared food catalog with at most one row per barcode."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from health_insight.domain.nutrition import FoodProduct, normalize_barcode
from health_insight.services.nutrition import NutritionService, merge_search_results

_logger = logging.getLogger(__name__)


class CatalogConflictError(Exception):
    """Raised when an insert collides with an existing barcode row."""


class CatalogRepository(Protocol):
    """Persistence interface for the shared food catalog."""

    def get_by_barcode(self, barcode: str) -> FoodProduct | None:
        """Return the catalog entry with this exact barcode, if any."""

    def get_by_id(self, product_id: UUID) -> FoodProduct | None:
        """Return a catalog entry by id, if any."""

    def search(self, query: str, limit: int) -> list[FoodProduct]:
        """Return entries whose name contains ``query``."""

    def insert(self, product: FoodProduct) -> FoodProduct:
        """Insert an entry and return the stored row.

        Raises ``CatalogConflictError`` when the barcode is already taken.
        """


@dataclass
class CatalogService:
    """Resolve-or-create access to the food catalog."""

    repository: CatalogRepository

    def resolve_or_create(
        self, product: FoodProduct, owner_id: UUID | None = None
    ) -> FoodProduct:
        """Return the stored entry for a product, inserting it if needed.

        An existing row with the same barcode always wins; a second submission
        never overwrites it.
        """
        barcode = normalize_barcode(product.barcode)
        if barcode is not None:
            existing = self.repository.get_by_barcode(barcode)
            if existing is not None:
                return existing

        candidate = replace(
            product,
            barcode=barcode,
            is_custom=product.is_custom or owner_id is not None,
            user_id=owner_id or product.user_id,
        )
        try:
            return self.repository.insert(candidate)
        except CatalogConflictError:
            if barcode is None:
                raise
            _logger.info("Catalog insert raced on barcode=%s; re-reading", barcode)
            existing = self.repository.get_by_barcode(barcode)
            if existing is None:
                raise
            return existing

    def resolve_for_meal(self, product: FoodProduct, user_id: UUID) -> FoodProduct:
        """Return the catalog row a logged meal item should reference."""
        barcode = normalize_barcode(product.barcode)
        if barcode is not None:
            existing = self.repository.get_by_barcode(barcode)
            if existing is not None:
                return existing
        existing = self.repository.get_by_id(product.id)
        if existing is not None:
            return existing
        owner_id = user_id if product.is_custom else None
        return self.resolve_or_create(product, owner_id=owner_id)

    def get_by_barcode(self, barcode: str) -> FoodProduct | None:
        """Return a catalog entry by barcode; blank barcodes match nothing."""
        normalized = normalize_barcode(barcode)
        if normalized is None:
            return None
        return self.repository.get_by_barcode(normalized)

    def search(self, query: str, limit: int = 10) -> list[FoodProduct]:
        """Search the catalog by name."""
        cleaned = query.strip()
        if not cleaned:
            return []
        return self.repository.search(cleaned, limit)


@dataclass
class FoodLookupService:
    """Combines the remote catalog with the local one."""

    nutrition_service: NutritionService
    catalog_service: CatalogService
    remote_page_size: int = 30
    local_limit: int = 10

    async def search(self, query: str) -> list[FoodProduct]:
        """Search both catalogs and merge once both have answered."""
        if not query.strip():
            return []
        remote, local = await asyncio.gather(
            self.nutrition_service.search(query, page_size=self.remote_page_size),
            asyncio.to_thread(self.catalog_service.search, query, self.local_limit),
        )
        return merge_search_results(local, remote)

    async def lookup_barcode(self, barcode: str) -> FoodProduct | None:
        """Find a product by barcode, remote first, then the local catalog."""
        product = await self.nutrition_service.lookup_barcode(barcode)
        if product is not None:
            try:
                return await asyncio.to_thread(
                    self.catalog_service.resolve_or_create, product
                )
            except Exception:
                _logger.exception("Failed to cache product barcode=%s", barcode)
                return product
        return await asyncio.to_thread(self.catalog_service.get_by_barcode, barcode)
