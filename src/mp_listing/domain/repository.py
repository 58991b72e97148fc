"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock or in-memory double conforming to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import AssetRef, Listing


class ListingRepositoryProtocol(Protocol):
    async def get_listing(
        self, db: AsyncSession, listing_id: str, for_update: bool = False
    ) -> Listing | None: ...

    async def create_listing_if_absent(self, db: AsyncSession, listing: Listing) -> None: ...

    async def add_stock(
        self, db: AsyncSession, listing_id: str, unit_price: int, quantity: int
    ) -> Listing: ...

    async def decrement_stock(
        self, db: AsyncSession, listing_id: str, quantity: int
    ) -> Listing: ...

    async def get_primary_listing_id(
        self, db: AsyncSession, application: str, asset: AssetRef
    ) -> str | None: ...

    async def set_primary_listing_id(
        self, db: AsyncSession, application: str, asset: AssetRef, listing_id: str
    ) -> None: ...
