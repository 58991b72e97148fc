"""Domain models for mp_listing — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AssetRef:
    """One unit of an external asset collection."""

    custodian_id: str   # collection contract address
    unit_id: int        # uint256 token id


@dataclass(frozen=True)
class ListingConfig:
    """Decoded deposit payload; consumed to create or top up a Listing, never stored."""

    seller: str
    application: str
    unit_price: int


@dataclass
class Listing:
    listing_id: str
    asset: AssetRef
    seller: str
    application: str
    unit_price: int = 0
    stock: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class DepositItem:
    unit_id: int
    quantity: int


@dataclass(frozen=True)
class DepositNotification:
    """Inbound notice from the custodian that units entered escrow.

    A single deposit carries one item; a batch carries several items that
    share one config payload and are processed in order.
    """

    custodian_id: str
    operator: str
    source: str
    items: tuple[DepositItem, ...]
    config_data: bytes = field(repr=False)
