"""Domain models for mp_settlement — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.mp_listing.domain.models import AssetRef


@dataclass(frozen=True)
class RoyaltyQuote:
    """Oracle answer for (unit, sale amount)."""

    recipient: str
    amount: int


@dataclass(frozen=True)
class FeeSplit:
    """Result of the purchase fee waterfall.

    royalty_amount is 0 and royalty_recipient None when the royalty leg was
    skipped (no oracle support, zero amount, or recipient is the seller).
    app_fee is the application's share after gratitude was carved out.
    """

    payment_amount: int
    royalty_recipient: str | None
    royalty_amount: int
    app_fee: int
    gratitude: int
    seller_profit: int

    @property
    def app_fee_total(self) -> int:
        return self.app_fee + self.gratitude

    @property
    def distributed(self) -> int:
        return self.royalty_amount + self.app_fee + self.gratitude + self.seller_profit


@dataclass
class PurchaseReceipt:
    purchase_id: str
    listing_id: str
    asset: AssetRef
    buyer: str
    quantity: int
    payment_amount: int
    royalty_recipient: str | None
    royalty_amount: int
    application: str
    app_fee: int
    platform_operator: str
    gratitude: int
    seller: str
    seller_profit: int
    executed_at: datetime | None = None
