"""Pydantic schemas for mp_settlement API requests and responses."""

from pydantic import BaseModel, Field

from src.mp_common.datetime_utils import to_iso
from src.mp_common.rates import units_to_display
from src.mp_settlement.domain.models import PurchaseReceipt


class PurchaseRequest(BaseModel):
    quantity: int
    payment_amount: int = Field(..., ge=0, description="Must equal unit_price * quantity exactly")


class PurchaseResponse(BaseModel):
    purchase_id: str
    listing_id: str
    custodian_id: str
    unit_id: int
    buyer: str
    quantity: int
    payment_amount: int
    payment_display: str
    royalty_recipient: str | None
    royalty_amount: int
    application: str
    app_fee: int
    platform_operator: str
    gratitude: int
    seller: str
    seller_profit: int
    seller_profit_display: str
    executed_at: str

    @classmethod
    def from_receipt(cls, receipt: PurchaseReceipt) -> "PurchaseResponse":
        return cls(
            purchase_id=receipt.purchase_id,
            listing_id=receipt.listing_id,
            custodian_id=receipt.asset.custodian_id,
            unit_id=receipt.asset.unit_id,
            buyer=receipt.buyer,
            quantity=receipt.quantity,
            payment_amount=receipt.payment_amount,
            payment_display=units_to_display(receipt.payment_amount),
            royalty_recipient=receipt.royalty_recipient,
            royalty_amount=receipt.royalty_amount,
            application=receipt.application,
            app_fee=receipt.app_fee,
            platform_operator=receipt.platform_operator,
            gratitude=receipt.gratitude,
            seller=receipt.seller,
            seller_profit=receipt.seller_profit,
            seller_profit_display=units_to_display(receipt.seller_profit),
            executed_at=to_iso(receipt.executed_at),
        )
