"""Persist a single purchase record to the purchases table."""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.datetime_utils import utc_now
from src.mp_settlement.domain.models import PurchaseReceipt

_INSERT_PURCHASE_SQL = text("""
    INSERT INTO purchases (
        purchase_id, listing_id,
        custodian_id, unit_id,
        buyer, quantity, payment_amount,
        royalty_recipient, royalty_amount,
        application, app_fee,
        platform_operator, gratitude,
        seller, seller_profit,
        executed_at
    ) VALUES (
        :purchase_id, :listing_id,
        :custodian_id, :unit_id,
        :buyer, :quantity, :payment_amount,
        :royalty_recipient, :royalty_amount,
        :application, :app_fee,
        :platform_operator, :gratitude,
        :seller, :seller_profit,
        :executed_at
    )
""")


async def write_purchase(receipt: PurchaseReceipt, db: AsyncSession) -> None:
    """Insert one row into the purchases table."""
    await db.execute(
        _INSERT_PURCHASE_SQL,
        {
            "purchase_id": receipt.purchase_id,
            "listing_id": receipt.listing_id,
            "custodian_id": receipt.asset.custodian_id,
            "unit_id": receipt.asset.unit_id,
            "buyer": receipt.buyer,
            "quantity": receipt.quantity,
            "payment_amount": receipt.payment_amount,
            "royalty_recipient": receipt.royalty_recipient,
            "royalty_amount": receipt.royalty_amount,
            "application": receipt.application,
            "app_fee": receipt.app_fee,
            "platform_operator": receipt.platform_operator,
            "gratitude": receipt.gratitude,
            "seller": receipt.seller,
            "seller_profit": receipt.seller_profit,
            "executed_at": receipt.executed_at or utc_now(),
        },
    )
