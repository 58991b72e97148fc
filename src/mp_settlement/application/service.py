"""SettlementApplicationService — owns the purchase transaction.

The engine runs the whole pipeline inside the session; this layer commits
on success and rolls back on any error, so a purchase is all-or-nothing.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_settlement.application.schemas import PurchaseResponse
from src.mp_settlement.engine.engine import SettlementEngine


class SettlementApplicationService:
    def __init__(self, engine: SettlementEngine | None = None) -> None:
        self._engine = engine or SettlementEngine()

    async def purchase(
        self,
        db: AsyncSession,
        buyer: str,
        listing_id: str,
        quantity: int,
        payment_amount: int,
    ) -> PurchaseResponse:
        try:
            receipt = await self._engine.purchase(
                db, buyer, listing_id, quantity, payment_amount
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return PurchaseResponse.from_receipt(receipt)
