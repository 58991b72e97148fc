"""EscrowCustody — table-backed custody adapter.

asset_holdings keeps a per-holder unit count for each (custodian, unit).
The escrow holder is settings.ESCROW_ADDRESS. Every movement also appends a
custody_movements row for audit.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_common.address import normalize_address
from src.mp_common.enums import CustodyMovement
from src.mp_common.errors import CustodyTransferError
from src.mp_listing.domain.models import AssetRef

logger = logging.getLogger(__name__)

_CREDIT_HOLDING_SQL = text("""
    INSERT INTO asset_holdings (holder, custodian_id, unit_id, quantity)
    VALUES (:holder, :custodian_id, :unit_id, :quantity)
    ON CONFLICT (holder, custodian_id, unit_id) DO UPDATE
        SET quantity = asset_holdings.quantity + EXCLUDED.quantity,
            updated_at = NOW()
""")

_DEBIT_HOLDING_SQL = text("""
    UPDATE asset_holdings
    SET quantity = quantity - :quantity,
        updated_at = NOW()
    WHERE holder = :holder
      AND custodian_id = :custodian_id
      AND unit_id = :unit_id
      AND quantity >= :quantity
    RETURNING quantity
""")

_INSERT_MOVEMENT_SQL = text("""
    INSERT INTO custody_movements
        (movement, custodian_id, unit_id, from_holder, to_holder, quantity)
    VALUES
        (:movement, :custodian_id, :unit_id, :from_holder, :to_holder, :quantity)
""")


class EscrowCustody:
    def __init__(self, escrow_address: str | None = None) -> None:
        self._escrow = normalize_address(escrow_address or settings.ESCROW_ADDRESS)

    async def record_inbound(
        self, db: AsyncSession, asset: AssetRef, quantity: int
    ) -> None:
        await self._credit(db, self._escrow, asset, quantity)
        await self._log_movement(db, CustodyMovement.INBOUND, asset, None, self._escrow, quantity)

    async def release(
        self, db: AsyncSession, asset: AssetRef, to: str, quantity: int
    ) -> None:
        result = await db.execute(
            _DEBIT_HOLDING_SQL,
            {
                "holder": self._escrow,
                "custodian_id": asset.custodian_id,
                "unit_id": asset.unit_id,
                "quantity": quantity,
            },
        )
        if result.fetchone() is None:
            raise CustodyTransferError(
                f"escrow holds fewer than {quantity} of {asset.custodian_id}#{asset.unit_id}"
            )
        await self._credit(db, to, asset, quantity)
        await self._log_movement(db, CustodyMovement.RELEASE, asset, self._escrow, to, quantity)
        logger.info(
            "Custody release: %s#%d x%d -> %s", asset.custodian_id, asset.unit_id, quantity, to
        )

    async def _credit(
        self, db: AsyncSession, holder: str, asset: AssetRef, quantity: int
    ) -> None:
        await db.execute(
            _CREDIT_HOLDING_SQL,
            {
                "holder": holder,
                "custodian_id": asset.custodian_id,
                "unit_id": asset.unit_id,
                "quantity": quantity,
            },
        )

    async def _log_movement(
        self,
        db: AsyncSession,
        movement: CustodyMovement,
        asset: AssetRef,
        from_holder: str | None,
        to_holder: str,
        quantity: int,
    ) -> None:
        await db.execute(
            _INSERT_MOVEMENT_SQL,
            {
                "movement": movement.value,
                "custodian_id": asset.custodian_id,
                "unit_id": asset.unit_id,
                "from_holder": from_holder,
                "to_holder": to_holder,
                "quantity": quantity,
            },
        )
