"""RegistryRoyaltyOracle — royalty schedules keyed by custodian.

A custodian without a royalty_schedules row does not support royalty
queries. Rates are basis points of the sale amount, floored. Recipients are
lowercased so they compare equal to listing sellers.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.address import normalize_address
from src.mp_common.rates import apply_bps
from src.mp_listing.domain.models import AssetRef
from src.mp_settlement.domain.models import RoyaltyQuote

_GET_SCHEDULE_SQL = text("""
    SELECT recipient, royalty_bps
    FROM royalty_schedules
    WHERE custodian_id = :custodian_id
""")


class RegistryRoyaltyOracle:
    async def royalty_info(
        self, db: AsyncSession, asset: AssetRef, sale_amount: int
    ) -> RoyaltyQuote | None:
        row = (
            await db.execute(_GET_SCHEDULE_SQL, {"custodian_id": asset.custodian_id})
        ).fetchone()
        if row is None:
            return None
        return RoyaltyQuote(
            recipient=normalize_address(row.recipient),
            amount=apply_bps(sale_amount, row.royalty_bps),
        )
