"""Outbound collaborator boundaries used during settlement.

Royalty oracle: read-only. Returning None means the custodian does not
support royalty queries, which is a valid answer (no royalty leg).

Payment rail: moves value. `collect` takes the buyer's payment, `pay`
credits one payee. Any refusal raises PaymentTransferError and aborts the
whole purchase; both run inside the caller's transaction.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.enums import PayoutKind
from src.mp_listing.domain.models import AssetRef
from src.mp_settlement.domain.models import RoyaltyQuote


class RoyaltyOracleProtocol(Protocol):
    async def royalty_info(
        self, db: AsyncSession, asset: AssetRef, sale_amount: int
    ) -> RoyaltyQuote | None: ...


class PaymentRailProtocol(Protocol):
    async def collect(
        self, db: AsyncSession, payer: str, amount: int, reference_id: str
    ) -> None: ...

    async def pay(
        self,
        db: AsyncSession,
        payee: str,
        amount: int,
        kind: PayoutKind,
        reference_id: str,
    ) -> None: ...
