"""Custody collaborator boundary.

The custodian holds listed units in escrow. The engine only ever asks it to
release units; inbound deposits are recorded when their notification is
accepted. Both calls run inside the caller's transaction and raise
CustodyTransferError on refusal, which aborts the enclosing operation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import AssetRef


class CustodyProtocol(Protocol):
    async def record_inbound(
        self, db: AsyncSession, asset: AssetRef, quantity: int
    ) -> None: ...

    async def release(
        self, db: AsyncSession, asset: AssetRef, to: str, quantity: int
    ) -> None: ...
