"""SettlementEngine — staged purchase pipeline.

    validate -> collect payment -> decrement stock -> quote royalty
    -> compute split -> disburse -> release custody -> record

Stock is final and every value transfer has been made before custody is
asked to release units, since custody is the one collaborator that may run
receiver hooks outside this service. The engine never commits; the caller
owns the transaction and rolls it back on any error.
"""

import asyncio
import logging
import uuid
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_app.domain.eligibility import check_app_eligible
from src.mp_app.domain.repository import AppRepositoryProtocol
from src.mp_app.infrastructure.persistence import AppRepository
from src.mp_common.address import normalize_address
from src.mp_common.datetime_utils import utc_now
from src.mp_common.enums import PayoutKind
from src.mp_common.errors import (
    AmountMustBePositiveError,
    InsufficientStockError,
    InvalidValueError,
    ListingNotFoundError,
)
from src.mp_custody.domain.protocol import CustodyProtocol
from src.mp_custody.infrastructure.escrow import EscrowCustody
from src.mp_listing.domain.models import Listing
from src.mp_listing.domain.repository import ListingRepositoryProtocol
from src.mp_listing.infrastructure.persistence import ListingRepository
from src.mp_settlement.domain.collaborators import PaymentRailProtocol, RoyaltyOracleProtocol
from src.mp_settlement.domain.models import FeeSplit, PurchaseReceipt
from src.mp_settlement.domain.waterfall import compute_fee_split, verify_conservation
from src.mp_settlement.infrastructure.payments import LedgerPaymentRail
from src.mp_settlement.infrastructure.purchases_writer import write_purchase
from src.mp_settlement.infrastructure.royalty import RegistryRoyaltyOracle

logger = logging.getLogger(__name__)


class SettlementEngine:
    def __init__(
        self,
        listing_repo: ListingRepositoryProtocol | None = None,
        app_repo: AppRepositoryProtocol | None = None,
        custody: CustodyProtocol | None = None,
        royalty_oracle: RoyaltyOracleProtocol | None = None,
        payments: PaymentRailProtocol | None = None,
        platform_operator: str | None = None,
    ) -> None:
        self._listing_repo: ListingRepositoryProtocol = listing_repo or ListingRepository()
        self._app_repo: AppRepositoryProtocol = app_repo or AppRepository()
        self._custody: CustodyProtocol = custody or EscrowCustody()
        self._royalty_oracle: RoyaltyOracleProtocol = royalty_oracle or RegistryRoyaltyOracle()
        self._payments: PaymentRailProtocol = payments or LedgerPaymentRail()
        self._platform_operator = normalize_address(
            platform_operator or settings.PLATFORM_OPERATOR_ADDRESS
        )
        # Entries live only while a purchase holds or waits on the listing
        self._listing_locks: dict[str, asyncio.Lock] = {}
        self._lock_holders: Counter[str] = Counter()

    async def purchase(
        self,
        db: AsyncSession,
        buyer: str,
        listing_id: str,
        quantity: int,
        payment_amount: int,
    ) -> PurchaseReceipt:
        """Main entry point. Returns the purchase record written for the sale."""
        buyer = normalize_address(buyer)
        async with self._listing_lock(listing_id):
            listing = await self._validate(db, listing_id, quantity, payment_amount)
            purchase_id = uuid.uuid4().hex

            await self._payments.collect(db, buyer, payment_amount, purchase_id)
            listing = await self._listing_repo.decrement_stock(db, listing_id, quantity)

            split = await self._compute_split(db, listing, payment_amount)
            await self._disburse(db, listing, split, purchase_id)

            await self._custody.release(db, listing.asset, buyer, quantity)

            receipt = PurchaseReceipt(
                purchase_id=purchase_id,
                listing_id=listing_id,
                asset=listing.asset,
                buyer=buyer,
                quantity=quantity,
                payment_amount=payment_amount,
                royalty_recipient=split.royalty_recipient,
                royalty_amount=split.royalty_amount,
                application=listing.application,
                app_fee=split.app_fee,
                platform_operator=self._platform_operator,
                gratitude=split.gratitude,
                seller=listing.seller,
                seller_profit=split.seller_profit,
                executed_at=utc_now(),
            )
            await write_purchase(receipt, db)

        logger.info(
            "Purchase: listing=%s buyer=%s qty=%d paid=%d royalty=%d app_fee=%d "
            "gratitude=%d seller=%d stock_left=%d",
            listing_id, buyer, quantity, payment_amount, split.royalty_amount,
            split.app_fee, split.gratitude, split.seller_profit, listing.stock,
        )
        return receipt

    @asynccontextmanager
    async def _listing_lock(self, listing_id: str) -> AsyncIterator[None]:
        lock = self._listing_locks.setdefault(listing_id, asyncio.Lock())
        self._lock_holders[listing_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[listing_id] -= 1
            if self._lock_holders[listing_id] == 0:
                del self._lock_holders[listing_id]
                del self._listing_locks[listing_id]

    async def _validate(
        self, db: AsyncSession, listing_id: str, quantity: int, payment_amount: int
    ) -> Listing:
        listing = await self._listing_repo.get_listing(db, listing_id, for_update=True)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        app_config = await self._app_repo.get_app_config(db, listing.application)
        check_app_eligible(app_config)

        if quantity <= 0:
            raise AmountMustBePositiveError()
        if listing.stock < quantity:
            raise InsufficientStockError(quantity, listing.stock)

        expected = listing.unit_price * quantity
        if payment_amount != expected:
            raise InvalidValueError(expected, payment_amount)
        return listing

    async def _compute_split(
        self, db: AsyncSession, listing: Listing, payment_amount: int
    ) -> FeeSplit:
        # Rates are read after the stock decrement, inside the same transaction
        app_config = await self._app_repo.get_app_config(db, listing.application)
        royalty = await self._royalty_oracle.royalty_info(db, listing.asset, payment_amount)
        split = compute_fee_split(
            payment_amount,
            listing.seller,
            app_config.fee_rate,
            app_config.gratitude_rate,
            royalty,
        )
        verify_conservation(split)
        return split

    async def _disburse(
        self, db: AsyncSession, listing: Listing, split: FeeSplit, purchase_id: str
    ) -> None:
        """Pay each non-zero leg in waterfall order: royalty, gratitude, app, seller."""
        legs: list[tuple[str | None, int, PayoutKind]] = [
            (split.royalty_recipient, split.royalty_amount, PayoutKind.ROYALTY),
            (self._platform_operator, split.gratitude, PayoutKind.GRATITUDE),
            (listing.application, split.app_fee, PayoutKind.APP_FEE),
            (listing.seller, split.seller_profit, PayoutKind.SELLER_PROCEEDS),
        ]
        for payee, amount, kind in legs:
            if payee is None or amount == 0:
                continue
            await self._payments.pay(db, payee, amount, kind, purchase_id)
