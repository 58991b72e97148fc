"""ListingApplicationService — listing identity, deposits and withdrawals.

Each mutating method is one transaction: `commit` on success, `rollback`
and re-raise on any error, so a failed precondition anywhere in a batch
leaves no listing, primary-index or escrow change behind.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_app.domain.eligibility import check_app_eligible
from src.mp_app.domain.repository import AppRepositoryProtocol
from src.mp_app.infrastructure.persistence import AppRepository
from src.mp_common.address import normalize_address
from src.mp_common.errors import (
    AmountMustBePositiveError,
    InsufficientStockError,
    InternalError,
    ListingNotFoundError,
    NotListingSellerError,
)
from src.mp_custody.domain.protocol import CustodyProtocol
from src.mp_custody.infrastructure.escrow import EscrowCustody
from src.mp_listing.application.schemas import (
    DepositResponse,
    ListingIdentityResponse,
    ListingResponse,
    PrimaryListingResponse,
    WithdrawResponse,
)
from src.mp_listing.domain.config_codec import decode_listing_config
from src.mp_listing.domain.deposit_rules import (
    check_primary_gate,
    check_quantity_positive,
    check_seller_identity,
)
from src.mp_listing.domain.identity import compute_listing_id
from src.mp_listing.domain.models import AssetRef, DepositNotification, Listing
from src.mp_listing.domain.repository import ListingRepositoryProtocol
from src.mp_listing.infrastructure.persistence import ListingRepository

logger = logging.getLogger(__name__)


class ListingApplicationService:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        app_repo: AppRepositoryProtocol | None = None,
        custody: CustodyProtocol | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._app_repo: AppRepositoryProtocol = app_repo or AppRepository()
        self._custody: CustodyProtocol = custody or EscrowCustody()

    async def resolve_or_create(
        self, db: AsyncSession, asset: AssetRef, seller: str, application: str
    ) -> Listing:
        """Return the listing for the 4-tuple, creating a zero-stock one if absent."""
        listing_id = compute_listing_id(asset, seller, application)
        await self._repo.create_listing_if_absent(
            db,
            Listing(listing_id=listing_id, asset=asset, seller=seller, application=application),
        )
        listing = await self._repo.get_listing(db, listing_id, for_update=True)
        if listing is None:
            raise InternalError(f"Listing {listing_id} missing right after insert")
        return listing

    async def deposit(
        self,
        db: AsyncSession,
        asset: AssetRef,
        seller: str,
        application: str,
        unit_price: int,
        quantity: int,
    ) -> DepositResponse:
        """Create or replenish one listing."""
        asset = AssetRef(normalize_address(asset.custodian_id), asset.unit_id)
        try:
            listing = await self._deposit(
                db,
                asset,
                normalize_address(seller),
                normalize_address(application),
                unit_price,
                quantity,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return DepositResponse(listings=[ListingResponse.from_domain(listing)])

    async def handle_deposit_notification(
        self, db: AsyncSession, notification: DepositNotification
    ) -> DepositResponse:
        """Process a single or batch deposit from the custodian, all-or-nothing."""
        custodian = normalize_address(notification.custodian_id)
        try:
            config = decode_listing_config(notification.config_data)
            check_seller_identity(
                config.seller,
                normalize_address(notification.operator),
                normalize_address(notification.source),
            )
            listings: list[Listing] = []
            for item in notification.items:
                asset = AssetRef(custodian_id=custodian, unit_id=item.unit_id)
                listing = await self._deposit(
                    db, asset, config.seller, config.application, config.unit_price, item.quantity
                )
                await self._custody.record_inbound(db, asset, item.quantity)
                listings.append(listing)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return DepositResponse(listings=[ListingResponse.from_domain(x) for x in listings])

    async def _deposit(
        self,
        db: AsyncSession,
        asset: AssetRef,
        seller: str,
        application: str,
        unit_price: int,
        quantity: int,
    ) -> Listing:
        app_config = await self._app_repo.get_app_config(db, application)
        check_app_eligible(app_config)
        check_quantity_positive(quantity)

        is_primary = await check_primary_gate(
            db, self._app_repo, self._repo, app_config, asset, seller
        )
        if is_primary:
            await self._repo.set_primary_listing_id(
                db, application, asset, compute_listing_id(asset, seller, application)
            )

        listing = await self.resolve_or_create(db, asset, seller, application)
        listing = await self._repo.add_stock(db, listing.listing_id, unit_price, quantity)
        logger.info(
            "Deposit: listing=%s seller=%s app=%s qty=%d price=%d stock=%d primary=%s",
            listing.listing_id, seller, application, quantity, unit_price, listing.stock,
            is_primary,
        )
        return listing

    async def withdraw(
        self,
        db: AsyncSession,
        caller: str,
        listing_id: str,
        to: str,
        quantity: int,
    ) -> WithdrawResponse:
        """Return unsold units to the seller's chosen address.

        Not gated on the application: sellers can always reclaim inventory.
        """
        recipient = normalize_address(to)
        try:
            listing = await self._repo.get_listing(db, listing_id, for_update=True)
            if listing is None:
                raise ListingNotFoundError(listing_id)
            if normalize_address(caller) != listing.seller:
                raise NotListingSellerError(listing_id)
            if quantity <= 0:
                raise AmountMustBePositiveError()
            if quantity > listing.stock:
                raise InsufficientStockError(quantity, listing.stock)

            listing = await self._repo.decrement_stock(db, listing_id, quantity)
            await self._custody.release(db, listing.asset, recipient, quantity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Withdraw: listing=%s to=%s qty=%d remaining=%d",
            listing_id, recipient, quantity, listing.stock,
        )
        return WithdrawResponse(
            listing_id=listing_id, to=recipient, quantity=quantity, remaining_stock=listing.stock
        )

    async def get_listing(self, db: AsyncSession, listing_id: str) -> ListingResponse:
        listing = await self._repo.get_listing(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return ListingResponse.from_domain(listing)

    async def get_primary_listing(
        self, db: AsyncSession, application: str, custodian_id: str, unit_id: int
    ) -> PrimaryListingResponse:
        app = normalize_address(application)
        asset = AssetRef(normalize_address(custodian_id), unit_id)
        listing_id = await self._repo.get_primary_listing_id(db, app, asset)
        return PrimaryListingResponse(
            application=app,
            custodian_id=asset.custodian_id,
            unit_id=unit_id,
            listing_id=listing_id,
        )

    def compute_identity(
        self, custodian_id: str, unit_id: int, seller: str, application: str
    ) -> ListingIdentityResponse:
        asset = AssetRef(normalize_address(custodian_id), unit_id)
        seller_addr = normalize_address(seller)
        app = normalize_address(application)
        return ListingIdentityResponse(
            listing_id=compute_listing_id(asset, seller_addr, app),
            custodian_id=asset.custodian_id,
            unit_id=unit_id,
            seller=seller_addr,
            application=app,
        )
