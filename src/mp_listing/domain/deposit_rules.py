"""Deposit authorization rules, checked in order by the listing service.

1. application enabled AND active        -> AppNotEligibleError
2. quantity > 0                          -> AmountMustBePositiveError
3. primary gate for (application, asset) -> SellerNotApprovedError

Seller identity (seller must be the depositing operator or source) is
checked once per notification, before any item is processed.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_app.domain.models import AppConfig
from src.mp_app.domain.repository import AppRepositoryProtocol
from src.mp_common.errors import (
    AmountMustBePositiveError,
    InvalidSellerError,
    SellerNotApprovedError,
)
from src.mp_listing.domain.models import AssetRef
from src.mp_listing.domain.repository import ListingRepositoryProtocol


def check_quantity_positive(quantity: int) -> None:
    if quantity <= 0:
        raise AmountMustBePositiveError()


def check_seller_identity(seller: str, operator: str, source: str) -> None:
    if seller not in (operator, source):
        raise InvalidSellerError(seller)


async def check_primary_gate(
    db: AsyncSession,
    app_repo: AppRepositoryProtocol,
    listing_repo: ListingRepositoryProtocol,
    config: AppConfig,
    asset: AssetRef,
    seller: str,
) -> bool:
    """Return True when this deposit creates the primary listing.

    Only the primary listing of an (application, asset) pair is subject to
    seller approval. Once a primary exists, any seller may list the asset.
    """
    existing = await listing_repo.get_primary_listing_id(db, config.application, asset)
    if existing is not None:
        return False
    if config.seller_approval_required:
        approved = await app_repo.get_seller_approval(db, config.application, seller)
        if not approved:
            raise SellerNotApprovedError(config.application, seller)
    return True
