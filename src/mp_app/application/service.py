"""AppApplicationService — configuration and seller-approval tables.

Every setter is a single read-modify-write of one app_configs row under
FOR UPDATE, committed or rolled back as a unit. The platform-only
enablement toggle is guarded at the router (require_platform_operator);
the self-service setters check here that the caller is the application.

Policy: fee rate, gratitude rate and the approval-required flag may be
reassigned freely; there is no write-once restriction.
"""

import logging
from dataclasses import replace
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_app.application.schemas import AppConfigResponse, SellerApprovalResponse
from src.mp_app.domain.repository import AppRepositoryProtocol
from src.mp_app.infrastructure.persistence import AppRepository
from src.mp_common.address import normalize_address
from src.mp_common.errors import NotApplicationError
from src.mp_common.rates import validate_rate

logger = logging.getLogger(__name__)


class AppApplicationService:
    def __init__(self, repo: AppRepositoryProtocol | None = None) -> None:
        self._repo: AppRepositoryProtocol = repo or AppRepository()

    async def get_config(self, db: AsyncSession, application: str) -> AppConfigResponse:
        config = await self._repo.get_app_config(db, normalize_address(application))
        return AppConfigResponse.from_domain(config)

    async def set_enabled(
        self, db: AsyncSession, application: str, enabled: bool
    ) -> AppConfigResponse:
        """Platform toggle; the caller check lives in the router dependency."""
        return await self._update(db, normalize_address(application), enabled=enabled)

    async def set_active(
        self, db: AsyncSession, caller: str, application: str, active: bool
    ) -> AppConfigResponse:
        app = _require_self(caller, application)
        return await self._update(db, app, active=active)

    async def set_fee_rate(
        self, db: AsyncSession, caller: str, application: str, fee_rate: int
    ) -> AppConfigResponse:
        app = _require_self(caller, application)
        validate_rate(fee_rate)
        return await self._update(db, app, fee_rate=fee_rate)

    async def set_gratitude_rate(
        self, db: AsyncSession, caller: str, application: str, gratitude_rate: int
    ) -> AppConfigResponse:
        app = _require_self(caller, application)
        validate_rate(gratitude_rate)
        return await self._update(db, app, gratitude_rate=gratitude_rate)

    async def set_seller_approval_required(
        self, db: AsyncSession, caller: str, application: str, required: bool
    ) -> AppConfigResponse:
        app = _require_self(caller, application)
        return await self._update(db, app, seller_approval_required=required)

    async def set_seller_approval(
        self,
        db: AsyncSession,
        caller: str,
        application: str,
        seller: str,
        approved: bool,
    ) -> SellerApprovalResponse:
        """Approvals live in the application's own namespace only."""
        app = _require_self(caller, application)
        seller_addr = normalize_address(seller)
        try:
            await self._repo.set_seller_approval(db, app, seller_addr, approved)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Seller approval: app=%s seller=%s approved=%s", app, seller_addr, approved)
        return SellerApprovalResponse(application=app, seller=seller_addr, approved=approved)

    async def get_seller_approval(
        self, db: AsyncSession, application: str, seller: str
    ) -> SellerApprovalResponse:
        app = normalize_address(application)
        seller_addr = normalize_address(seller)
        approved = await self._repo.get_seller_approval(db, app, seller_addr)
        return SellerApprovalResponse(application=app, seller=seller_addr, approved=approved)

    async def _update(
        self, db: AsyncSession, application: str, **changes: Any
    ) -> AppConfigResponse:
        try:
            current = await self._repo.get_app_config(db, application, for_update=True)
            saved = await self._repo.save_app_config(db, replace(current, **changes))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("App config updated: app=%s changes=%s", application, changes)
        return AppConfigResponse.from_domain(saved)


def _require_self(caller: str, application: str) -> str:
    app = normalize_address(application)
    if normalize_address(caller) != app:
        raise NotApplicationError(app)
    return app
