"""Inbound custody notifications.

POST /custody/deposits — called by the asset collection (custodian) after it
moved units into escrow. The authenticated caller is the custodian, so the
asset's custodian_id always comes from the token, never from the body.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_caller
from src.mp_listing.application.service import ListingApplicationService
from src.mp_listing.application.schemas import DepositNotificationRequest

router = APIRouter(prefix="/custody", tags=["custody"])

_service = ListingApplicationService()


@router.post("/deposits")
async def receive_deposit(
    body: DepositNotificationRequest,
    request: Request,
    custodian: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.handle_deposit_notification(db, body.to_domain(custodian))
    return success_response(result.model_dump(), request)
