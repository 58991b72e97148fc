"""mp_settlement REST endpoints.

POST /listings/{listing_id}/purchase — buy units at the listing's price
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_caller
from src.mp_settlement.application.schemas import PurchaseRequest
from src.mp_settlement.application.service import SettlementApplicationService

router = APIRouter(prefix="/listings", tags=["settlement"])

_service = SettlementApplicationService()


@router.post("/{listing_id}/purchase")
async def purchase(
    listing_id: str,
    body: PurchaseRequest,
    request: Request,
    buyer: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.purchase(
        db, buyer, listing_id, body.quantity, body.payment_amount
    )
    return success_response(result.model_dump(), request)
