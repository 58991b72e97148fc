"""mp_listing REST endpoints.

GET  /listings/identity                 — precompute a listing id
GET  /listings/primary                  — primary listing of (application, asset)
GET  /listings/{listing_id}             — listing detail
POST /listings/{listing_id}/withdraw    — seller reclaims unsold units
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_caller
from src.mp_listing.application.schemas import WithdrawRequest
from src.mp_listing.application.service import ListingApplicationService
from src.mp_listing.domain.identity import MAX_UINT256

router = APIRouter(prefix="/listings", tags=["listings"])

_service = ListingApplicationService()


@router.get("/identity")
async def get_listing_identity(
    request: Request,
    custodian_id: str = Query(..., description="Asset collection address"),
    unit_id: int = Query(..., ge=0, le=MAX_UINT256),
    seller: str = Query(...),
    application: str = Query(...),
) -> ApiResponse:
    result = _service.compute_identity(custodian_id, unit_id, seller, application)
    return success_response(result.model_dump(), request)


@router.get("/primary")
async def get_primary_listing(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    application: str = Query(...),
    custodian_id: str = Query(...),
    unit_id: int = Query(..., ge=0, le=MAX_UINT256),
) -> ApiResponse:
    result = await _service.get_primary_listing(db, application, custodian_id, unit_id)
    return success_response(result.model_dump(), request)


@router.get("/{listing_id}")
async def get_listing(
    listing_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_listing(db, listing_id)
    return success_response(result.model_dump(), request)


@router.post("/{listing_id}/withdraw")
async def withdraw(
    listing_id: str,
    body: WithdrawRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.withdraw(db, caller, listing_id, body.to, body.quantity)
    return success_response(result.model_dump(), request)
