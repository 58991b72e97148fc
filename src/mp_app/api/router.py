"""mp_app REST endpoints.

PUT /apps/{application}/enabled                       — platform operator only
PUT /apps/{application}/active                        — application only
PUT /apps/{application}/fee-rate                      — application only
PUT /apps/{application}/gratitude-rate                — application only
PUT /apps/{application}/seller-approval-required      — application only
PUT /apps/{application}/sellers/{seller}/approval     — application only
GET /apps/{application}
GET /apps/{application}/sellers/{seller}/approval
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_app.application.schemas import (
    SetActiveRequest,
    SetApprovalRequiredRequest,
    SetEnabledRequest,
    SetFeeRateRequest,
    SetGratitudeRateRequest,
    SetSellerApprovalRequest,
)
from src.mp_app.application.service import AppApplicationService
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import get_caller, require_platform_operator

router = APIRouter(prefix="/apps", tags=["apps"])

_service = AppApplicationService()


@router.get("/{application}")
async def get_app_config(
    application: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_config(db, application)
    return success_response(result.model_dump(), request)


@router.put("/{application}/enabled")
async def set_enabled(
    application: str,
    body: SetEnabledRequest,
    request: Request,
    operator: Annotated[str, Depends(require_platform_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.set_enabled(db, application, body.enabled)
    return success_response(result.model_dump(), request)


@router.put("/{application}/active")
async def set_active(
    application: str,
    body: SetActiveRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.set_active(db, caller, application, body.active)
    return success_response(result.model_dump(), request)


@router.put("/{application}/fee-rate")
async def set_fee_rate(
    application: str,
    body: SetFeeRateRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.set_fee_rate(db, caller, application, body.fee_rate)
    return success_response(result.model_dump(), request)


@router.put("/{application}/gratitude-rate")
async def set_gratitude_rate(
    application: str,
    body: SetGratitudeRateRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.set_gratitude_rate(db, caller, application, body.gratitude_rate)
    return success_response(result.model_dump(), request)


@router.put("/{application}/seller-approval-required")
async def set_seller_approval_required(
    application: str,
    body: SetApprovalRequiredRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.set_seller_approval_required(db, caller, application, body.required)
    return success_response(result.model_dump(), request)


@router.put("/{application}/sellers/{seller}/approval")
async def set_seller_approval(
    application: str,
    seller: str,
    body: SetSellerApprovalRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.set_seller_approval(db, caller, application, seller, body.approved)
    return success_response(result.model_dump(), request)


@router.get("/{application}/sellers/{seller}/approval")
async def get_seller_approval(
    application: str,
    seller: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_seller_approval(db, application, seller)
    return success_response(result.model_dump(), request)
