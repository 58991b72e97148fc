"""Pydantic schemas for mp_app API requests and responses."""

from pydantic import BaseModel, Field

from src.mp_app.domain.models import AppConfig
from src.mp_common.datetime_utils import to_iso
from src.mp_common.rates import MAX_RATE


class SetEnabledRequest(BaseModel):
    enabled: bool


class SetActiveRequest(BaseModel):
    active: bool


class SetFeeRateRequest(BaseModel):
    fee_rate: int = Field(..., ge=0, le=MAX_RATE, description="Fee as x/255 of proceeds")


class SetGratitudeRateRequest(BaseModel):
    gratitude_rate: int = Field(
        ..., ge=0, le=MAX_RATE, description="Share of the app fee (x/255) sent to the platform"
    )


class SetApprovalRequiredRequest(BaseModel):
    required: bool


class SetSellerApprovalRequest(BaseModel):
    approved: bool


class AppConfigResponse(BaseModel):
    application: str
    enabled: bool
    active: bool
    eligible: bool
    fee_rate: int
    gratitude_rate: int
    seller_approval_required: bool
    updated_at: str

    @classmethod
    def from_domain(cls, config: AppConfig) -> "AppConfigResponse":
        return cls(
            application=config.application,
            enabled=config.enabled,
            active=config.active,
            eligible=config.is_eligible,
            fee_rate=config.fee_rate,
            gratitude_rate=config.gratitude_rate,
            seller_approval_required=config.seller_approval_required,
            updated_at=to_iso(config.updated_at),
        )


class SellerApprovalResponse(BaseModel):
    application: str
    seller: str
    approved: bool
