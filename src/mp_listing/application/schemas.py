"""Pydantic schemas for mp_listing API requests and responses."""

from pydantic import BaseModel, Field, field_validator, model_validator

from src.mp_common.address import Address
from src.mp_common.datetime_utils import to_iso
from src.mp_common.rates import units_to_display
from src.mp_listing.domain.config_codec import decode_hex_payload
from src.mp_listing.domain.identity import MAX_UINT256
from src.mp_listing.domain.models import DepositItem, DepositNotification, Listing


class DepositNotificationRequest(BaseModel):
    """Sent by the custodian once units are in escrow.

    unit_ids[i] / quantities[i] form one deposit; a batch shares `data`.
    """

    operator: Address
    source: Address
    unit_ids: list[int] = Field(..., min_length=1)
    quantities: list[int] = Field(..., min_length=1)
    data: str = Field(..., description="0x-hex encoded listing config (seller, application, price)")

    @field_validator("unit_ids")
    @classmethod
    def _unit_ids_in_range(cls, v: list[int]) -> list[int]:
        if any(not (0 <= u <= MAX_UINT256) for u in v):
            raise ValueError("unit_ids must be uint256 values")
        return v

    @model_validator(mode="after")
    def _same_length(self) -> "DepositNotificationRequest":
        if len(self.unit_ids) != len(self.quantities):
            raise ValueError("unit_ids and quantities must have the same length")
        return self

    def to_domain(self, custodian_id: str) -> DepositNotification:
        return DepositNotification(
            custodian_id=custodian_id,
            operator=self.operator,
            source=self.source,
            items=tuple(
                DepositItem(unit_id=u, quantity=q)
                for u, q in zip(self.unit_ids, self.quantities)
            ),
            config_data=decode_hex_payload(self.data),
        )


class WithdrawRequest(BaseModel):
    to: Address
    quantity: int


class ListingResponse(BaseModel):
    listing_id: str
    custodian_id: str
    unit_id: int
    seller: str
    application: str
    unit_price: int
    unit_price_display: str
    stock: int
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingResponse":
        return cls(
            listing_id=listing.listing_id,
            custodian_id=listing.asset.custodian_id,
            unit_id=listing.asset.unit_id,
            seller=listing.seller,
            application=listing.application,
            unit_price=listing.unit_price,
            unit_price_display=units_to_display(listing.unit_price),
            stock=listing.stock,
            created_at=to_iso(listing.created_at),
            updated_at=to_iso(listing.updated_at),
        )


class DepositResponse(BaseModel):
    listings: list[ListingResponse]


class WithdrawResponse(BaseModel):
    listing_id: str
    to: str
    quantity: int
    remaining_stock: int


class ListingIdentityResponse(BaseModel):
    listing_id: str
    custodian_id: str
    unit_id: int
    seller: str
    application: str


class PrimaryListingResponse(BaseModel):
    application: str
    custodian_id: str
    unit_id: int
    listing_id: str | None
