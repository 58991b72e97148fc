"""SQLAlchemy ORM models for mp_listing.

These map to existing tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.mp_common.database import Base

UINT256 = Numeric(78, 0)


class ListingORM(Base):
    __tablename__ = "listings"

    listing_id: Mapped[str] = mapped_column(String(66), primary_key=True)
    custodian_id: Mapped[str] = mapped_column(String(42), nullable=False)
    unit_id: Mapped[Decimal] = mapped_column(UINT256, nullable=False)
    seller: Mapped[str] = mapped_column(String(42), nullable=False)
    application: Mapped[str] = mapped_column(String(42), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    stock: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No deleted_at; listings are never removed


class PrimaryListingORM(Base):
    __tablename__ = "primary_listings"

    application: Mapped[str] = mapped_column(String(42), primary_key=True)
    custodian_id: Mapped[str] = mapped_column(String(42), primary_key=True)
    unit_id: Mapped[Decimal] = mapped_column(UINT256, primary_key=True)
    listing_id: Mapped[str] = mapped_column(String(66), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No updated_at; the first listing for (application, asset) is permanent
