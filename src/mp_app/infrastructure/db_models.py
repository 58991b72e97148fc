"""SQLAlchemy ORM models for mp_app.

These map to existing tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.mp_common.database import Base


class AppConfigORM(Base):
    __tablename__ = "app_configs"

    application: Mapped[str] = mapped_column(String(42), primary_key=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fee_rate: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    gratitude_rate: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    seller_approval_required: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class SellerApprovalORM(Base):
    __tablename__ = "seller_approvals"

    application: Mapped[str] = mapped_column(String(42), primary_key=True)
    seller: Mapped[str] = mapped_column(String(42), primary_key=True)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
