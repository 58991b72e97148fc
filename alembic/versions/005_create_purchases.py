"""005: create purchases

Revision ID: 005
Revises: 004
Create Date: 2026-10-14
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE purchases (
            purchase_id         VARCHAR(64)     PRIMARY KEY,
            listing_id          VARCHAR(66)     NOT NULL REFERENCES listings (listing_id),
            custodian_id        VARCHAR(42)     NOT NULL,
            unit_id             NUMERIC(78, 0)  NOT NULL,
            buyer               VARCHAR(42)     NOT NULL,
            quantity            NUMERIC(78, 0)  NOT NULL,
            payment_amount      NUMERIC(78, 0)  NOT NULL,
            royalty_recipient   VARCHAR(42),
            royalty_amount      NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            application         VARCHAR(42)     NOT NULL,
            app_fee             NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            platform_operator   VARCHAR(42)     NOT NULL,
            gratitude           NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            seller              VARCHAR(42)     NOT NULL,
            seller_profit       NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            executed_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_purchases_conservation CHECK (
                royalty_amount + app_fee + gratitude + seller_profit = payment_amount
            )
        );
    """)
    op.execute("CREATE INDEX idx_purchases_listing ON purchases (listing_id, executed_at DESC);")
    op.execute("CREATE INDEX idx_purchases_buyer ON purchases (buyer, executed_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS purchases CASCADE;")
