"""003: create asset_holdings and custody_movements

Revision ID: 003
Revises: 002
Create Date: 2026-10-13
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE asset_holdings (
            holder          VARCHAR(42)     NOT NULL,
            custodian_id    VARCHAR(42)     NOT NULL,
            unit_id         NUMERIC(78, 0)  NOT NULL,
            quantity        NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (holder, custodian_id, unit_id),
            CONSTRAINT ck_asset_holdings_quantity_gte_0 CHECK (quantity >= 0)
        );
    """)
    op.execute("""
        CREATE TABLE custody_movements (
            id              BIGSERIAL       PRIMARY KEY,
            movement        VARCHAR(10)     NOT NULL,
            custodian_id    VARCHAR(42)     NOT NULL,
            unit_id         NUMERIC(78, 0)  NOT NULL,
            from_holder     VARCHAR(42),
            to_holder       VARCHAR(42)     NOT NULL,
            quantity        NUMERIC(78, 0)  NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_custody_movements_movement CHECK (movement IN ('INBOUND', 'RELEASE'))
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS custody_movements CASCADE;")
    op.execute("DROP TABLE IF EXISTS asset_holdings CASCADE;")
