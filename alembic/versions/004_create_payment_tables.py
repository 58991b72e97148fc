"""004: create balances, payment_ledger and royalty_schedules

Revision ID: 004
Revises: 003
Create Date: 2026-10-13
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE balances (
            address         VARCHAR(42)     PRIMARY KEY,
            available       NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_balances_available_gte_0 CHECK (available >= 0)
        );
    """)
    op.execute("""
        CREATE TABLE payment_ledger (
            id              BIGSERIAL       PRIMARY KEY,
            address         VARCHAR(42)     NOT NULL,
            entry_type      VARCHAR(20)     NOT NULL,
            amount          NUMERIC(78, 0)  NOT NULL,
            balance_after   NUMERIC(78, 0)  NOT NULL,
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_payment_ledger_entry_type CHECK (
                entry_type IN ('PURCHASE_PAYMENT', 'ROYALTY', 'APP_FEE', 'GRATITUDE', 'SELLER_PROCEEDS')
            )
        );
    """)
    op.execute("CREATE INDEX idx_payment_ledger_address ON payment_ledger (address, id DESC);")
    op.execute("CREATE INDEX idx_payment_ledger_reference ON payment_ledger (reference_id);")
    op.execute("""
        CREATE TABLE royalty_schedules (
            custodian_id    VARCHAR(42)     PRIMARY KEY,
            recipient       VARCHAR(42)     NOT NULL,
            royalty_bps     INT             NOT NULL,
            CONSTRAINT ck_royalty_schedules_bps CHECK (royalty_bps BETWEEN 0 AND 10000)
        );
    """)
    op.execute("COMMENT ON TABLE payment_ledger IS 'Append-only value movements, one row per waterfall leg';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS royalty_schedules CASCADE;")
    op.execute("DROP TABLE IF EXISTS payment_ledger CASCADE;")
    op.execute("DROP TABLE IF EXISTS balances CASCADE;")
