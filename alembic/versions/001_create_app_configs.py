"""001: create common functions, app_configs and seller_approvals

Revision ID: 001
Revises:
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE app_configs (
            application               VARCHAR(42)   PRIMARY KEY,
            enabled                   BOOLEAN       NOT NULL DEFAULT FALSE,
            active                    BOOLEAN       NOT NULL DEFAULT FALSE,
            fee_rate                  SMALLINT      NOT NULL DEFAULT 0,
            gratitude_rate            SMALLINT      NOT NULL DEFAULT 0,
            seller_approval_required  BOOLEAN       NOT NULL DEFAULT FALSE,
            created_at                TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at                TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_app_configs_fee_rate       CHECK (fee_rate BETWEEN 0 AND 255),
            CONSTRAINT ck_app_configs_gratitude_rate CHECK (gratitude_rate BETWEEN 0 AND 255)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_app_configs_updated_at
            BEFORE UPDATE ON app_configs
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE seller_approvals (
            application   VARCHAR(42)   NOT NULL,
            seller        VARCHAR(42)   NOT NULL,
            approved      BOOLEAN       NOT NULL DEFAULT FALSE,
            updated_at    TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            PRIMARY KEY (application, seller)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_seller_approvals_updated_at
            BEFORE UPDATE ON seller_approvals
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE app_configs IS 'Per-application enablement, activation and fee rates (x/255)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS seller_approvals CASCADE;")
    op.execute("DROP TABLE IF EXISTS app_configs CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
