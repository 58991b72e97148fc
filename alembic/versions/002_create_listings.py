"""002: create listings and primary_listings

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            listing_id      VARCHAR(66)     PRIMARY KEY,
            custodian_id    VARCHAR(42)     NOT NULL,
            unit_id         NUMERIC(78, 0)  NOT NULL,
            seller          VARCHAR(42)     NOT NULL,
            application     VARCHAR(42)     NOT NULL,
            unit_price      NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            stock           NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_listings_identity UNIQUE (custodian_id, unit_id, seller, application),
            CONSTRAINT ck_listings_stock_gte_0 CHECK (stock >= 0),
            CONSTRAINT ck_listings_price_gte_0 CHECK (unit_price >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller);")
    op.execute("CREATE INDEX idx_listings_application ON listings (application);")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE primary_listings (
            application     VARCHAR(42)     NOT NULL,
            custodian_id    VARCHAR(42)     NOT NULL,
            unit_id         NUMERIC(78, 0)  NOT NULL,
            listing_id      VARCHAR(66)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (application, custodian_id, unit_id)
        );
    """)
    op.execute("COMMENT ON TABLE listings IS 'Listings keyed by sha256(custodian, unit, seller, app); never deleted';")
    op.execute("COMMENT ON TABLE primary_listings IS 'First listing per (application, asset); write-once';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS primary_listings CASCADE;")
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
