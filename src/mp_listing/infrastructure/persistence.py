"""ListingRepository — concrete implementation of ListingRepositoryProtocol.

Listings are inserted once per identity with ON CONFLICT DO NOTHING and are
never deleted; a zero-stock row stays resolvable for later replenishment.
Stock changes are atomic UPDATE ... RETURNING statements. A decrement that
returns 0 rows means the stock constraint was violated.

Transaction ownership: the CALLER (application service / settlement engine)
commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.errors import InsufficientStockError, ListingNotFoundError
from src.mp_listing.domain.models import AssetRef, Listing

_LISTING_COLUMNS = """
    listing_id, custodian_id, unit_id, seller, application,
    unit_price, stock, created_at, updated_at
"""

_GET_LISTING_SQL = text(f"""
    SELECT {_LISTING_COLUMNS}
    FROM listings
    WHERE listing_id = :listing_id
""")

_GET_LISTING_FOR_UPDATE_SQL = text(f"""
    SELECT {_LISTING_COLUMNS}
    FROM listings
    WHERE listing_id = :listing_id
    FOR UPDATE
""")

_INSERT_LISTING_SQL = text("""
    INSERT INTO listings
        (listing_id, custodian_id, unit_id, seller, application, unit_price, stock)
    VALUES
        (:listing_id, :custodian_id, :unit_id, :seller, :application, :unit_price, :stock)
    ON CONFLICT (listing_id) DO NOTHING
""")

# Price is last-write-wins for all remaining stock
_ADD_STOCK_SQL = text(f"""
    UPDATE listings
    SET unit_price = :unit_price,
        stock = stock + :quantity,
        updated_at = NOW()
    WHERE listing_id = :listing_id
    RETURNING {_LISTING_COLUMNS}
""")

_DECREMENT_STOCK_SQL = text(f"""
    UPDATE listings
    SET stock = stock - :quantity,
        updated_at = NOW()
    WHERE listing_id = :listing_id AND stock >= :quantity
    RETURNING {_LISTING_COLUMNS}
""")

_GET_PRIMARY_SQL = text("""
    SELECT listing_id FROM primary_listings
    WHERE application = :application
      AND custodian_id = :custodian_id
      AND unit_id = :unit_id
""")

# First writer wins; an existing primary is never overwritten
_SET_PRIMARY_SQL = text("""
    INSERT INTO primary_listings (application, custodian_id, unit_id, listing_id)
    VALUES (:application, :custodian_id, :unit_id, :listing_id)
    ON CONFLICT (application, custodian_id, unit_id) DO NOTHING
""")


def _row_to_listing(row: object) -> Listing:
    # NUMERIC(78,0) columns come back as Decimal
    return Listing(
        listing_id=row.listing_id,  # type: ignore[attr-defined]
        asset=AssetRef(
            custodian_id=row.custodian_id,  # type: ignore[attr-defined]
            unit_id=int(row.unit_id),  # type: ignore[attr-defined]
        ),
        seller=row.seller,  # type: ignore[attr-defined]
        application=row.application,  # type: ignore[attr-defined]
        unit_price=int(row.unit_price),  # type: ignore[attr-defined]
        stock=int(row.stock),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class ListingRepository:
    """Concrete repository over listings and primary_listings."""

    async def get_listing(
        self, db: AsyncSession, listing_id: str, for_update: bool = False
    ) -> Listing | None:
        sql = _GET_LISTING_FOR_UPDATE_SQL if for_update else _GET_LISTING_SQL
        row = (await db.execute(sql, {"listing_id": listing_id})).fetchone()
        return _row_to_listing(row) if row else None

    async def create_listing_if_absent(self, db: AsyncSession, listing: Listing) -> None:
        await db.execute(
            _INSERT_LISTING_SQL,
            {
                "listing_id": listing.listing_id,
                "custodian_id": listing.asset.custodian_id,
                "unit_id": listing.asset.unit_id,
                "seller": listing.seller,
                "application": listing.application,
                "unit_price": listing.unit_price,
                "stock": listing.stock,
            },
        )

    async def add_stock(
        self, db: AsyncSession, listing_id: str, unit_price: int, quantity: int
    ) -> Listing:
        result = await db.execute(
            _ADD_STOCK_SQL,
            {"listing_id": listing_id, "unit_price": unit_price, "quantity": quantity},
        )
        row = result.fetchone()
        if row is None:
            raise ListingNotFoundError(listing_id)
        return _row_to_listing(row)

    async def decrement_stock(
        self, db: AsyncSession, listing_id: str, quantity: int
    ) -> Listing:
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"listing_id": listing_id, "quantity": quantity}
        )
        row = result.fetchone()
        if row is None:
            current = await self.get_listing(db, listing_id)
            if current is None:
                raise ListingNotFoundError(listing_id)
            raise InsufficientStockError(quantity, current.stock)
        return _row_to_listing(row)

    async def get_primary_listing_id(
        self, db: AsyncSession, application: str, asset: AssetRef
    ) -> str | None:
        result = await db.execute(
            _GET_PRIMARY_SQL,
            {
                "application": application,
                "custodian_id": asset.custodian_id,
                "unit_id": asset.unit_id,
            },
        )
        return result.scalar_one_or_none()

    async def set_primary_listing_id(
        self, db: AsyncSession, application: str, asset: AssetRef, listing_id: str
    ) -> None:
        await db.execute(
            _SET_PRIMARY_SQL,
            {
                "application": application,
                "custodian_id": asset.custodian_id,
                "unit_id": asset.unit_id,
                "listing_id": listing_id,
            },
        )
