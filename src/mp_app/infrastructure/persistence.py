"""AppRepository — concrete implementation of AppRepositoryProtocol.

Configuration rows are created implicitly by the first setter call (seeded
before the locking read) and are never deleted. Reads of a missing row
return the zero-valued default instead of None.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_app.domain.models import AppConfig

_GET_APP_SQL = text("""
    SELECT application, enabled, active, fee_rate, gratitude_rate,
           seller_approval_required, created_at, updated_at
    FROM app_configs
    WHERE application = :application
""")

_GET_APP_FOR_UPDATE_SQL = text("""
    SELECT application, enabled, active, fee_rate, gratitude_rate,
           seller_approval_required, created_at, updated_at
    FROM app_configs
    WHERE application = :application
    FOR UPDATE
""")

# Seeds the zero-valued row so a following FOR UPDATE always has a row to lock
_INSERT_DEFAULT_APP_SQL = text("""
    INSERT INTO app_configs (application)
    VALUES (:application)
    ON CONFLICT (application) DO NOTHING
""")

_UPSERT_APP_SQL = text("""
    INSERT INTO app_configs
        (application, enabled, active, fee_rate, gratitude_rate, seller_approval_required)
    VALUES
        (:application, :enabled, :active, :fee_rate, :gratitude_rate, :seller_approval_required)
    ON CONFLICT (application) DO UPDATE
        SET enabled = EXCLUDED.enabled,
            active = EXCLUDED.active,
            fee_rate = EXCLUDED.fee_rate,
            gratitude_rate = EXCLUDED.gratitude_rate,
            seller_approval_required = EXCLUDED.seller_approval_required
    RETURNING application, enabled, active, fee_rate, gratitude_rate,
              seller_approval_required, created_at, updated_at
""")

_GET_APPROVAL_SQL = text("""
    SELECT approved FROM seller_approvals
    WHERE application = :application AND seller = :seller
""")

_UPSERT_APPROVAL_SQL = text("""
    INSERT INTO seller_approvals (application, seller, approved)
    VALUES (:application, :seller, :approved)
    ON CONFLICT (application, seller) DO UPDATE
        SET approved = EXCLUDED.approved
""")


def _row_to_config(row: object) -> AppConfig:
    return AppConfig(
        application=row.application,  # type: ignore[attr-defined]
        enabled=row.enabled,  # type: ignore[attr-defined]
        active=row.active,  # type: ignore[attr-defined]
        fee_rate=row.fee_rate,  # type: ignore[attr-defined]
        gratitude_rate=row.gratitude_rate,  # type: ignore[attr-defined]
        seller_approval_required=row.seller_approval_required,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class AppRepository:
    """Concrete repository over app_configs and seller_approvals."""

    async def get_app_config(
        self, db: AsyncSession, application: str, for_update: bool = False
    ) -> AppConfig:
        """Read an application config; a missing row reads as the zero default.

        With for_update the row is created first, so concurrent setters for a
        new application serialize on its row lock instead of each upserting
        from its own default snapshot.
        """
        if for_update:
            await db.execute(_INSERT_DEFAULT_APP_SQL, {"application": application})
        sql = _GET_APP_FOR_UPDATE_SQL if for_update else _GET_APP_SQL
        row = (await db.execute(sql, {"application": application})).fetchone()
        if row is None:
            return AppConfig(application=application)
        return _row_to_config(row)

    async def save_app_config(self, db: AsyncSession, config: AppConfig) -> AppConfig:
        result = await db.execute(
            _UPSERT_APP_SQL,
            {
                "application": config.application,
                "enabled": config.enabled,
                "active": config.active,
                "fee_rate": config.fee_rate,
                "gratitude_rate": config.gratitude_rate,
                "seller_approval_required": config.seller_approval_required,
            },
        )
        return _row_to_config(result.fetchone())

    async def get_seller_approval(
        self, db: AsyncSession, application: str, seller: str
    ) -> bool:
        result = await db.execute(
            _GET_APPROVAL_SQL, {"application": application, "seller": seller}
        )
        approved = result.scalar_one_or_none()
        return bool(approved)

    async def set_seller_approval(
        self, db: AsyncSession, application: str, seller: str, approved: bool
    ) -> None:
        await db.execute(
            _UPSERT_APPROVAL_SQL,
            {"application": application, "seller": seller, "approved": approved},
        )
