"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock or in-memory double conforming to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_app.domain.models import AppConfig


class AppRepositoryProtocol(Protocol):
    async def get_app_config(
        self, db: AsyncSession, application: str, for_update: bool = False
    ) -> AppConfig: ...

    async def save_app_config(self, db: AsyncSession, config: AppConfig) -> AppConfig: ...

    async def get_seller_approval(
        self, db: AsyncSession, application: str, seller: str
    ) -> bool: ...

    async def set_seller_approval(
        self, db: AsyncSession, application: str, seller: str, approved: bool
    ) -> None: ...
