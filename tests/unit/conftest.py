"""In-memory doubles for the repository and collaborator Protocols.

All doubles share one InMemoryStore. FakeSession.commit snapshots the store
and FakeSession.rollback restores the last snapshot, so service-level
all-or-nothing behaviour can be asserted without a database.
"""

import copy
from collections import defaultdict
from dataclasses import replace
from typing import Any
from unittest.mock import MagicMock

import pytest

from src.mp_app.domain.models import AppConfig
from src.mp_common.enums import PayoutKind
from src.mp_common.errors import (
    CustodyTransferError,
    InsufficientStockError,
    ListingNotFoundError,
    PaymentTransferError,
)
from src.mp_listing.application.service import ListingApplicationService
from src.mp_listing.domain.models import AssetRef, Listing
from src.mp_settlement.domain.models import RoyaltyQuote
from src.mp_settlement.engine.engine import SettlementEngine

PLATFORM = "0x" + "00" * 19 + "01"
ESCROW = "0x" + "00" * 19 + "02"


class InMemoryStore:
    def __init__(self) -> None:
        self.app_configs: dict[str, AppConfig] = {}
        self.approvals: dict[tuple[str, str], bool] = {}
        self.listings: dict[str, Listing] = {}
        self.primary: dict[tuple[str, str, int], str] = {}
        self.holdings: dict[tuple[str, str, int], int] = defaultdict(int)
        self.balances: dict[str, int] = defaultdict(int)
        self.payouts: list[tuple[str, int, PayoutKind]] = []
        self.events: list[str] = []
        self._committed = self._snapshot()

    def _snapshot(self) -> dict[str, Any]:
        return copy.deepcopy({k: v for k, v in vars(self).items() if not k.startswith("_")})

    def commit(self) -> None:
        self._committed = self._snapshot()

    def rollback(self) -> None:
        for key, value in copy.deepcopy(self._committed).items():
            setattr(self, key, value)


class FakeSession:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.commits = 0
        self.rollbacks = 0
        self.executed: list[dict[str, Any]] = []

    async def execute(self, statement: Any, params: dict[str, Any] | None = None) -> Any:
        self.executed.append(params or {})
        self.store.events.append("execute")
        return MagicMock()

    async def commit(self) -> None:
        self.commits += 1
        self.store.commit()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.store.rollback()


class InMemoryAppRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_app_config(self, db, application, for_update=False):
        config = self.store.app_configs.get(application)
        return replace(config) if config else AppConfig(application=application)

    async def save_app_config(self, db, config):
        self.store.app_configs[config.application] = replace(config)
        return replace(config)

    async def get_seller_approval(self, db, application, seller):
        return self.store.approvals.get((application, seller), False)

    async def set_seller_approval(self, db, application, seller, approved):
        self.store.approvals[(application, seller)] = approved


class InMemoryListingRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_listing(self, db, listing_id, for_update=False):
        listing = self.store.listings.get(listing_id)
        return replace(listing) if listing else None

    async def create_listing_if_absent(self, db, listing):
        self.store.listings.setdefault(listing.listing_id, replace(listing))

    async def add_stock(self, db, listing_id, unit_price, quantity):
        listing = self.store.listings.get(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        listing.unit_price = unit_price
        listing.stock += quantity
        return replace(listing)

    async def decrement_stock(self, db, listing_id, quantity):
        listing = self.store.listings.get(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        if listing.stock < quantity:
            raise InsufficientStockError(quantity, listing.stock)
        listing.stock -= quantity
        self.store.events.append("decrement")
        return replace(listing)

    async def get_primary_listing_id(self, db, application, asset):
        return self.store.primary.get((application, asset.custodian_id, asset.unit_id))

    async def set_primary_listing_id(self, db, application, asset, listing_id):
        self.store.primary.setdefault((application, asset.custodian_id, asset.unit_id), listing_id)


class InMemoryCustody:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.fail_release = False

    async def record_inbound(self, db, asset: AssetRef, quantity: int) -> None:
        self.store.holdings[(ESCROW, asset.custodian_id, asset.unit_id)] += quantity

    async def release(self, db, asset: AssetRef, to: str, quantity: int) -> None:
        key = (ESCROW, asset.custodian_id, asset.unit_id)
        if self.fail_release or self.store.holdings[key] < quantity:
            raise CustodyTransferError("receiver rejected transfer")
        self.store.holdings[key] -= quantity
        self.store.holdings[(to, asset.custodian_id, asset.unit_id)] += quantity
        self.store.events.append("release")


class InMemoryPaymentRail:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.reject_kind: PayoutKind | None = None

    async def collect(self, db, payer, amount, reference_id):
        if self.store.balances[payer] < amount:
            raise PaymentTransferError(f"{payer} cannot pay {amount}")
        self.store.balances[payer] -= amount
        self.store.events.append("collect")

    async def pay(self, db, payee, amount, kind, reference_id):
        if kind == self.reject_kind:
            raise PaymentTransferError(f"{payee} rejected {kind.value}")
        self.store.balances[payee] += amount
        self.store.payouts.append((payee, amount, kind))
        self.store.events.append(f"pay:{kind.value}")


class FractionRoyaltyOracle:
    """Quotes floor(sale * numerator / denominator) to a fixed recipient."""

    def __init__(self) -> None:
        self.recipient: str | None = None
        self.numerator = 0
        self.denominator = 255

    async def royalty_info(self, db, asset, sale_amount):
        if self.recipient is None:
            return None
        return RoyaltyQuote(
            recipient=self.recipient,
            amount=sale_amount * self.numerator // self.denominator,
        )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def db(store: InMemoryStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def app_repo(store: InMemoryStore) -> InMemoryAppRepository:
    return InMemoryAppRepository(store)


@pytest.fixture
def listing_repo(store: InMemoryStore) -> InMemoryListingRepository:
    return InMemoryListingRepository(store)


@pytest.fixture
def custody(store: InMemoryStore) -> InMemoryCustody:
    return InMemoryCustody(store)


@pytest.fixture
def payments(store: InMemoryStore) -> InMemoryPaymentRail:
    return InMemoryPaymentRail(store)


@pytest.fixture
def royalty_oracle() -> FractionRoyaltyOracle:
    return FractionRoyaltyOracle()


@pytest.fixture
def listing_service(listing_repo, app_repo, custody) -> ListingApplicationService:
    return ListingApplicationService(repo=listing_repo, app_repo=app_repo, custody=custody)


@pytest.fixture
def settlement_engine(
    listing_repo, app_repo, custody, royalty_oracle, payments
) -> SettlementEngine:
    return SettlementEngine(
        listing_repo=listing_repo,
        app_repo=app_repo,
        custody=custody,
        royalty_oracle=royalty_oracle,
        payments=payments,
        platform_operator=PLATFORM,
    )


@pytest.fixture
def configure_app(store: InMemoryStore):
    """Seed and commit an app_configs entry."""

    def _configure(application: str, **fields: Any) -> AppConfig:
        config = AppConfig(application=application, **fields)
        store.app_configs[application] = config
        store.commit()
        return config

    return _configure
