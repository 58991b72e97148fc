"""Unit tests for the SQL repositories and adapters using MagicMock AsyncSession."""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.mp_app.infrastructure.persistence import AppRepository
from src.mp_common.enums import PayoutKind
from src.mp_common.errors import (
    CustodyTransferError,
    InsufficientStockError,
    ListingNotFoundError,
    PaymentTransferError,
)
from src.mp_custody.infrastructure.escrow import EscrowCustody
from src.mp_listing.domain.models import AssetRef
from src.mp_listing.infrastructure.persistence import ListingRepository
from src.mp_settlement.domain.waterfall import compute_fee_split
from src.mp_settlement.infrastructure.payments import LedgerPaymentRail
from src.mp_settlement.infrastructure.royalty import RegistryRoyaltyOracle

APP = "0x" + "a1" * 20
CUSTODIAN = "0x" + "c0" * 20
SELLER = "0x" + "5e" * 20
ESCROW = "0x" + "00" * 19 + "02"


def _result(row=None, scalar=None):
    result = MagicMock()
    result.fetchone.return_value = row
    result.scalar_one_or_none.return_value = scalar
    return result


def _listing_row(**kwargs):
    row = MagicMock()
    row.listing_id = kwargs.get("listing_id", "0x" + "11" * 32)
    row.custodian_id = CUSTODIAN
    row.unit_id = Decimal(kwargs.get("unit_id", 7))
    row.seller = SELLER
    row.application = APP
    row.unit_price = Decimal(kwargs.get("unit_price", 10**18))
    row.stock = Decimal(kwargs.get("stock", 3))
    row.created_at = None
    row.updated_at = None
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestListingRepository:
    @pytest.mark.asyncio
    async def test_get_listing_converts_numeric(self, db):
        db.execute = AsyncMock(return_value=_result(_listing_row(unit_id=2**200)))
        listing = await ListingRepository().get_listing(db, "0x" + "11" * 32)
        assert listing is not None
        assert listing.asset == AssetRef(CUSTODIAN, 2**200)
        assert isinstance(listing.unit_price, int)
        assert listing.stock == 3

    @pytest.mark.asyncio
    async def test_get_listing_for_update_uses_lock(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        assert await ListingRepository().get_listing(db, "0x00", for_update=True) is None
        sql = str(db.execute.call_args.args[0])
        assert "FOR UPDATE" in sql

    @pytest.mark.asyncio
    async def test_add_stock_missing_row(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        with pytest.raises(ListingNotFoundError):
            await ListingRepository().add_stock(db, "0x00", 1, 1)

    @pytest.mark.asyncio
    async def test_decrement_reports_available(self, db):
        db.execute = AsyncMock(side_effect=[_result(None), _result(_listing_row(stock=1))])
        with pytest.raises(InsufficientStockError) as exc_info:
            await ListingRepository().decrement_stock(db, "0x" + "11" * 32, 2)
        assert "available 1" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_decrement_missing_listing(self, db):
        db.execute = AsyncMock(side_effect=[_result(None), _result(None)])
        with pytest.raises(ListingNotFoundError):
            await ListingRepository().decrement_stock(db, "0x00", 1)

    @pytest.mark.asyncio
    async def test_set_primary_never_overwrites(self, db):
        db.execute = AsyncMock(return_value=_result())
        await ListingRepository().set_primary_listing_id(db, APP, AssetRef(CUSTODIAN, 1), "0xid")
        sql = str(db.execute.call_args.args[0])
        assert "DO NOTHING" in sql
        assert db.execute.call_args.args[1]["listing_id"] == "0xid"


class TestAppRepository:
    @pytest.mark.asyncio
    async def test_missing_row_is_default(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        config = await AppRepository().get_app_config(db, APP)
        assert config.application == APP
        assert config.is_eligible is False

    @pytest.mark.asyncio
    async def test_plain_read_does_not_seed(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        await AppRepository().get_app_config(db, APP)
        assert db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_locking_read_seeds_row_first(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        await AppRepository().get_app_config(db, APP, for_update=True)
        seed_sql, lock_sql = (str(call.args[0]) for call in db.execute.call_args_list)
        assert "ON CONFLICT (application) DO NOTHING" in seed_sql
        assert "FOR UPDATE" in lock_sql
        assert db.execute.call_args_list[0].args[1] == {"application": APP}

    @pytest.mark.asyncio
    async def test_missing_approval_is_false(self, db):
        db.execute = AsyncMock(return_value=_result(scalar=None))
        assert await AppRepository().get_seller_approval(db, APP, SELLER) is False


class TestEscrowCustody:
    @pytest.mark.asyncio
    async def test_release_short_escrow(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        custody = EscrowCustody(escrow_address=ESCROW)
        with pytest.raises(CustodyTransferError):
            await custody.release(db, AssetRef(CUSTODIAN, 1), SELLER, 2)
        assert db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_release_credits_and_logs(self, db):
        db.execute = AsyncMock(return_value=_result(MagicMock(quantity=0)))
        custody = EscrowCustody(escrow_address=ESCROW)
        await custody.release(db, AssetRef(CUSTODIAN, 1), SELLER, 2)
        # debit escrow, credit recipient, movement row
        assert db.execute.await_count == 3
        movement = db.execute.call_args.args[1]
        assert movement["movement"] == "RELEASE"
        assert movement["from_holder"] == ESCROW
        assert movement["to_holder"] == SELLER

    @pytest.mark.asyncio
    async def test_inbound_credits_escrow(self, db):
        db.execute = AsyncMock(return_value=_result())
        await EscrowCustody(escrow_address=ESCROW).record_inbound(db, AssetRef(CUSTODIAN, 1), 4)
        credit = db.execute.call_args_list[0].args[1]
        assert credit["holder"] == ESCROW
        assert credit["quantity"] == 4


class TestLedgerPaymentRail:
    @pytest.mark.asyncio
    async def test_collect_zero_is_noop(self, db):
        db.execute = AsyncMock()
        await LedgerPaymentRail().collect(db, SELLER, 0, "p1")
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_collect_insufficient_balance(self, db):
        db.execute = AsyncMock(side_effect=[_result(None), _result(scalar=Decimal(5))])
        with pytest.raises(PaymentTransferError, match="available 5"):
            await LedgerPaymentRail().collect(db, SELLER, 10, "p1")

    @pytest.mark.asyncio
    async def test_collect_writes_negative_ledger_entry(self, db):
        db.execute = AsyncMock(return_value=_result(MagicMock(available=Decimal(90))))
        await LedgerPaymentRail().collect(db, SELLER, 10, "p1")
        entry = db.execute.call_args.args[1]
        assert entry["entry_type"] == "PURCHASE_PAYMENT"
        assert entry["amount"] == -10
        assert entry["balance_after"] == 90

    @pytest.mark.asyncio
    async def test_pay_records_kind(self, db):
        db.execute = AsyncMock(return_value=_result(MagicMock(available=Decimal(7))))
        await LedgerPaymentRail().pay(db, APP, 7, PayoutKind.APP_FEE, "p1")
        entry = db.execute.call_args.args[1]
        assert entry["entry_type"] == "APP_FEE"
        assert entry["reference_id"] == "p1"

    @pytest.mark.asyncio
    async def test_pay_rejects_zero(self, db):
        db.execute = AsyncMock()
        with pytest.raises(PaymentTransferError):
            await LedgerPaymentRail().pay(db, APP, 0, PayoutKind.APP_FEE, "p1")


class TestRegistryRoyaltyOracle:
    @pytest.mark.asyncio
    async def test_unsupported_custodian(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        assert await RegistryRoyaltyOracle().royalty_info(db, AssetRef(CUSTODIAN, 1), 1000) is None

    @pytest.mark.asyncio
    async def test_bps_quote(self, db):
        row = MagicMock(recipient=SELLER, royalty_bps=250)
        db.execute = AsyncMock(return_value=_result(row))
        quote = await RegistryRoyaltyOracle().royalty_info(db, AssetRef(CUSTODIAN, 1), 10_001)
        assert quote is not None
        assert quote.recipient == SELLER
        assert quote.amount == 250

    @pytest.mark.asyncio
    async def test_checksum_recipient_is_lowercased(self, db):
        row = MagicMock(recipient="0x" + "5E" * 20, royalty_bps=1000)
        db.execute = AsyncMock(return_value=_result(row))
        quote = await RegistryRoyaltyOracle().royalty_info(db, AssetRef(CUSTODIAN, 1), 1000)
        assert quote is not None
        assert quote.recipient == SELLER

    @pytest.mark.asyncio
    async def test_checksum_recipient_equal_to_seller_is_skipped(self, db):
        row = MagicMock(recipient="0x" + "5E" * 20, royalty_bps=1000)
        db.execute = AsyncMock(return_value=_result(row))
        quote = await RegistryRoyaltyOracle().royalty_info(db, AssetRef(CUSTODIAN, 1), 1000)
        split = compute_fee_split(1000, SELLER, 0, 0, quote)
        assert split.royalty_amount == 0
        assert split.royalty_recipient is None
        assert split.seller_profit == 1000
