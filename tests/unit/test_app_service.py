"""Tests for AppApplicationService — configuration and approval tables."""

import pytest

from src.mp_app.application.service import AppApplicationService
from src.mp_common.errors import InvalidRateError, NotApplicationError

APP = "0x" + "a1" * 20
OTHER = "0x" + "0e" * 20
SELLER = "0x" + "5e" * 20


@pytest.fixture
def service(app_repo) -> AppApplicationService:
    return AppApplicationService(repo=app_repo)


class TestDefaults:
    async def test_unknown_app_reads_as_zero_config(self, service, db) -> None:
        result = await service.get_config(db, APP)
        assert result.enabled is False
        assert result.active is False
        assert result.eligible is False
        assert result.fee_rate == 0
        assert result.gratitude_rate == 0
        assert result.seller_approval_required is False
        assert result.updated_at == ""

    async def test_unknown_seller_not_approved(self, service, db) -> None:
        result = await service.get_seller_approval(db, APP, SELLER)
        assert result.approved is False


class TestEligibility:
    async def test_needs_both_flags(self, service, db) -> None:
        await service.set_enabled(db, APP, True)
        assert (await service.get_config(db, APP)).eligible is False
        result = await service.set_active(db, APP, APP, True)
        assert result.eligible is True

    async def test_platform_can_disable_active_app(self, service, db) -> None:
        await service.set_enabled(db, APP, True)
        await service.set_active(db, APP, APP, True)
        result = await service.set_enabled(db, APP, False)
        assert result.active is True
        assert result.eligible is False

    async def test_only_app_may_activate_itself(self, service, db, store) -> None:
        with pytest.raises(NotApplicationError) as exc_info:
            await service.set_active(db, OTHER, APP, True)
        assert exc_info.value.http_status == 403
        assert APP not in store.app_configs


class TestRates:
    async def test_set_fee_rate(self, service, db) -> None:
        result = await service.set_fee_rate(db, APP, APP, 5)
        assert result.fee_rate == 5

    async def test_rates_are_reassignable(self, service, db) -> None:
        await service.set_fee_rate(db, APP, APP, 5)
        result = await service.set_fee_rate(db, APP, APP, 200)
        assert result.fee_rate == 200

    async def test_gratitude_rate(self, service, db) -> None:
        result = await service.set_gratitude_rate(db, APP, APP, 255)
        assert result.gratitude_rate == 255

    async def test_out_of_range_rate(self, service, db, store) -> None:
        with pytest.raises(InvalidRateError):
            await service.set_fee_rate(db, APP, APP, 256)
        assert APP not in store.app_configs

    async def test_setters_leave_other_fields(self, service, db) -> None:
        await service.set_enabled(db, APP, True)
        await service.set_fee_rate(db, APP, APP, 7)
        result = await service.set_gratitude_rate(db, APP, APP, 9)
        assert result.enabled is True
        assert result.fee_rate == 7
        assert result.gratitude_rate == 9

    async def test_non_app_caller_rejected(self, service, db) -> None:
        with pytest.raises(NotApplicationError):
            await service.set_gratitude_rate(db, OTHER, APP, 1)


class TestSellerApproval:
    async def test_toggle(self, service, db) -> None:
        await service.set_seller_approval(db, APP, APP, SELLER, True)
        assert (await service.get_seller_approval(db, APP, SELLER)).approved is True
        await service.set_seller_approval(db, APP, APP, SELLER, False)
        assert (await service.get_seller_approval(db, APP, SELLER)).approved is False

    async def test_namespace_is_per_app(self, service, db) -> None:
        await service.set_seller_approval(db, APP, APP, SELLER, True)
        assert (await service.get_seller_approval(db, OTHER, SELLER)).approved is False

    async def test_cannot_approve_for_other_app(self, service, db) -> None:
        with pytest.raises(NotApplicationError):
            await service.set_seller_approval(db, OTHER, APP, SELLER, True)

    async def test_approval_required_flag(self, service, db) -> None:
        result = await service.set_seller_approval_required(db, APP, APP, True)
        assert result.seller_approval_required is True

    async def test_checksum_addresses_normalized(self, service, db, store) -> None:
        await service.set_seller_approval(db, APP, APP, "0x" + "5E" * 20, True)
        assert store.approvals[(APP, SELLER)] is True
