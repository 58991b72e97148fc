"""Tests for mp_common.address."""

import pytest

from src.mp_common.address import address_to_bytes, bytes_to_address, normalize_address
from src.mp_common.errors import InvalidAddressError


def test_normalize_lowercases_checksum_form() -> None:
    assert normalize_address("0xABCDEF" + "0" * 34) == "0xabcdef" + "0" * 34


@pytest.mark.parametrize("bad", ["", "0x123", "abcd" * 10, "0x" + "g" * 40, "0x" + "a" * 41])
def test_normalize_rejects_malformed(bad: str) -> None:
    with pytest.raises(InvalidAddressError) as exc_info:
        normalize_address(bad)
    assert exc_info.value.code == 3005


def test_bytes_conversion() -> None:
    addr = "0x" + "12" * 20
    raw = address_to_bytes(addr)
    assert len(raw) == 20
    assert bytes_to_address(raw) == addr


def test_bytes_to_address_rejects_wrong_length() -> None:
    with pytest.raises(InvalidAddressError):
        bytes_to_address(b"\x01" * 19)
