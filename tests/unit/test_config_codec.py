"""Tests for the listing-config wire format."""

import pytest

from src.mp_common.errors import InvalidListingConfigError
from src.mp_listing.domain.config_codec import (
    CONFIG_LENGTH,
    decode_hex_payload,
    decode_listing_config,
    encode_listing_config,
)
from src.mp_listing.domain.models import ListingConfig

SELLER = "0x" + "5e" * 20
APP = "0x" + "a9" * 20


def _word(hex_body: str) -> bytes:
    return bytes.fromhex(hex_body.rjust(64, "0"))


class TestDecode:
    def test_decodes_three_words(self) -> None:
        data = _word("5e" * 20) + _word("a9" * 20) + _word("06f05b59d3b20000")
        config = decode_listing_config(data)
        assert config == ListingConfig(seller=SELLER, application=APP, unit_price=5 * 10**17)

    def test_encode_matches_layout(self) -> None:
        config = ListingConfig(seller=SELLER, application=APP, unit_price=1)
        data = encode_listing_config(config)
        assert len(data) == CONFIG_LENGTH == 96
        assert data[:12] == b"\x00" * 12
        assert data[12:32] == bytes.fromhex("5e" * 20)
        assert data[-1] == 1

    @pytest.mark.parametrize("length", [0, 64, 95, 97, 128])
    def test_wrong_length(self, length: int) -> None:
        with pytest.raises(InvalidListingConfigError) as exc_info:
            decode_listing_config(b"\x00" * length)
        assert exc_info.value.code == 3004

    def test_dirty_address_padding(self) -> None:
        data = bytearray(_word("5e" * 20) + _word("a9" * 20) + _word("01"))
        data[0] = 0x01
        with pytest.raises(InvalidListingConfigError, match="seller"):
            decode_listing_config(bytes(data))

    def test_dirty_application_padding(self) -> None:
        data = bytearray(_word("5e" * 20) + _word("a9" * 20) + _word("01"))
        data[32 + 11] = 0xFF
        with pytest.raises(InvalidListingConfigError, match="application"):
            decode_listing_config(bytes(data))


class TestHexPayload:
    def test_prefixed(self) -> None:
        assert decode_hex_payload("0x0102") == b"\x01\x02"

    def test_unprefixed(self) -> None:
        assert decode_hex_payload("ff") == b"\xff"

    def test_invalid(self) -> None:
        with pytest.raises(InvalidListingConfigError):
            decode_hex_payload("0xzz")
