"""Listing-config wire format carried in deposit notifications.

Three ABI-style 32-byte words:
  word 0: seller       address, left-padded with 12 zero bytes
  word 1: application  address, left-padded with 12 zero bytes
  word 2: unit_price   uint256, big-endian
"""

from src.mp_common.address import ADDRESS_BYTES, address_to_bytes, bytes_to_address
from src.mp_common.errors import InvalidListingConfigError
from src.mp_listing.domain.identity import UINT256_BYTES, encode_uint256
from src.mp_listing.domain.models import ListingConfig

_WORDS = 3
CONFIG_LENGTH = _WORDS * UINT256_BYTES
_PAD = UINT256_BYTES - ADDRESS_BYTES


def encode_listing_config(config: ListingConfig) -> bytes:
    return (
        b"\x00" * _PAD + address_to_bytes(config.seller)
        + b"\x00" * _PAD + address_to_bytes(config.application)
        + encode_uint256(config.unit_price)
    )


def decode_listing_config(data: bytes) -> ListingConfig:
    if len(data) != CONFIG_LENGTH:
        raise InvalidListingConfigError(
            f"expected {CONFIG_LENGTH} bytes, got {len(data)}"
        )
    words = [data[i:i + UINT256_BYTES] for i in range(0, CONFIG_LENGTH, UINT256_BYTES)]
    return ListingConfig(
        seller=_decode_address_word(words[0], "seller"),
        application=_decode_address_word(words[1], "application"),
        unit_price=int.from_bytes(words[2], "big"),
    )


def decode_hex_payload(payload: str) -> bytes:
    """'0x…' hex string as sent over HTTP -> raw bytes."""
    raw = payload[2:] if payload.startswith(("0x", "0X")) else payload
    try:
        return bytes.fromhex(raw)
    except ValueError:
        raise InvalidListingConfigError("payload is not valid hex") from None


def _decode_address_word(word: bytes, name: str) -> str:
    if any(word[:_PAD]):
        raise InvalidListingConfigError(f"{name} word has non-zero padding")
    return bytes_to_address(word[_PAD:])
