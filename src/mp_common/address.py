"""Account / contract address handling.

Addresses are 20-byte values written as 0x-prefixed hex. They are stored and
compared in lowercase form; checksum casing is accepted on input and dropped.
"""

import re
from typing import Annotated

from pydantic import AfterValidator

from src.mp_common.errors import InvalidAddressError

ADDRESS_BYTES = 20

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(value: str) -> str:
    """Validate and lowercase an address: '0xAbC...' -> '0xabc...'."""
    if not isinstance(value, str) or not _ADDRESS_RE.match(value):
        raise InvalidAddressError(str(value))
    return value.lower()


def address_to_bytes(address: str) -> bytes:
    return bytes.fromhex(normalize_address(address)[2:])


def bytes_to_address(raw: bytes) -> str:
    if len(raw) != ADDRESS_BYTES:
        raise InvalidAddressError(raw.hex())
    return "0x" + raw.hex()


def _validate_address_field(value: str) -> str:
    try:
        return normalize_address(value)
    except InvalidAddressError as exc:
        raise ValueError(exc.message) from None


# Request-schema field type: validated and lowercased by pydantic
Address = Annotated[str, AfterValidator(_validate_address_field)]
