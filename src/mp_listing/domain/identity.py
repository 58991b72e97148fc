"""Deterministic listing identity.

listing_id = sha256(custodian_id ‖ unit_id ‖ seller ‖ application), over the
packed encoding: 20-byte address, 32-byte big-endian uint256, 20-byte
address, 20-byte address. Field order is part of the identity and must not
change; indexers compute the same value off-line.
"""

import hashlib

from src.mp_common.address import address_to_bytes
from src.mp_common.errors import Uint256OutOfRangeError
from src.mp_listing.domain.models import AssetRef

UINT256_BYTES = 32
MAX_UINT256 = (1 << 256) - 1


def encode_uint256(value: int) -> bytes:
    if not (0 <= value <= MAX_UINT256):
        raise Uint256OutOfRangeError(value)
    return value.to_bytes(UINT256_BYTES, "big")


def compute_listing_id(asset: AssetRef, seller: str, application: str) -> str:
    """Pure function of the 4-tuple; same inputs always give the same id."""
    packed = (
        address_to_bytes(asset.custodian_id)
        + encode_uint256(asset.unit_id)
        + address_to_bytes(seller)
        + address_to_bytes(application)
    )
    return "0x" + hashlib.sha256(packed).hexdigest()
