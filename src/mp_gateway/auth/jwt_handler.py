"""JWT token creation and verification.

The token subject is the caller's 0x address. Every party (platform
operator, application, custodian, seller, buyer) authenticates the same way;
what a caller may do is decided by comparing that address with the entity
being touched.

MVP NOTE: Using HS256 (symmetric HMAC). The issuer and this service share one
JWT_SECRET. No token revocation: tokens are valid until expiry.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.mp_common.address import normalize_address
from src.mp_common.errors import InvalidAddressError, InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(address: str) -> str:
    """Issue a short-lived access token for an address (default: 30 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": normalize_address(address),
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> str:
    """Decode and validate a JWT access token, returning the caller address.

    Raises:
        InvalidCredentialsError: token invalid, expired, of the wrong type,
            or its subject is not a well-formed address.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()

    try:
        return normalize_address(payload.get("sub", ""))
    except InvalidAddressError:
        raise InvalidCredentialsError() from None
