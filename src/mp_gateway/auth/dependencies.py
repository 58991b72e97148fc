"""FastAPI dependencies resolving the authenticated caller address.

Usage in any protected router:
    from src.mp_gateway.auth.dependencies import get_caller

    @router.post("/protected")
    async def protected(caller: str = Depends(get_caller)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.mp_common.address import normalize_address
from src.mp_common.errors import InvalidCredentialsError, NotPlatformOperatorError
from src.mp_gateway.auth.jwt_handler import decode_access_token

# Tokens are issued out of band; tokenUrl is only used by Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_caller(token: str = Depends(oauth2_scheme)) -> str:
    """Extract and validate the Bearer token, return the caller's address."""
    try:
        return decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None


async def require_platform_operator(caller: str = Depends(get_caller)) -> str:
    """Verify the caller is the configured platform operator.

    Raises HTTP 403 (NotPlatformOperatorError) otherwise. Used for the
    platform-only application enablement toggle.
    """
    if caller != normalize_address(settings.PLATFORM_OPERATOR_ADDRESS):
        raise NotPlatformOperatorError()
    return caller
