# matchpoint/core/security.py
from jose import JWTError, jwt

from matchpoint.core.config import settings
from matchpoint.core.exceptions import Unauthorized
from matchpoint.schemas.token import TokenPayload


def verify_token(token: str | None) -> TokenPayload:
    """
    Decode and validate a bearer token issued by the identity provider.

    Raises:
        Unauthorized: missing, expired, badly signed or malformed token
    """
    if not token:
        raise Unauthorized("Authentication required")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return TokenPayload(**payload)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise Unauthorized()
