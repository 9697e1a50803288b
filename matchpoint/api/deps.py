# matchpoint/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from matchpoint.core.exceptions import Unauthorized
from matchpoint.core.security import verify_token
from matchpoint.schemas.token import TokenPayload

# The `tokenUrl` is only used by the OpenAPI docs; tokens are issued by the
# identity provider, not this service.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenPayload:
    try:
        return verify_token(token)
    except Unauthorized as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
