from jose import jwt
from matchpoint.core.config import settings
from matchpoint.schemas.token import TokenPayload


def get_user_authentication_headers(user_id: str = "user_test", exp: int = 9999999999) -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test user.
    """
    payload = TokenPayload(sub=user_id, exp=exp)
    token = jwt.encode(payload.model_dump(), settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}
