import datetime
from typing import Optional
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from shared.core.config import settings
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

security = HTTPBearer()

JWT_EXPIRE_MINUTES = 1440  # 24 hours default


def create_access_token(data: dict, expire_minutes: Optional[int] = None):
    expires = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
        minutes=expire_minutes or JWT_EXPIRE_MINUTES)
    payload = {**data, "exp": expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT issued by the auth service."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
):
    user_data = verify_token(credentials.credentials)

    # every asset operation is tenant scoped
    if not user_data.org_id:
        return error_response(
            message="Token is not bound to an organization",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=403
        )

    return user_data
