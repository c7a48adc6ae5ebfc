# utils/session.py
import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config import settings
from schemas.user import CurrentUser
from utils.users_service import UsersServiceClient, get_users_service

logger = logging.getLogger(__name__)

# Bearer header is optional; the browser sends the session cookie instead
bearer_scheme = HTTPBearer(auto_error=False)

def session_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None

# Resolve the caller's identity through the users service
async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UsersServiceClient = Depends(get_users_service),
) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token = session_token_from_request(request, credentials)
    if not token:
        raise credentials_exception

    try:
        user = await users.get_current_user(token)
    except (httpx.RequestError, httpx.HTTPStatusError):
        raise credentials_exception

    if not user or not user.get("id"):
        raise credentials_exception
    return CurrentUser.model_validate(user)
