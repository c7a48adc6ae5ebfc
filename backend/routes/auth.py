# backend/routes/auth.py
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from schemas.user import CurrentUser, RedirectUrlResponse, SessionCreate, SuccessResponse
from utils.audit import write_log, client_ip
from utils.session import get_current_user
from utils.users_service import UsersServiceClient, get_users_service

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def _set_session_cookie(response: Response, value: str, max_age: int) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=value,
        httponly=True,
        path="/",
        samesite="none",
        secure=True,
        max_age=max_age,
    )


# Return the identity provider's login URL
@router.get("/oauth/google/redirect_url", response_model=RedirectUrlResponse)
async def oauth_redirect_url(users: UsersServiceClient = Depends(get_users_service)):
    try:
        redirect_url = await users.get_oauth_redirect_url("google")
    except (httpx.RequestError, httpx.HTTPStatusError):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Identity service unavailable")
    return {"redirectUrl": redirect_url}


# Exchange an authorization code for a session cookie
@router.post("/sessions", response_model=SuccessResponse)
async def create_session(
    payload: SessionCreate,
    response: Response,
    request: Request,
    db: Session = Depends(get_db),
    users: UsersServiceClient = Depends(get_users_service),
):
    if not payload.code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No authorization code provided")

    try:
        session_token = await users.exchange_code_for_session_token(payload.code)
    except httpx.HTTPStatusError as e:
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"reason": f"code exchange {e.response.status_code}"})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authorization code")
    except httpx.RequestError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Identity service unavailable")

    _set_session_cookie(response, session_token, settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60)
    write_log(db, user_id=None, action="LOGIN", resource="auth", status="SUCCESS", ip=client_ip(request))
    return {"success": True}


# Retrieve current authenticated user details
@router.get("/users/me", response_model=CurrentUser)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user


@router.get("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    users: UsersServiceClient = Depends(get_users_service),
):
    session_token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if session_token:
        try:
            await users.delete_session(session_token)
        except (httpx.RequestError, httpx.HTTPStatusError):
            # Cookie is cleared regardless; the token expires on the service side
            logger.warning("Session invalidation failed, clearing cookie anyway")
        write_log(db, user_id=None, action="LOGOUT", resource="auth", status="SUCCESS", ip=client_ip(request))

    _set_session_cookie(response, "", 0)
    return {"success": True}
