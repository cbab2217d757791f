# storeit/shared/auth.py
from typing import Optional

from fastapi import Depends, Request, Response

from storeit.backend import AdminClient, create_admin_client, create_session_client
from storeit.shared.config import settings
from storeit.shared.errors import LoginRequired
from storeit.users.service import get_current_user


def session_secret(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE) or None


def admin_client() -> AdminClient:
    return create_admin_client()


def current_user(secret: Optional[str] = Depends(session_secret)) -> Optional[dict]:
    """The signed-in user's profile document, or None."""
    if not secret:
        return None
    return get_current_user(create_session_client(secret))


def require_user(user: Optional[dict] = Depends(current_user)) -> dict:
    # every protected page and action goes through here
    if not user:
        raise LoginRequired()
    return user


def set_session_cookie(response: Response, secret: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE,
        secret,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.SESSION_COOKIE,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )
