# storeit/users/api.py
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse

from storeit.backend import AdminClient, create_session_client
from storeit.shared.auth import (
    admin_client, session_secret, require_user, set_session_cookie, clear_session_cookie,
)
from storeit.shared.config import settings
from storeit.shared.http import ok
from storeit.users.schemas import SignUpIn, SignInIn, VerifyIn, UserOut
from storeit.users.service import (
    create_account, send_email_otp, verify_secret, sign_in_user, sign_out_user,
)

router = APIRouter(prefix="/auth", tags=["Auth"])
views = APIRouter(tags=["Auth"])

@router.post("/sign-up")
def api_sign_up(inb: SignUpIn, admin: AdminClient = Depends(admin_client)):
    return ok(create_account(admin, inb.full_name, inb.email))

@router.post("/sign-in")
def api_sign_in(inb: SignInIn, admin: AdminClient = Depends(admin_client)):
    return ok(sign_in_user(admin, inb.email))

@router.post("/otp")
def api_resend_otp(inb: SignInIn, admin: AdminClient = Depends(admin_client)):
    return ok({"accountId": send_email_otp(admin, inb.email)})

@router.post("/verify")
def api_verify(inb: VerifyIn, admin: AdminClient = Depends(admin_client)):
    session = verify_secret(admin, inb.account_id, inb.password)
    response = JSONResponse(ok({"sessionId": session["$id"]}))
    set_session_cookie(response, session["secret"])
    return response

@router.post("/sign-out")
def api_sign_out(secret: Optional[str] = Depends(session_secret)):
    if secret:
        sign_out_user(create_session_client(secret))
    response = RedirectResponse(settings.LOGIN_PATH, status_code=303)
    clear_session_cookie(response)
    return response

@router.get("/me")
def api_me(user: dict = Depends(require_user)):
    return ok(UserOut.model_validate(user).model_dump(by_alias=True))

# Login views: the form each auth screen renders
@views.get("/sign-in")
def sign_in_view():
    return ok({"type": "sign-in", "fields": ["email"], "submit": "/auth/sign-in", "verify": "/auth/verify"})

@views.get("/sign-up")
def sign_up_view():
    return ok({"type": "sign-up", "fields": ["fullName", "email"], "submit": "/auth/sign-up", "verify": "/auth/verify"})
