import logging

from storeit.backend import AdminClient, SessionClient, USERS
from storeit.backend.query import Equal
from storeit.constants import AVATAR_PLACEHOLDER_URL
from storeit.shared.errors import StoreItError, UserNotFoundError

log = logging.getLogger(__name__)


def get_user_by_email(admin: AdminClient, email: str) -> dict | None:
    result = admin.databases.list_documents(USERS, [Equal("email", [email])])
    return result["documents"][0] if result["total"] > 0 else None


def send_email_otp(admin: AdminClient, email: str) -> str:
    """Dispatch a one-time code to `email`; returns the backend account id."""
    try:
        token = admin.account.create_email_token(email)
    except StoreItError as e:
        log.error(f"Failed to send email OTP: {e}")
        raise
    return token["userId"]


def create_account(admin: AdminClient, full_name: str, email: str) -> dict:
    """
    Sign-up: dispatch an OTP and create the profile document on first use.
    A repeated sign-up for the same email re-sends the code and creates nothing.
    """
    existing = get_user_by_email(admin, email)
    account_id = send_email_otp(admin, email)

    if not existing:
        admin.databases.create_document(USERS, {
            "fullName": full_name,
            "email": email,
            "avatar": AVATAR_PLACEHOLDER_URL,
            "accountId": account_id,
        })
        log.info("created profile for account %s", account_id)

    return {"accountId": account_id}


def verify_secret(admin: AdminClient, account_id: str, password: str) -> dict:
    """Exchange the emailed code for a session; returns the backend session."""
    try:
        return admin.account.create_session(account_id, password)
    except StoreItError as e:
        log.error(f"Failed to verify OTP: {e}")
        raise


def sign_in_user(admin: AdminClient, email: str) -> dict:
    try:
        existing = get_user_by_email(admin, email)
        if existing:
            send_email_otp(admin, email)
            return {"accountId": existing["accountId"]}
    except StoreItError as e:
        log.error(f"Failed to sign in user: {e}")
        raise
    raise UserNotFoundError()


def get_current_user(session: SessionClient) -> dict | None:
    """
    Resolve the profile behind a session: backend identity first, then the
    profile document with the matching accountId. Any failure means no user.
    """
    try:
        account = session.account.get()
        result = session.databases.list_documents(USERS, [Equal("accountId", [account["$id"]])])
    except StoreItError as e:
        log.info(f"No current user: {e}")
        return None
    if result["total"] <= 0:
        return None
    return result["documents"][0]


def sign_out_user(session: SessionClient) -> None:
    try:
        session.account.delete_session("current")
    except StoreItError as e:
        # the cookie is dropped regardless
        log.error(f"Failed to sign out user: {e}")
