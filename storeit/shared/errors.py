from typing import Any, Optional


class StoreItError(Exception):
    """Base for every failure the action layer reports to callers."""

    code = "error"
    status = 400

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None,
                 details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        self.details = details


class BackendError(StoreItError):
    """Network, validation or auth failure reported by the storage backend."""

    code = "backend_error"
    status = 502


class NoSessionError(StoreItError):
    code = "no_session"
    status = 401

    def __init__(self, message: str = "No session"):
        super().__init__(message)


class UserNotFoundError(StoreItError):
    code = "user_not_found"
    status = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class NotFoundError(StoreItError):
    code = "not_found"
    status = 404


class InvalidInput(StoreItError):
    code = "invalid_input"
    status = 400


class LoginRequired(StoreItError):
    # rendered as a redirect to the login view, never as a JSON body
    code = "login_required"
    status = 303

    def __init__(self, message: str = "Login required"):
        super().__init__(message)
