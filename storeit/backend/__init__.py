"""
Backend client factory.

Every action builds its own client: an admin client carrying the secret key,
or a session client carrying one user's session secret.
"""
import threading

from storeit.backend.base import AdminClient, SessionClient, USERS, FILES
from storeit.shared.config import settings
from storeit.shared.errors import NoSessionError

_local = None
_local_lock = threading.Lock()


def local_backend():
    global _local
    with _local_lock:
        if _local is None:
            from storeit.backend.local.service import LocalBackend
            _local = LocalBackend()
        return _local


def use_local_backend(backend) -> None:
    global _local
    with _local_lock:
        _local = backend


def create_admin_client() -> AdminClient:
    if settings.BACKEND == "appwrite":
        from storeit.backend import appwrite_
        return appwrite_.admin_client()
    return local_backend().admin_client()


def create_session_client(secret: str | None) -> SessionClient:
    if not secret:
        raise NoSessionError()
    if settings.BACKEND == "appwrite":
        from storeit.backend import appwrite_
        return appwrite_.session_client(secret)
    return local_backend().session_client(secret)


__all__ = [
    "AdminClient",
    "SessionClient",
    "USERS",
    "FILES",
    "create_admin_client",
    "create_session_client",
    "local_backend",
    "use_local_backend",
]
