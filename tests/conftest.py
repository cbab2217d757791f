import os

# must be set before anything imports storeit.shared.config
os.environ.setdefault("ENV", "test")
os.environ.setdefault("STOREIT_BACKEND", "local")
os.environ.setdefault("APPWRITE_ENDPOINT", "https://testserver")
os.environ.setdefault("APPWRITE_PROJECT", "storeit")
os.environ.setdefault("APPWRITE_BUCKET", "storeit")
os.environ.setdefault("MAX_FILE_SIZE", str(1024 * 1024))

import pytest
from fastapi.testclient import TestClient

from storeit.backend import USERS, use_local_backend
from storeit.backend.local.service import LocalBackend
from storeit.shared.cache import page_cache


@pytest.fixture
def backend(tmp_path):
    b = LocalBackend(
        root=tmp_path / "storage",
        db_url=f"sqlite:///{(tmp_path / 'storeit.db').as_posix()}",
    )
    use_local_backend(b)
    page_cache.clear()
    yield b
    use_local_backend(None)
    page_cache.clear()
    b.engine.dispose()


@pytest.fixture
def admin(backend):
    return backend.admin_client()


@pytest.fixture
def user(admin):
    return admin.databases.create_document(USERS, {
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "avatar": "https://example.com/a.png",
        "accountId": "acct-ada",
    })


@pytest.fixture
def client(backend):
    from storeit.main import app
    return TestClient(app, base_url="https://testserver")


@pytest.fixture
def sign_up(backend):
    """Returns a helper that signs `client` up and in through the HTTP flow."""
    def _sign_up(client, email="ada@example.com", name="Ada Lovelace"):
        r = client.post("/auth/sign-up", json={"fullName": name, "email": email})
        assert r.status_code == 200, r.text
        account_id = r.json()["data"]["accountId"]
        r = client.post("/auth/verify", json={"accountId": account_id, "password": backend.last_code_for(email)})
        assert r.status_code == 200, r.text
        return account_id
    return _sign_up


@pytest.fixture
def signed_in(client, sign_up):
    sign_up(client)
    return client
