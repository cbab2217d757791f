"""
Appwrite server SDK adapter.

Wraps the SDK's Account / Databases / Storage services behind the protocols
in storeit.backend.base and turns AppwriteException into BackendError.
"""
from contextlib import contextmanager
from typing import List, Optional

from appwrite.client import Client
from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.input_file import InputFile
from appwrite.query import Query as AwQuery
from appwrite.services.account import Account
from appwrite.services.databases import Databases
from appwrite.services.storage import Storage

from storeit.backend.base import AdminClient, SessionClient, USERS, FILES
from storeit.backend.query import Query, Equal, Contains, Or, Limit, OrderAsc, OrderDesc
from storeit.shared.config import settings
from storeit.shared.errors import BackendError


@contextmanager
def _translated():
    try:
        yield
    except AppwriteException as e:
        raise BackendError(
            e.message or str(e),
            code=e.type or "appwrite_error",
            status=e.code or 502,
        ) from e


def compile_query(q: Query) -> str:
    if isinstance(q, Equal):
        return AwQuery.equal(q.attribute, list(q.values))
    if isinstance(q, Contains):
        return AwQuery.contains(q.attribute, list(q.values))
    if isinstance(q, Or):
        return AwQuery.or_queries([compile_query(x) for x in q.queries])
    if isinstance(q, Limit):
        return AwQuery.limit(q.value)
    if isinstance(q, OrderAsc):
        return AwQuery.order_asc(q.attribute)
    if isinstance(q, OrderDesc):
        return AwQuery.order_desc(q.attribute)
    raise TypeError(f"unsupported query: {q!r}")


class AppwriteAccount:
    def __init__(self, client: Client):
        self._account = Account(client)

    def create_email_token(self, email: str) -> dict:
        with _translated():
            token = self._account.create_email_token(ID.unique(), email)
        return {"userId": token["userId"]}

    def create_session(self, user_id: str, secret: str) -> dict:
        with _translated():
            return self._account.create_session(user_id, secret)

    def get(self) -> dict:
        with _translated():
            return self._account.get()

    def delete_session(self, session_id: str) -> None:
        with _translated():
            self._account.delete_session(session_id)


class AppwriteDatabases:
    def __init__(self, client: Client):
        self._db = Databases(client)
        self._collections = {
            USERS: settings.APPWRITE_USERS_COLLECTION,
            FILES: settings.APPWRITE_FILES_COLLECTION,
        }

    def _cid(self, collection: str) -> str:
        return self._collections.get(collection, collection)

    def list_documents(self, collection: str, queries: Optional[List[Query]] = None) -> dict:
        compiled = [compile_query(q) for q in queries or []]
        with _translated():
            return self._db.list_documents(settings.APPWRITE_DATABASE, self._cid(collection), compiled)

    def get_document(self, collection: str, document_id: str) -> dict:
        with _translated():
            return self._db.get_document(settings.APPWRITE_DATABASE, self._cid(collection), document_id)

    def create_document(self, collection: str, data: dict) -> dict:
        with _translated():
            return self._db.create_document(
                settings.APPWRITE_DATABASE, self._cid(collection), ID.unique(), data
            )

    def update_document(self, collection: str, document_id: str, data: dict) -> dict:
        with _translated():
            return self._db.update_document(
                settings.APPWRITE_DATABASE, self._cid(collection), document_id, data
            )

    def delete_document(self, collection: str, document_id: str) -> None:
        with _translated():
            self._db.delete_document(settings.APPWRITE_DATABASE, self._cid(collection), document_id)


class AppwriteStorage:
    def __init__(self, client: Client):
        self._storage = Storage(client)

    def create_file(self, filename: str, content: bytes, mime_type: Optional[str] = None) -> dict:
        with _translated():
            return self._storage.create_file(
                settings.APPWRITE_BUCKET,
                ID.unique(),
                InputFile.from_bytes(content, filename, mime_type),
            )

    def get_file(self, file_id: str) -> dict:
        with _translated():
            return self._storage.get_file(settings.APPWRITE_BUCKET, file_id)

    def delete_file(self, file_id: str) -> None:
        with _translated():
            self._storage.delete_file(settings.APPWRITE_BUCKET, file_id)


def _client() -> Client:
    client = Client()
    client.set_endpoint(settings.APPWRITE_ENDPOINT)
    client.set_project(settings.APPWRITE_PROJECT)
    return client


def admin_client() -> AdminClient:
    client = _client()
    client.set_key(settings.APPWRITE_SECRET)
    return AdminClient(
        account=AppwriteAccount(client),
        databases=AppwriteDatabases(client),
        storage=AppwriteStorage(client),
    )


def session_client(secret: str) -> SessionClient:
    client = _client()
    client.set_session(secret)
    return SessionClient(account=AppwriteAccount(client), databases=AppwriteDatabases(client))
