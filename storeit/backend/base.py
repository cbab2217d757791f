from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from storeit.backend.query import Query

# Logical collection names; each backend maps them to its own identifiers.
USERS = "users"
FILES = "files"


@runtime_checkable
class AccountService(Protocol):
    def create_email_token(self, email: str) -> dict: ...

    def create_session(self, user_id: str, secret: str) -> dict: ...

    def get(self) -> dict: ...

    def delete_session(self, session_id: str) -> None: ...


@runtime_checkable
class DatabaseService(Protocol):
    def list_documents(self, collection: str, queries: Optional[List[Query]] = None) -> dict: ...

    def get_document(self, collection: str, document_id: str) -> dict: ...

    def create_document(self, collection: str, data: dict) -> dict: ...

    def update_document(self, collection: str, document_id: str, data: dict) -> dict: ...

    def delete_document(self, collection: str, document_id: str) -> None: ...


@runtime_checkable
class StorageService(Protocol):
    def create_file(self, filename: str, content: bytes, mime_type: Optional[str] = None) -> dict: ...

    def get_file(self, file_id: str) -> dict: ...

    def delete_file(self, file_id: str) -> None: ...


@dataclass
class AdminClient:
    """Elevated client (secret key): accounts, documents and object storage."""
    account: AccountService
    databases: DatabaseService
    storage: StorageService


@dataclass
class SessionClient:
    """Client scoped to one user's session secret."""
    account: AccountService
    databases: DatabaseService
