"""
Local development backend.

Plays the backend-as-a-service role in-process: accounts with emailed
one-time codes, session secrets, a schema-checked document store and an
on-disk object bucket. Observable behavior follows the managed service
closely enough that the action layer cannot tell the two apart: default
page size of 25, relationship expansion on read, unknown attributes
rejected, errors carried as BackendError with status codes.
"""
import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional

import bcrypt
from jose import jwt, JWTError
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storeit.backend.base import AdminClient, SessionClient, USERS, FILES
from storeit.backend.query import Query, Equal, Contains, Or, Limit, OrderAsc, OrderDesc
from storeit.backend.local.models import (
    Account, EmailToken, AccountSession, Document, StoredObject, utcnow, now_iso,
)
from storeit.backend.local.storage import write_object, remove_object, sniff_mime, safe_name
from storeit.shared.config import settings
from storeit.shared.db import Base, make_engine, make_sessionmaker, sqlite_url
from storeit.shared.errors import BackendError

log = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 25
SYSTEM_ATTRIBUTES = {"$id", "$createdAt", "$updatedAt"}

SCHEMAS = {
    USERS: {"fullName", "email", "avatar", "accountId"},
    FILES: {"name", "type", "extension", "url", "size", "owner", "accountId", "users", "bucketFileId"},
}

# attribute -> collection it references; expanded to the full document on read
RELATIONSHIPS = {
    FILES: {"owner": USERS},
}


def _hash(code: str) -> str:
    return bcrypt.hashpw(code.encode(), bcrypt.gensalt()).decode()

def _verify(code: str, hashed: str) -> bool:
    try: return bcrypt.checkpw(code.encode(), hashed.encode())
    except ValueError: return False


def _matches(doc: dict, q: Query) -> bool:
    if isinstance(q, Or):
        return any(_matches(doc, sub) for sub in q.queries)
    value = doc.get(q.attribute)
    if isinstance(q, Equal):
        if isinstance(value, list):
            return any(v in q.values for v in value)
        return value in q.values
    if isinstance(q, Contains):
        if isinstance(value, list):
            return any(v in value for v in q.values)
        if isinstance(value, str):
            return any(str(v) in value for v in q.values)
        return False
    return True


class LocalBackend:
    def __init__(self, root: Path | str | None = None, db_url: str | None = None,
                 bucket: str | None = None, max_file_size: int | None = None):
        self.root = Path(root or settings.STORAGE_DIR).resolve()
        self.bucket = bucket or settings.APPWRITE_BUCKET
        self.max_file_size = max_file_size or settings.MAX_FILE_SIZE
        self.engine = make_engine(db_url or settings.LOCAL_DB_URL or sqlite_url(self.root))
        self.SessionLocal = make_sessionmaker(self.engine)
        Base.metadata.create_all(bind=self.engine)
        # dispatched one-time-code mails: (email, code)
        self.outbox: List[tuple[str, str]] = []
        self._outbox_lock = threading.Lock()

    # clients
    def admin_client(self) -> AdminClient:
        return AdminClient(
            account=LocalAccountService(self),
            databases=LocalDatabaseService(self),
            storage=LocalStorageService(self),
        )

    def session_client(self, secret: str) -> SessionClient:
        return SessionClient(
            account=LocalAccountService(self, secret=secret),
            databases=LocalDatabaseService(self),
        )

    def db(self) -> Session:
        return self.SessionLocal()

    def send_mail(self, email: str, code: str) -> None:
        with self._outbox_lock:
            self.outbox.append((email, code))
        log.info("OTP mail to %s: your StoreIt code is %s", email, code)

    def last_code_for(self, email: str) -> Optional[str]:
        with self._outbox_lock:
            for to, code in reversed(self.outbox):
                if to == email:
                    return code
        return None

    def find_object(self, bucket: str, file_id: str) -> Optional[StoredObject]:
        with self.db() as db:
            obj = db.get(StoredObject, file_id)
            if not obj or obj.bucket != bucket:
                return None
            return obj


class LocalAccountService:
    def __init__(self, backend: LocalBackend, secret: str | None = None):
        self.backend = backend
        self.secret = secret

    def create_email_token(self, email: str) -> dict:
        email = email.lower().strip()
        code = f"{secrets.randbelow(10**6):06d}"
        with self.backend.db() as db:
            acct = db.scalars(select(Account).where(Account.email == email)).first()
            if not acct:
                acct = Account(email=email)
                db.add(acct)
                db.flush()
            db.execute(delete(EmailToken).where(EmailToken.user_id == acct.id))
            db.add(EmailToken(
                user_id=acct.id,
                secret_hash=_hash(code),
                expires_at=utcnow() + timedelta(minutes=settings.OTP_TTL_MIN),
            ))
            db.commit()
            user_id = acct.id
        self.backend.send_mail(email, code)
        return {"userId": user_id}

    def create_session(self, user_id: str, secret: str) -> dict:
        with self.backend.db() as db:
            tokens = db.scalars(select(EmailToken).where(EmailToken.user_id == user_id)).all()
            token = next(
                (t for t in tokens if t.expires_at > utcnow() and _verify(secret or "", t.secret_hash)),
                None,
            )
            if not token:
                raise BackendError("Invalid token passed in the request.", code="user_invalid_token", status=401)
            db.delete(token)
            expires = utcnow() + timedelta(minutes=settings.SESSION_EXPIRE_MIN)
            sess = AccountSession(user_id=user_id, expires_at=expires)
            db.add(sess)
            db.commit()
            sid = sess.id

        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "sid": sid,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=settings.SESSION_EXPIRE_MIN)).timestamp()),
        }
        return {
            "$id": sid,
            "userId": user_id,
            "secret": jwt.encode(payload, settings.JWT_KEY, algorithm=settings.JWT_ALG),
            "expire": expires.replace(tzinfo=timezone.utc).isoformat(timespec="milliseconds"),
        }

    def _claims(self) -> dict:
        if not self.secret:
            raise BackendError("User (role: guests) missing scope (account)", code="general_unauthorized_scope", status=401)
        try:
            return jwt.decode(self.secret, settings.JWT_KEY, algorithms=[settings.JWT_ALG])
        except JWTError as e:
            raise BackendError(f"Invalid session: {e}", code="user_unauthorized", status=401)

    def get(self) -> dict:
        claims = self._claims()
        with self.backend.db() as db:
            sid = claims.get("sid")
            sess = db.get(AccountSession, sid) if sid else None
            if not sess or sess.user_id != claims.get("sub") or sess.expires_at <= utcnow():
                raise BackendError("User (role: guests) missing scope (account)", code="general_unauthorized_scope", status=401)
            acct = db.get(Account, sess.user_id)
            if not acct:
                raise BackendError("User with the requested ID could not be found.", code="user_not_found", status=404)
            return {"$id": acct.id, "email": acct.email}

    def delete_session(self, session_id: str) -> None:
        claims = self._claims()
        sid = claims.get("sid") if session_id == "current" else session_id
        with self.backend.db() as db:
            sess = db.get(AccountSession, sid) if sid else None
            if not sess or sess.user_id != claims.get("sub"):
                raise BackendError("The current user session could not be found.", code="user_session_not_found", status=404)
            db.delete(sess)
            db.commit()


class LocalDatabaseService:
    def __init__(self, backend: LocalBackend):
        self.backend = backend

    @staticmethod
    def _schema(collection: str) -> set:
        if collection not in SCHEMAS:
            raise BackendError("Collection with the requested ID could not be found.", code="collection_not_found", status=404)
        return SCHEMAS[collection]

    def _check_attributes(self, collection: str, names) -> None:
        allowed = self._schema(collection) | SYSTEM_ATTRIBUTES
        for name in names:
            if name not in allowed:
                raise BackendError(f"Attribute not found in schema: {name}", code="general_query_invalid", status=400)

    def _check_structure(self, collection: str, data: dict) -> None:
        allowed = self._schema(collection)
        for key in data:
            if key not in allowed:
                raise BackendError(
                    f'Invalid document structure: Unknown attribute: "{key}"',
                    code="document_invalid_structure", status=400,
                )

    @staticmethod
    def _flatten(collection: str, data: dict) -> dict:
        # relationship attributes are stored by id
        out = dict(data)
        for attr in RELATIONSHIPS.get(collection, {}):
            ref = out.get(attr)
            if isinstance(ref, dict):
                out[attr] = ref.get("$id")
        return out

    def _expand(self, db: Session, doc: dict) -> dict:
        for attr, target in RELATIONSHIPS.get(doc["$collectionId"], {}).items():
            ref = doc.get(attr)
            if isinstance(ref, str):
                row = db.scalars(select(Document).where(Document.id == ref, Document.collection == target)).first()
                doc[attr] = row.to_dict() if row else None
        return doc

    @staticmethod
    def _row(db: Session, collection: str, document_id: str) -> Document:
        row = db.scalars(select(Document).where(Document.id == document_id, Document.collection == collection)).first()
        if not row:
            raise BackendError("Document with the requested ID could not be found.", code="document_not_found", status=404)
        return row

    def list_documents(self, collection: str, queries: Optional[List[Query]] = None) -> dict:
        queries = list(queries or [])
        self._check_attributes(collection, [a for q in queries for a in q.attributes()])

        with self.backend.db() as db:
            rows = db.scalars(
                select(Document).where(Document.collection == collection).order_by(Document.seq)
            ).all()
            docs = [r.to_dict() for r in rows]

            filters = [q for q in queries if isinstance(q, (Equal, Contains, Or))]
            docs = [d for d in docs if all(_matches(d, q) for q in filters)]

            # last ordering wins ties last; apply in reverse for a stable multi-key sort
            for q in reversed([q for q in queries if isinstance(q, (OrderAsc, OrderDesc))]):
                docs.sort(key=lambda d: _sort_key(d.get(q.attribute)), reverse=isinstance(q, OrderDesc))

            limit = next((q.value for q in queries if isinstance(q, Limit)), DEFAULT_LIST_LIMIT)
            page = docs[:limit]
            return {"total": len(docs), "documents": [self._expand(db, d) for d in page]}

    def get_document(self, collection: str, document_id: str) -> dict:
        self._schema(collection)
        with self.backend.db() as db:
            return self._expand(db, self._row(db, collection, document_id).to_dict())

    def create_document(self, collection: str, data: dict) -> dict:
        self._check_structure(collection, data)
        with self.backend.db() as db:
            row = Document(collection=collection)
            row.data = self._flatten(collection, data)
            db.add(row)
            db.commit()
            return self._expand(db, row.to_dict())

    def update_document(self, collection: str, document_id: str, data: dict) -> dict:
        self._check_structure(collection, data)
        with self.backend.db() as db:
            row = self._row(db, collection, document_id)
            row.data = {**row.data, **self._flatten(collection, data)}
            row.updated_at = now_iso()
            db.commit()
            return self._expand(db, row.to_dict())

    def delete_document(self, collection: str, document_id: str) -> None:
        self._schema(collection)
        with self.backend.db() as db:
            db.delete(self._row(db, collection, document_id))
            db.commit()


def _sort_key(value: Any):
    # None sorts first; mixed types fall back to their string form
    if value is None:
        return (0, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    return (2, str(value))


class LocalStorageService:
    def __init__(self, backend: LocalBackend):
        self.backend = backend

    def create_file(self, filename: str, content: bytes, mime_type: Optional[str] = None) -> dict:
        if len(content) > self.backend.max_file_size:
            raise BackendError("The file size is larger than the maximum allowed", code="storage_invalid_file_size", status=400)
        name = safe_name(filename)
        with self.backend.db() as db:
            obj = StoredObject(bucket=self.backend.bucket, name=name, mime=sniff_mime(name, mime_type),
                               size=0, sha256="", storage_path="")
            db.add(obj)
            db.flush()
            path, size, digest = write_object(self.backend.root, self.backend.bucket, obj.id, content)
            obj.size, obj.sha256, obj.storage_path = size, digest, str(path)
            db.commit()
            return obj.to_dict()

    def _obj(self, db: Session, file_id: str) -> StoredObject:
        obj = db.get(StoredObject, file_id)
        if not obj or obj.bucket != self.backend.bucket:
            raise BackendError("The requested file could not be found.", code="storage_file_not_found", status=404)
        return obj

    def get_file(self, file_id: str) -> dict:
        with self.backend.db() as db:
            return self._obj(db, file_id).to_dict()

    def delete_file(self, file_id: str) -> None:
        with self.backend.db() as db:
            obj = self._obj(db, file_id)
            path = obj.storage_path
            db.delete(obj)
            db.commit()
        # the blob goes only once its row is gone
        remove_object(path)
