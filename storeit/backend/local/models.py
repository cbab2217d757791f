from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from storeit.shared.db import Base
import uuid, json

def _id20() -> str:
    return uuid.uuid4().hex[:20]

def utcnow() -> datetime:
    # naive UTC; SQLite drops tzinfo on the way back anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")

class Account(Base):
    __tablename__ = "accounts"
    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=_id20)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class EmailToken(Base):
    __tablename__ = "email_tokens"
    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=_id20)
    user_id: Mapped[str] = mapped_column(String(20), index=True)
    secret_hash: Mapped[str] = mapped_column(String(60))
    expires_at: Mapped[datetime] = mapped_column(DateTime)

class AccountSession(Base):
    __tablename__ = "sessions"
    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=_id20)
    user_id: Mapped[str] = mapped_column(String(20), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime)

class Document(Base):
    __tablename__ = "documents"
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(20), unique=True, index=True, default=_id20)
    collection: Mapped[str] = mapped_column(String(64), index=True)
    # attributes as JSON text; system attributes live in their own columns
    data_json: Mapped[str] = mapped_column(Text, default="{}")
    created_at: Mapped[str] = mapped_column(String(29), default=now_iso)
    updated_at: Mapped[str] = mapped_column(String(29), default=now_iso)

    @property
    def data(self) -> dict:
        return json.loads(self.data_json or "{}")

    @data.setter
    def data(self, val: dict):
        self.data_json = json.dumps(val or {})

    def to_dict(self) -> dict:
        return {
            "$id": self.id,
            "$collectionId": self.collection,
            "$createdAt": self.created_at,
            "$updatedAt": self.updated_at,
            **self.data,
        }

class StoredObject(Base):
    __tablename__ = "objects"
    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=_id20)
    bucket: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(255))
    mime: Mapped[str] = mapped_column(String(127))
    size: Mapped[int] = mapped_column(Integer)
    sha256: Mapped[str] = mapped_column(String(64))
    storage_path: Mapped[str] = mapped_column(Text)
    created_at: Mapped[str] = mapped_column(String(29), default=now_iso)

    def to_dict(self) -> dict:
        return {
            "$id": self.id,
            "bucketId": self.bucket,
            "$createdAt": self.created_at,
            "name": self.name,
            "mimeType": self.mime,
            "sizeOriginal": self.size,
            "signature": self.sha256,
        }
