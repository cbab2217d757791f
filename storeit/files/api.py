from fastapi import APIRouter, UploadFile, File as Upload, Form, Depends, Query
from typing import Optional

from storeit.backend import AdminClient, create_session_client
from storeit.constants import DEFAULT_SORT
from storeit.files.schemas import RenameIn, ShareIn, TotalSpace
from storeit.files.service import (
    upload_file, get_files, get_file, owner_id_of, rename_file, update_file_users,
    delete_file, get_total_space_used,
)
from storeit.shared.auth import admin_client, require_user, session_secret
from storeit.shared.config import settings
from storeit.shared.errors import InvalidInput, NotFoundError
from storeit.shared.http import ok
from storeit.utils import convert_file_size, get_file_types_params

router = APIRouter(prefix="/files", tags=["Files"])

CHUNK = 1024 * 1024

def _read_upload(file: UploadFile) -> bytes:
    buf = bytearray()
    while True:
        chunk = file.file.read(CHUNK)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > settings.MAX_FILE_SIZE:
            raise InvalidInput(
                f"{file.filename} is too large. Max file size is {convert_file_size(settings.MAX_FILE_SIZE)}.",
                code="file_too_large",
            )
    return bytes(buf)

def _visible(file: dict, user: dict) -> bool:
    return owner_id_of(file) == user["$id"] or user["email"] in (file.get("users") or [])

def _owned(admin: AdminClient, user: dict, file_id: str) -> dict:
    f = get_file(admin, file_id)
    if owner_id_of(f) != user["$id"]:
        raise NotFoundError("File not found")
    return f

@router.post("", status_code=201)
def api_upload(
    file: UploadFile = Upload(...),
    path: str = Form("/"),
    user: dict = Depends(require_user),
    admin: AdminClient = Depends(admin_client),
):
    content = _read_upload(file)
    rec = upload_file(
        admin,
        content,
        file.filename or "upload.bin",
        owner_id=user["$id"],
        account_id=user["accountId"],
        path=path,
        mime_type=file.content_type,
    )
    return ok(rec)

@router.get("")
def api_list(
    type: Optional[str] = Query(None, description="documents | images | media | others"),
    query: str = Query("", description="Substring of the file name"),
    sort: str = Query(DEFAULT_SORT, description="field-direction, e.g. size-asc"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    user: dict = Depends(require_user),
    admin: AdminClient = Depends(admin_client),
):
    types = get_file_types_params(type) if type else []
    return ok(get_files(admin, user, types, query, sort or DEFAULT_SORT, limit))

@router.get("/usage")
def api_usage(
    user: dict = Depends(require_user),
    secret: Optional[str] = Depends(session_secret),
):
    space = get_total_space_used(create_session_client(secret), user)
    return ok(TotalSpace.model_validate(space).model_dump())

@router.get("/{file_id}")
def api_file(file_id: str, user: dict = Depends(require_user), admin: AdminClient = Depends(admin_client)):
    f = get_file(admin, file_id)
    if not _visible(f, user):
        raise NotFoundError("File not found")
    return ok(f)

@router.patch("/{file_id}")
def api_rename(
    file_id: str,
    inb: RenameIn,
    user: dict = Depends(require_user),
    admin: AdminClient = Depends(admin_client),
):
    f = _owned(admin, user, file_id)
    extension = f["extension"] if inb.extension is None else inb.extension
    return ok(rename_file(admin, file_id, inb.name, extension, inb.path))

@router.put("/{file_id}/users")
def api_share(
    file_id: str,
    inb: ShareIn,
    user: dict = Depends(require_user),
    admin: AdminClient = Depends(admin_client),
):
    _owned(admin, user, file_id)
    return ok(update_file_users(admin, file_id, [str(e) for e in inb.emails], inb.path))

@router.delete("/{file_id}")
def api_delete(
    file_id: str,
    bucket_file_id: Optional[str] = Query(None, alias="bucketFileId"),
    path: str = Query("/"),
    user: dict = Depends(require_user),
    admin: AdminClient = Depends(admin_client),
):
    f = _owned(admin, user, file_id)
    # the object deleted is always the one this document points at
    if bucket_file_id and bucket_file_id != f["bucketFileId"]:
        raise InvalidInput("bucketFileId does not belong to this file", code="bucket_file_mismatch")
    return ok(delete_file(admin, file_id, f["bucketFileId"], path))
