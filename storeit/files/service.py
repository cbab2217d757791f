import logging
from typing import List, Optional, Sequence

from storeit.backend import AdminClient, SessionClient, FILES
from storeit.backend.query import Equal
from storeit.constants import DEFAULT_SORT, FILE_TYPES, TOTAL_QUOTA
from storeit.files.queries import create_queries
from storeit.files.saga import Saga
from storeit.shared.cache import revalidate_path
from storeit.shared.config import settings
from storeit.shared.errors import StoreItError, InvalidInput, NotFoundError
from storeit.utils import construct_file_url, get_file_type, convert_file_size

log = logging.getLogger(__name__)


def upload_file(
    admin: AdminClient,
    content: bytes,
    filename: str,
    owner_id: str,
    account_id: str,
    path: str,
    mime_type: Optional[str] = None,
) -> dict:
    """
    Store the bytes, then write the metadata document that points at them.
    If the document write fails the stored object is deleted again and the
    error propagates; the page at `path` is revalidated only on success.
    """
    if len(content) > settings.MAX_FILE_SIZE:
        raise InvalidInput(
            f"{filename} is too large. Max file size is {convert_file_size(settings.MAX_FILE_SIZE)}.",
            code="file_too_large",
        )

    saga = Saga("upload")
    try:
        bucket_file = saga.step(
            "store object",
            lambda: admin.storage.create_file(filename, content, mime_type),
            compensate=lambda obj: admin.storage.delete_file(obj["$id"]),
        )
        file_type, extension = get_file_type(bucket_file["name"])
        document = {
            "type": file_type,
            "name": bucket_file["name"],
            "url": construct_file_url(bucket_file["$id"]),
            "extension": extension,
            "size": bucket_file["sizeOriginal"],
            "owner": owner_id,
            "accountId": account_id,
            "users": [],
            "bucketFileId": bucket_file["$id"],
        }
        new_file = saga.step(
            "write metadata",
            lambda: admin.databases.create_document(FILES, document),
        )
        saga.commit()
    except StoreItError as e:
        log.error(f"Failed to upload file: {e}")
        raise

    revalidate_path(path)
    return new_file


def get_files(
    admin: AdminClient,
    current_user: dict,
    types: Sequence[str] = (),
    search_text: str = "",
    sort: Optional[str] = DEFAULT_SORT,
    limit: Optional[int] = None,
) -> dict:
    queries = create_queries(current_user, types, search_text, sort, limit)
    try:
        return admin.databases.list_documents(FILES, queries)
    except StoreItError as e:
        log.error(f"Failed to get files: {e}")
        raise


def get_file(admin: AdminClient, file_id: str) -> dict:
    try:
        return admin.databases.get_document(FILES, file_id)
    except StoreItError as e:
        if e.status == 404:
            raise NotFoundError("File not found") from e
        raise


def owner_id_of(file: dict) -> Optional[str]:
    owner = file.get("owner")
    return owner.get("$id") if isinstance(owner, dict) else owner


def rename_file(admin: AdminClient, file_id: str, name: str, extension: str, path: str) -> dict:
    new_name = f"{name}.{extension}"
    try:
        updated = admin.databases.update_document(FILES, file_id, {"name": new_name})
    except StoreItError as e:
        log.error(f"Failed to rename file: {e}")
        raise
    revalidate_path(path)
    return updated


def update_file_users(admin: AdminClient, file_id: str, emails: List[str], path: str) -> dict:
    """Replace the shared-user list wholesale."""
    if len(set(emails)) != len(emails):
        # kept as given; the list is not de-duplicated
        log.warning("share list for %s contains duplicate emails", file_id)
    try:
        updated = admin.databases.update_document(FILES, file_id, {"users": list(emails)})
    except StoreItError as e:
        log.error(f"Failed to share file: {e}")
        raise
    revalidate_path(path)
    return updated


def delete_file(admin: AdminClient, file_id: str, bucket_file_id: str, path: str) -> dict:
    """
    Drop the metadata document, then the stored object. A failed document
    delete leaves everything untouched; a failed object delete leaves an
    orphaned object behind.
    """
    saga = Saga("delete")
    try:
        saga.step("delete metadata", lambda: admin.databases.delete_document(FILES, file_id))
        saga.step("delete object", lambda: admin.storage.delete_file(bucket_file_id))
        saga.commit()
    except StoreItError as e:
        if saga.orphans:
            log.warning(f"stored object {bucket_file_id} is orphaned")
        log.error(f"Failed to delete file: {e}")
        raise

    revalidate_path(path)
    return {"status": "success"}


def empty_total_space() -> dict:
    space = {t: {"size": 0, "latestDate": ""} for t in FILE_TYPES}
    space["used"] = 0
    space["all"] = TOTAL_QUOTA
    return space


def get_total_space_used(session: SessionClient, current_user: dict) -> dict:
    """
    Per-type and total bytes of the files the user owns (shared files excluded),
    plus the latest update per type. Only the first page of documents is
    counted.
    """
    try:
        files = session.databases.list_documents(FILES, [Equal("owner", [current_user["$id"]])])
    except StoreItError as e:
        log.error(f"Error calculating total space used: {e}")
        raise

    if files["total"] > len(files["documents"]):
        log.warning(
            "usage for %s counts %d of %d files",
            current_user["$id"], len(files["documents"]), files["total"],
        )

    total_space = empty_total_space()
    for file in files["documents"]:
        bucket = total_space[file["type"] if file.get("type") in FILE_TYPES else "other"]
        bucket["size"] += file["size"]
        total_space["used"] += file["size"]
        # fixed-width ISO timestamps compare correctly as strings
        if not bucket["latestDate"] or file["$updatedAt"] > bucket["latestDate"]:
            bucket["latestDate"] = file["$updatedAt"]

    return total_space
