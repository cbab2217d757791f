import pytest

from storeit.backend import AdminClient, FILES
from storeit.backend.local.models import StoredObject
from storeit.files.service import (
    upload_file, get_files, rename_file, update_file_users, delete_file,
)
from storeit.shared.cache import page_cache
from storeit.shared.errors import BackendError, InvalidInput
from storeit.utils import convert_file_size


class _Failing:
    """Proxy that fails one named method and forwards the rest."""

    def __init__(self, inner, method):
        self._inner = inner
        self._method = method

    def __getattr__(self, name):
        if name == self._method:
            def _boom(*args, **kwargs):
                raise BackendError("backend unavailable", status=503)
            return _boom
        return getattr(self._inner, name)


def _objects(backend):
    with backend.db() as db:
        return db.query(StoredObject).count()


def _documents(admin):
    return admin.databases.list_documents(FILES)["total"]


def test_upload_report_pdf(admin, user):
    doc = upload_file(admin, b"x" * 2048, "report.pdf", user["$id"], user["accountId"], "/documents")
    assert doc["type"] == "document"
    assert doc["extension"] == "pdf"
    assert doc["size"] == 2048
    assert doc["users"] == []
    assert doc["owner"]["fullName"] == "Ada Lovelace"
    assert doc["url"].endswith(f"/files/{doc['bucketFileId']}/view?project=storeit")

    listed = get_files(admin, user, ["document"])
    assert [d["$id"] for d in listed["documents"]] == [doc["$id"]]
    assert convert_file_size(doc["size"]) == "2.0 KB"

def test_upload_revalidates_path(admin, user):
    page_cache.set("/documents", "k", {"stale": True})
    upload_file(admin, b"abc", "notes.txt", user["$id"], user["accountId"], "/documents")
    assert not page_cache.is_cached("/documents")

def test_upload_rolls_back_object_when_metadata_write_fails(backend, admin, user):
    broken = AdminClient(account=admin.account, databases=_Failing(admin.databases, "create_document"),
                         storage=admin.storage)
    page_cache.set("/documents", "k", {"stale": True})

    with pytest.raises(BackendError):
        upload_file(broken, b"abc", "notes.txt", user["$id"], user["accountId"], "/documents")

    assert _objects(backend) == 0
    assert _documents(admin) == 0
    assert page_cache.is_cached("/documents")

def test_upload_too_large_writes_nothing(backend, admin, user):
    with pytest.raises(InvalidInput):
        upload_file(admin, b"x" * (1024 * 1024 + 1), "big.bin", user["$id"], user["accountId"], "/")
    assert _objects(backend) == 0

def test_upload_then_delete_leaves_nothing(backend, admin, user):
    doc = upload_file(admin, b"abc", "pic.png", user["$id"], user["accountId"], "/images")
    assert delete_file(admin, doc["$id"], doc["bucketFileId"], "/images") == {"status": "success"}
    assert _objects(backend) == 0
    assert _documents(admin) == 0

def test_failed_metadata_delete_keeps_object_and_cache(backend, admin, user):
    doc = upload_file(admin, b"abc", "pic.png", user["$id"], user["accountId"], "/images")
    broken = AdminClient(account=admin.account, databases=_Failing(admin.databases, "delete_document"),
                         storage=admin.storage)
    page_cache.set("/images", "k", {"stale": True})

    with pytest.raises(BackendError):
        delete_file(broken, doc["$id"], doc["bucketFileId"], "/images")

    assert admin.storage.get_file(doc["bucketFileId"])["$id"] == doc["bucketFileId"]
    assert _documents(admin) == 1
    assert page_cache.is_cached("/images")

def test_failed_object_delete_orphans_object(backend, admin, user):
    doc = upload_file(admin, b"abc", "pic.png", user["$id"], user["accountId"], "/images")
    broken = AdminClient(account=admin.account, databases=admin.databases,
                         storage=_Failing(admin.storage, "delete_file"))

    with pytest.raises(BackendError):
        delete_file(broken, doc["$id"], doc["bucketFileId"], "/images")

    assert _documents(admin) == 0
    assert _objects(backend) == 1

def test_rename_changes_only_the_name(admin, user):
    doc = upload_file(admin, b"abc", "draft.txt", user["$id"], user["accountId"], "/")
    renamed = rename_file(admin, doc["$id"], "final", "txt", "/documents")
    assert renamed["name"] == "final.txt"
    assert renamed["extension"] == "txt"
    assert renamed["bucketFileId"] == doc["bucketFileId"]
    assert renamed["owner"]["$id"] == user["$id"]

def test_share_replaces_list_without_dedup(admin, user):
    doc = upload_file(admin, b"abc", "draft.txt", user["$id"], user["accountId"], "/")
    update_file_users(admin, doc["$id"], ["a@example.com", "b@example.com"], "/")
    shared = update_file_users(admin, doc["$id"], ["c@example.com", "c@example.com"], "/")
    assert shared["users"] == ["c@example.com", "c@example.com"]

def test_listing_includes_files_shared_with_user(admin, user):
    from storeit.backend import USERS
    other = admin.databases.create_document(USERS, {
        "fullName": "Grace Hopper", "email": "grace@example.com",
        "avatar": "https://example.com/g.png", "accountId": "acct-grace",
    })
    doc = upload_file(admin, b"abc", "plan.md", other["$id"], other["accountId"], "/")
    assert get_files(admin, user)["total"] == 0
    update_file_users(admin, doc["$id"], [user["email"]], "/")
    assert [d["$id"] for d in get_files(admin, user)["documents"]] == [doc["$id"]]

def test_listing_search_sort_and_limit(admin, user):
    for name, size in [("alpha.txt", 30), ("beta.txt", 10), ("gamma.txt", 20)]:
        upload_file(admin, b"x" * size, name, user["$id"], user["accountId"], "/")
    by_size = get_files(admin, user, sort="size-asc")
    assert [d["name"] for d in by_size["documents"]] == ["beta.txt", "gamma.txt", "alpha.txt"]
    assert [d["name"] for d in get_files(admin, user, search_text="amm")["documents"]] == ["gamma.txt"]
    limited = get_files(admin, user, sort="name-desc", limit=2)
    assert limited["total"] == 3
    assert [d["name"] for d in limited["documents"]] == ["gamma.txt", "beta.txt"]

def test_unknown_sort_field_fails_at_backend(admin, user):
    with pytest.raises(BackendError) as exc:
        get_files(admin, user, sort="colour-asc")
    assert exc.value.status == 400
