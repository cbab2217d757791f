"""
Page view-models: what each screen of the app renders, built from the
action layer. Category pages and the dashboard are cached per route path
and dropped again by the mutating actions through revalidate_path.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from storeit.backend import AdminClient, create_session_client
from storeit.constants import DEFAULT_SORT, NAV_ITEMS, SORT_TYPES
from storeit.files.service import get_files, get_file, get_total_space_used, owner_id_of
from storeit.pages.views import card, details, user_summary
from storeit.shared.auth import admin_client, require_user, session_secret
from storeit.shared.cache import page_cache, MISSING
from storeit.shared.errors import NotFoundError
from storeit.shared.http import ok
from storeit.utils import (
    convert_file_size, calculate_percentage, get_file_types_params, get_usage_summary,
)

router = APIRouter(prefix="/pages", tags=["Pages"])

RECENT_FILES = 10


@router.get("/layout")
def layout_page(user: dict = Depends(require_user)):
    return ok({"user": user_summary(user), "nav": NAV_ITEMS})


@router.get("/dashboard")
def dashboard_page(
    user: dict = Depends(require_user),
    secret: Optional[str] = Depends(session_secret),
    admin: AdminClient = Depends(admin_client),
):
    key = (user["$id"],)
    cached = page_cache.get("/", key)
    if cached is not MISSING:
        return ok(cached)

    usage = get_total_space_used(create_session_client(secret), user)
    recent = get_files(admin, user, limit=RECENT_FILES)
    page = {
        "usage": usage,
        "summary": get_usage_summary(usage),
        "used": convert_file_size(usage["used"]),
        "percentage": calculate_percentage(usage["used"]),
        "recent": [card(f) for f in recent["documents"]],
    }
    page_cache.set("/", key, page)
    return ok(page)


@router.get("/files/{file_id}")
def file_details_page(file_id: str, user: dict = Depends(require_user), admin: AdminClient = Depends(admin_client)):
    f = get_file(admin, file_id)
    if owner_id_of(f) != user["$id"] and user["email"] not in (f.get("users") or []):
        raise NotFoundError("File not found")
    return ok(details(f))


@router.get("/{category}")
def category_page(
    category: str,
    query: str = Query(""),
    sort: str = Query(""),
    user: dict = Depends(require_user),
    admin: AdminClient = Depends(admin_client),
):
    path = f"/{category}"
    key = (user["$id"], query, sort)
    cached = page_cache.get(path, key)
    if cached is not MISSING:
        return ok(cached)

    types = get_file_types_params(category)
    files = get_files(admin, user, types, query, sort or DEFAULT_SORT)
    total_size = sum(f["size"] for f in files["documents"])
    page = {
        "type": category,
        "total": convert_file_size(total_size, 2),
        "count": files["total"],
        "sortOptions": SORT_TYPES,
        "files": [card(f) for f in files["documents"]],
    }
    page_cache.set(path, key, page)
    return ok(page)
