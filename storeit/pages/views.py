from storeit.constants import ACTIONS_DROPDOWN_ITEMS
from storeit.utils import (
    convert_file_size, format_date_time, get_file_icon, construct_download_url,
)


def thumbnail(file_type: str, extension: str, url: str = "") -> dict:
    # svg previews fall back to the icon
    is_image = file_type == "image" and extension != "svg"
    return {"src": url if is_image else get_file_icon(extension, file_type), "isImage": is_image}


def owner_name(file: dict) -> str:
    owner = file.get("owner")
    return owner.get("fullName", "") if isinstance(owner, dict) else ""


def card(file: dict) -> dict:
    return {
        "id": file["$id"],
        "bucketFileId": file["bucketFileId"],
        "name": file["name"],
        "url": file["url"],
        "downloadUrl": construct_download_url(file["bucketFileId"]),
        "thumbnail": thumbnail(file["type"], file["extension"], file["url"]),
        "size": convert_file_size(file["size"]),
        "createdAt": format_date_time(file["$createdAt"]),
        "owner": owner_name(file),
        "actions": ACTIONS_DROPDOWN_ITEMS,
    }


def details(file: dict) -> dict:
    return {
        "id": file["$id"],
        "name": file["name"],
        "thumbnail": thumbnail(file["type"], file["extension"], file["url"]),
        "createdAt": format_date_time(file["$createdAt"]),
        "format": file["extension"],
        "size": convert_file_size(file["size"]),
        "owner": owner_name(file),
        "lastEdit": format_date_time(file["$updatedAt"]),
        "sharedWith": list(file.get("users") or []),
    }


def user_summary(user: dict) -> dict:
    return {
        "id": user["$id"],
        "accountId": user["accountId"],
        "fullName": user["fullName"],
        "email": user["email"],
        "avatar": user["avatar"],
    }
