from datetime import datetime
from typing import Optional

from storeit.constants import TOTAL_QUOTA
from storeit.shared.config import settings

KB = 1024
MB = 1024 * 1024
GB = 1024 * 1024 * 1024

DOCUMENT_EXTENSIONS = {
    "pdf", "doc", "docx", "txt", "xls", "xlsx", "csv", "rtf", "ods", "ppt", "odp",
    "md", "html", "htm", "epub", "pages", "fig", "psd", "ai", "indd", "xd",
    "sketch", "afdesign", "afphoto",
}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"}
VIDEO_EXTENSIONS = {"mp4", "avi", "mov", "mkv", "webm"}
AUDIO_EXTENSIONS = {"mp3", "wav", "ogg", "flac"}

ICON_DIR = "/assets/icons"

_EXTENSION_ICONS = {
    "pdf": "file-pdf.svg",
    "doc": "file-doc.svg",
    "docx": "file-docx.svg",
    "csv": "file-csv.svg",
    "txt": "file-txt.svg",
    "xls": "file-document.svg",
    "xlsx": "file-document.svg",
    "svg": "file-image.svg",
}
for _ext in ("mkv", "mov", "avi", "wmv", "mp4", "flv", "webm", "m4v", "3gp"):
    _EXTENSION_ICONS[_ext] = "file-video.svg"
for _ext in ("mp3", "mpeg", "wav", "aac", "flac", "ogg", "wma", "m4a", "aiff", "alac"):
    _EXTENSION_ICONS[_ext] = "file-audio.svg"

_TYPE_ICONS = {
    "image": "file-image.svg",
    "document": "file-document.svg",
    "video": "file-video.svg",
    "audio": "file-audio.svg",
}

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_CATEGORY_TYPES = {
    "documents": ["document"],
    "images": ["image"],
    "media": ["video", "audio"],
    "others": ["other"],
}


def get_file_type(file_name: str) -> tuple[str, str]:
    """
    Classify a file by its extension.
    Returns (type, extension) where type is one of document|image|video|audio|other.
    """
    if "." not in (file_name or ""):
        return "other", ""
    extension = file_name.rsplit(".", 1)[-1].lower()
    if not extension:
        return "other", ""
    if extension in DOCUMENT_EXTENSIONS:
        return "document", extension
    if extension in IMAGE_EXTENSIONS:
        return "image", extension
    if extension in VIDEO_EXTENSIONS:
        return "video", extension
    if extension in AUDIO_EXTENSIONS:
        return "audio", extension
    return "other", extension


def get_file_icon(extension: str, file_type: str) -> str:
    icon = _EXTENSION_ICONS.get(extension) or _TYPE_ICONS.get(file_type, "file-other.svg")
    return f"{ICON_DIR}/{icon}"


def convert_file_size(size_in_bytes: int, digits: Optional[int] = None) -> str:
    # falsy digits (None or 0) round to one place
    digits = digits or 1
    if size_in_bytes < KB:
        return f"{size_in_bytes} Bytes"
    if size_in_bytes < MB:
        return f"{size_in_bytes / KB:.{digits}f} KB"
    if size_in_bytes < GB:
        return f"{size_in_bytes / MB:.{digits}f} MB"
    return f"{size_in_bytes / GB:.{digits}f} GB"


def format_date_time(iso_string: Optional[str]) -> str:
    """'9:05am, 31 Jan' in the timestamp's own offset; an em dash when empty."""
    if not iso_string:
        return "—"
    date = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    hours = date.hour % 12 or 12
    period = "pm" if date.hour >= 12 else "am"
    return f"{hours}:{date.minute:02d}{period}, {date.day} {_MONTHS[date.month - 1]}"


def calculate_percentage(size_in_bytes: int) -> float:
    return round(size_in_bytes / TOTAL_QUOTA * 100, 2)


def construct_file_url(bucket_file_id: str) -> str:
    return (
        f"{settings.APPWRITE_ENDPOINT}/storage/buckets/{settings.APPWRITE_BUCKET}"
        f"/files/{bucket_file_id}/view?project={settings.APPWRITE_PROJECT}"
    )


def construct_download_url(bucket_file_id: str) -> str:
    return (
        f"{settings.APPWRITE_ENDPOINT}/storage/buckets/{settings.APPWRITE_BUCKET}"
        f"/files/{bucket_file_id}/download?project={settings.APPWRITE_PROJECT}"
    )


def get_file_types_params(category: str) -> list[str]:
    return list(_CATEGORY_TYPES.get(category, ["document"]))


def get_usage_summary(total_space: dict) -> list[dict]:
    video, audio = total_space["video"], total_space["audio"]
    return [
        {
            "title": "Documents",
            "size": total_space["document"]["size"],
            "latestDate": total_space["document"]["latestDate"],
            "icon": f"{ICON_DIR}/file-document-light.svg",
            "url": "/documents",
        },
        {
            "title": "Images",
            "size": total_space["image"]["size"],
            "latestDate": total_space["image"]["latestDate"],
            "icon": f"{ICON_DIR}/file-image-light.svg",
            "url": "/images",
        },
        {
            "title": "Media",
            "size": video["size"] + audio["size"],
            "latestDate": max(video["latestDate"], audio["latestDate"]),
            "icon": f"{ICON_DIR}/file-video-light.svg",
            "url": "/media",
        },
        {
            "title": "Others",
            "size": total_space["other"]["size"],
            "latestDate": total_space["other"]["latestDate"],
            "icon": f"{ICON_DIR}/file-other-light.svg",
            "url": "/others",
        },
    ]
