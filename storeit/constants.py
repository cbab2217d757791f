from storeit.shared.config import settings

FILE_TYPES = ("document", "image", "video", "audio", "other")

TOTAL_QUOTA = settings.TOTAL_QUOTA  # 2 GiB unless overridden

AVATAR_PLACEHOLDER_URL = settings.AVATAR_PLACEHOLDER_URL

DEFAULT_SORT = "$createdAt-desc"

NAV_ITEMS = [
    {"name": "Dashboard", "icon": "/assets/icons/dashboard.svg", "url": "/"},
    {"name": "Documents", "icon": "/assets/icons/documents.svg", "url": "/documents"},
    {"name": "Images", "icon": "/assets/icons/images.svg", "url": "/images"},
    {"name": "Media", "icon": "/assets/icons/video.svg", "url": "/media"},
    {"name": "Others", "icon": "/assets/icons/others.svg", "url": "/others"},
]

SORT_TYPES = [
    {"label": "Date created (newest)", "value": "$createdAt-desc"},
    {"label": "Created Date (oldest)", "value": "$createdAt-asc"},
    {"label": "Name (A-Z)", "value": "name-asc"},
    {"label": "Name (Z-A)", "value": "name-desc"},
    {"label": "Size (Highest)", "value": "size-desc"},
    {"label": "Size (Lowest)", "value": "size-asc"},
]

ACTIONS_DROPDOWN_ITEMS = [
    {"label": "Rename", "icon": "/assets/icons/edit.svg", "value": "rename"},
    {"label": "Details", "icon": "/assets/icons/info.svg", "value": "details"},
    {"label": "Share", "icon": "/assets/icons/share.svg", "value": "share"},
    {"label": "Download", "icon": "/assets/icons/download.svg", "value": "download"},
    {"label": "Delete", "icon": "/assets/icons/delete.svg", "value": "delete"},
]
