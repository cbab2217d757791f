from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from storeit.backend import local_backend

router = APIRouter(prefix="/storage/buckets", tags=["Storage (local)"])

def _serve(bucket_id: str, file_id: str, disposition: str):
    obj = local_backend().find_object(bucket_id, file_id)
    if not obj:
        raise HTTPException(404, "File not found")
    return FileResponse(
        path=obj.storage_path,
        media_type=obj.mime,
        filename=obj.name,
        content_disposition_type=disposition,
    )

# `project` is accepted so the constructed URLs resolve unchanged
@router.get("/{bucket_id}/files/{file_id}/view")
def view_file(bucket_id: str, file_id: str, project: str | None = None):
    return _serve(bucket_id, file_id, "inline")

@router.get("/{bucket_id}/files/{file_id}/download")
def download_file(bucket_id: str, file_id: str, project: str | None = None):
    return _serve(bucket_id, file_id, "attachment")
