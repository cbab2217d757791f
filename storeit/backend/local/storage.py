from pathlib import Path
from hashlib import sha256
from typing import Tuple
import mimetypes

def safe_name(name: str) -> str:
    return Path(name).name.replace("..", "_") or "upload.bin"

def sniff_mime(filename: str, fallback: str | None) -> str:
    guess, _ = mimetypes.guess_type(filename)
    return fallback or guess or "application/octet-stream"

def bucket_dir(root: Path, bucket: str) -> Path:
    path = root / "buckets" / safe_name(bucket)
    path.mkdir(parents=True, exist_ok=True)
    return path

def write_object(root: Path, bucket: str, object_id: str, content: bytes) -> Tuple[Path, int, str]:
    """
    Write bytes under <root>/buckets/<bucket>/<object_id> and return (path, size, sha256hex).
    The object id, not the client filename, names the blob on disk.
    """
    target = bucket_dir(root, bucket) / object_id
    target.write_bytes(content)
    return target, len(content), sha256(content).hexdigest()

def remove_object(path: str) -> None:
    Path(path).unlink(missing_ok=True)
