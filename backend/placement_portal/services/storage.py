"""Object storage for resumes, avatars and company logos.

Objects live on local disk under STORAGE_ROOT/<bucket>/<path> and are served
publicly from the /storage static mount.
"""
import asyncio
import logging
import time
from pathlib import Path

from fastapi import UploadFile

from placement_portal.config import settings

logger = logging.getLogger(__name__)

# Configuration
STORAGE_ROOT = Path(settings.storage_dir)

RESUME_BUCKET = "resumes"
AVATAR_BUCKET = "avatars"
LOGO_BUCKET = "company_logos"

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
ALLOWED_EXTENSIONS = {
    RESUME_BUCKET: {".pdf", ".doc", ".docx"},
    AVATAR_BUCKET: IMAGE_EXTENSIONS,
    LOGO_BUCKET: IMAGE_EXTENSIONS,
}


class StorageError(Exception):
    """Raised when an upload is rejected"""
    pass


def _object_path(bucket: str, path: str) -> Path:
    if bucket not in ALLOWED_EXTENSIONS:
        raise StorageError(f"Unknown bucket: {bucket}")
    target = (STORAGE_ROOT / bucket / path).resolve()
    bucket_dir = (STORAGE_ROOT / bucket).resolve()
    if bucket_dir not in target.parents:
        raise StorageError(f"Invalid object path: {path}")
    return target


def validate_upload(bucket: str, filename: str, size: int) -> str:
    """
    Check extension and size of an upload.

    Returns:
        The lowercased file extension

    Raises:
        StorageError: If the file is invalid
    """
    if not filename:
        raise StorageError("No filename provided")

    ext = Path(filename).suffix.lower()
    allowed = ALLOWED_EXTENSIONS.get(bucket, set())
    if ext not in allowed:
        raise StorageError(f"Invalid file type. Allowed: {', '.join(sorted(allowed))}")

    max_size = settings.max_upload_size_mb * 1024 * 1024
    if size > max_size:
        raise StorageError(f"File too large. Maximum size: {settings.max_upload_size_mb}MB")
    if size == 0:
        raise StorageError("File is empty")

    return ext


def object_name(owner_id, kind: str, ext: str) -> str:
    """Build a unique object name, e.g. '<user id>-resume-1712345678901.pdf'."""
    return f"{owner_id}-{kind}-{int(time.time() * 1000)}{ext}"


def ensure_buckets() -> None:
    for bucket in ALLOWED_EXTENSIONS:
        (STORAGE_ROOT / bucket).mkdir(parents=True, exist_ok=True)


def _write(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)


async def upload(bucket: str, path: str, data: bytes) -> str:
    """Store data at bucket/path, replacing any existing object. Returns the stored path."""
    target = _object_path(bucket, path)
    await asyncio.to_thread(_write, target, data)
    logger.info(f"Stored object {bucket}/{path} ({len(data)} bytes)")
    return path


def get_public_url(bucket: str, path: str) -> str:
    return f"{settings.storage_public_url.rstrip('/')}/{bucket}/{path}"


def delete(bucket: str, path: str) -> None:
    """Delete an object; missing objects are ignored."""
    try:
        target = _object_path(bucket, path)
        if target.exists():
            target.unlink()
    except (OSError, StorageError) as e:
        logger.warning(f"Failed to delete object {bucket}/{path}: {str(e)}")


def path_from_public_url(bucket: str, url: str):
    """Reverse of get_public_url; None if the URL is not one of ours."""
    prefix = get_public_url(bucket, "")
    if url and url.startswith(prefix):
        return url[len(prefix):]
    return None


async def upload_file(bucket: str, owner_id, kind: str, file: UploadFile) -> str:
    """
    Validate and store an uploaded file.

    Returns:
        Public URL of the stored object

    Raises:
        StorageError: If the file is invalid
    """
    data = await file.read()
    ext = validate_upload(bucket, file.filename, len(data))
    path = await upload(bucket, object_name(owner_id, kind, ext), data)
    return get_public_url(bucket, path)
