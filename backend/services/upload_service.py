"""
Upload service — stores profile pictures on local disk.

Files are renamed to "<epoch-millis>-<random><ext>" so client-supplied
names never touch the filesystem; only the extension is kept, and only
for allowed image types. The returned path is relative to the app root
and is served by the /uploads static mount.
"""
import logging
import os
import secrets
import time
from pathlib import Path

from config import settings
from domain.errors import PayloadTooLargeError, ValidationError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


def build_filename(original_name: str) -> str:
    ext = os.path.splitext(original_name or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"unsupported file type '{ext or 'none'}'",
            field="profilePic",
            details={"allowed": sorted(ALLOWED_EXTENSIONS)},
        )
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def save_upload(data: bytes, original_name: str, content_type: str | None) -> str:
    """
    Persist an uploaded image and return its public path.

    Raises:
        ValidationError: empty file or disallowed type
        PayloadTooLargeError: file larger than MAX_UPLOAD_BYTES
    """
    if not data:
        raise ValidationError("No file uploaded", field="profilePic")
    if len(data) > settings.max_upload_bytes:
        raise PayloadTooLargeError(settings.max_upload_bytes)
    if content_type and content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(f"unsupported content type '{content_type}'", field="profilePic")

    filename = build_filename(original_name)
    target = Path(settings.upload_dir) / filename
    await run_blocking(_write_file, target, data)

    logger.info(f"Stored upload {filename} ({len(data)} bytes)")
    return f"uploads/{filename}"
