"""
Profile-picture upload.

POST /upload (multipart, field "profilePic") -> {imageUrl}
The stored file is served back under /uploads/<name> by the static mount
registered in main.py.
"""
import logging

from fastapi import APIRouter, Depends, File, UploadFile

from config import settings
from middleware.rate_limit import rate_limit
from services import upload_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("/upload")
async def upload_profile_pic(
    profile_pic: UploadFile = File(..., alias="profilePic", description="Profile picture image"),
    _rate=Depends(rate_limit(max_requests=10, window_seconds=60)),
):
    # One byte past the cap is enough to tell an oversized file apart
    data = await profile_pic.read(settings.max_upload_bytes + 1)
    image_url = await upload_service.save_upload(
        data,
        profile_pic.filename or "",
        profile_pic.content_type,
    )
    return {"imageUrl": image_url}
