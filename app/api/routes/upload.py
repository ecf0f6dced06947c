import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.core import messages
from app.core.config import settings
from app.dependencies import require_admin

router = APIRouter(prefix="/upload", tags=["upload"], dependencies=[Depends(require_admin)])
logger = logging.getLogger("admin")

UPLOAD_DIR = "quiz-images"
ALLOWED_IMAGES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def _upload_root() -> Path:
    return settings.media_root / UPLOAD_DIR


@router.post("")
async def upload_image(
    kind: str = Form(default="question", pattern="^(question|explanation|message)$"),
    file: Optional[UploadFile] = File(default=None),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail=messages.FILE_REQUIRED)
    if file.content_type not in ALLOWED_IMAGES:
        raise HTTPException(status_code=400, detail=messages.UNSUPPORTED_IMAGE)

    # One byte past the limit is enough to reject
    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=400, detail=messages.FILE_TOO_LARGE)

    ext = Path(file.filename).suffix.lower() or ALLOWED_IMAGES[file.content_type]
    filename = f"{kind}-{uuid.uuid4()}{ext}"
    target_dir = _upload_root()
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / filename).write_bytes(data)

    url = f"/media/{UPLOAD_DIR}/{filename}"
    logger.info("Uploaded image kind=%s file=%s bytes=%s", kind, filename, len(data))
    return {"url": url, "filename": filename, "content_type": file.content_type}


@router.delete("")
async def delete_image(url: Optional[str] = None):
    if not url:
        raise HTTPException(status_code=400, detail=messages.FILE_REQUIRED)
    # Only bare file names inside the upload directory are accepted
    filename = Path(url).name
    target = _upload_root() / filename
    if not filename or not target.is_file():
        raise HTTPException(status_code=404, detail=messages.FILE_NOT_FOUND)
    target.unlink()
    logger.info("Deleted image file=%s", filename)
    return {"success": True}
