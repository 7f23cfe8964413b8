# app/core/storage.py

import os
import re
import time
from typing import Optional

from fastapi import UploadFile, HTTPException
from loguru import logger

from app.core.config import settings
from app.core.constants import ALLOWED_UPLOAD_EXTENSIONS, UPLOADS_URL_PREFIX


def ensure_upload_dir() -> str:
    upload_dir = os.path.abspath(settings.UPLOAD_DIR)
    if not os.path.isdir(upload_dir):
        logger.info(f"📁 Creating uploads directory at {upload_dir}")
        os.makedirs(upload_dir, mode=0o755, exist_ok=True)
    return upload_dir


def _safe_filename(original: str) -> str:
    # keep letters, digits and dots; everything else becomes "_"
    cleaned = re.sub(r"[^a-zA-Z0-9.]", "_", os.path.basename(original))
    return f"{int(time.time() * 1000)}-{cleaned}"


async def save_upload(file: Optional[UploadFile]) -> str:
    """
    Stores an attachment on local disk.
    - Validates the extension against the allow-list.
    - Caps the size at MAX_UPLOAD_SIZE.
    - Returns the public URL path ("/uploads/<name>"), or "" when no file was sent.
    """
    if file is None or not file.filename:
        return ""

    ext = os.path.splitext(file.filename)[1].lower()
    if ext not in ALLOWED_UPLOAD_EXTENSIONS:
        raise HTTPException(400, "Invalid file type. Only images and documents are allowed.")

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(400, f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB.")

    filename = _safe_filename(file.filename)
    path = os.path.join(ensure_upload_dir(), filename)

    try:
        with open(path, "wb") as fh:
            fh.write(content)
    except OSError as e:
        logger.error(f"❌ Upload write failed for {path}: {e}")
        raise HTTPException(500, "Failed to store uploaded file.")

    return f"{UPLOADS_URL_PREFIX}/{filename}"
