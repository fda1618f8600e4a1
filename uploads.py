"""
Resume upload handling: PDF only, size-capped, stored on local disk.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF-"
FILE_PREFIX = "resume-"
PUBLIC_PREFIX = "/uploads"


def resume_filename(original_name: str, timestamp: Optional[int] = None) -> str:
    ext = os.path.splitext(original_name or "")[1]
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    return f"{FILE_PREFIX}{timestamp}{ext}"


def store_resume(upload: UploadFile, directory: str, max_bytes: int) -> str:
    """Validate `upload` and write it under `directory`.

    Returns the public path (``/uploads/<name>``). Nothing touches the disk
    unless the file passes every check.
    """
    if upload.content_type != ALLOWED_CONTENT_TYPE:
        logger.info("Rejected upload %r: content type %s", upload.filename, upload.content_type)
        raise HTTPException(status_code=400, detail="Only PDFs allowed")

    contents = upload.file.read(max_bytes + 1)
    if len(contents) > max_bytes:
        logger.info("Rejected upload %r: larger than %d bytes", upload.filename, max_bytes)
        raise HTTPException(status_code=413, detail=f"File too large (limit {max_bytes} bytes)")
    if not contents.startswith(PDF_MAGIC):
        logger.info("Rejected upload %r: not a PDF document", upload.filename)
        raise HTTPException(status_code=400, detail="Only PDFs allowed")

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    # Same-millisecond uploads move to the next free timestamp instead of overwriting.
    timestamp = int(time.time() * 1000)
    while True:
        name = resume_filename(upload.filename, timestamp)
        try:
            with open(target_dir / name, "xb") as fh:
                fh.write(contents)
        except FileExistsError:
            timestamp += 1
            continue
        break
    logger.info("Stored resume %s (%d bytes)", name, len(contents))
    return f"{PUBLIC_PREFIX}/{name}"


def directory_usage(directory: str):
    """Return (file count, total bytes) for the upload directory."""
    path = Path(directory)
    if not path.is_dir():
        return 0, 0
    files = [p for p in path.iterdir() if p.is_file()]
    return len(files), sum(p.stat().st_size for p in files)
