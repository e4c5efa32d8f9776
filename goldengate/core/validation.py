import logging
import os
import re
from typing import Iterable, Optional

from fastapi import HTTPException, UploadFile


logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_EXTENSIONS = {'.pdf', '.jpg', '.jpeg', '.png'}
ALLOWED_MIME_TYPES = {'application/pdf', 'image/jpeg', 'image/jpg', 'image/png'}

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')


def validate_file(file: UploadFile, size: Optional[int] = None) -> None:
    size = size if size is not None else getattr(file, 'size', None)
    if size and size > MAX_FILE_SIZE:
        raise HTTPException(status_code=413, detail=f"File size must be less than {MAX_FILE_SIZE // (1024*1024)}MB")

    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    file_ext = os.path.splitext(file.filename.lower())[1]
    if file_ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Invalid file type. Allowed: PDF, JPG, PNG")

    if file.content_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Allowed: PDF, JPG, PNG")


def secure_filename(filename: str) -> str:
    name, ext = os.path.splitext(os.path.basename(filename.replace('\\', '/')))
    safe_name = re.sub(r'[^a-zA-Z0-9_-]+', '-', name).strip('-')[:50] or 'file'
    return f"{safe_name}{ext.lower()}"


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value and EMAIL_PATTERN.match(value))


def validate_record_id(value: Optional[str], field: str = "id") -> str:
    if not value:
        raise HTTPException(status_code=400, detail=f"{field} is required")
    if not ID_PATTERN.match(value):
        raise HTTPException(status_code=400, detail=f"Invalid {field} format")
    return value


def validate_choice(value: Optional[str], allowed: Iterable[str], field: str) -> str:
    allowed = list(allowed)
    if value not in allowed:
        raise HTTPException(status_code=400, detail=f"Invalid {field}. Allowed: {', '.join(allowed)}")
    return value
