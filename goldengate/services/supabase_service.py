import base64
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from ..core.config import Config


logger = logging.getLogger(__name__)

_client: Optional[Client] = None

DATA_URL_PATTERN = re.compile(r'^data:(image/[\w.+-]+);base64,(.+)$', re.DOTALL)


def get_client() -> Client:
    """Process-wide Supabase client, created on first use with the service key."""
    global _client
    if _client is None:
        Config.validate()
        _client = create_client(Config.SUPABASE_URL, Config.SUPABASE_SERVICE_KEY)
    return _client


def reset_client() -> None:
    global _client
    _client = None


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def fetch_all(
    table: str,
    *,
    columns: str = "*",
    filters: Optional[Dict[str, Any]] = None,
    in_filters: Optional[Dict[str, List[Any]]] = None,
    order: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = None,
) -> List[dict]:
    query = get_client().table(table).select(columns)
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    for column, options in (in_filters or {}).items():
        query = query.in_(column, list(options))
    if order:
        query = query.order(order, desc=desc)
    if limit is not None:
        query = query.limit(limit)
    result = query.execute()
    return result.data or []


def fetch_one(table: str, *, columns: str = "*", **filters: Any) -> Optional[dict]:
    rows = fetch_all(table, columns=columns, filters=filters, limit=1)
    return rows[0] if rows else None


def fetch_by_ids(table: str, ids: List[str], *, columns: str = "*") -> Dict[str, dict]:
    """Rows keyed by id, for resolving references without a join."""
    unique_ids = [i for i in dict.fromkeys(ids) if i]
    if not unique_ids:
        return {}
    rows = fetch_all(table, columns=columns, in_filters={"id": unique_ids})
    return {row["id"]: row for row in rows}


def insert_row(table: str, values: Dict[str, Any]) -> dict:
    record = dict(values)
    record.setdefault("id", new_id())
    result = get_client().table(table).insert(record).execute()
    if not result.data:
        raise RuntimeError(f"Insert into {table} returned no data")
    return result.data[0]


def update_row(table: str, row_id: str, values: Dict[str, Any]) -> List[dict]:
    result = get_client().table(table).update(values).eq("id", row_id).execute()
    return result.data or []


def _upload_error(upload_result) -> Optional[str]:
    if isinstance(upload_result, dict):
        return upload_result.get('error') or upload_result.get('message')
    if hasattr(upload_result, 'error') and getattr(upload_result, 'error'):
        return str(getattr(upload_result, 'error'))
    status_code = getattr(upload_result, 'status_code', None)
    if isinstance(status_code, int) and status_code >= 400:
        return f"HTTP {status_code}: {getattr(upload_result, 'text', None)}"
    return None


def upload_file(path: str, file_bytes: bytes, content_type: str) -> str:
    """Store bytes in the configured bucket and return the object path."""
    upload_result = get_client().storage.from_(Config.SUPABASE_BUCKET).upload(
        path=path,
        file=file_bytes,
        file_options={
            "content-type": content_type,
            "cache-control": "3600",
        },
    )
    upload_error = _upload_error(upload_result)
    if upload_error:
        raise RuntimeError(f"Supabase upload error: {upload_error}")
    return path


def create_signed_url(path: str, *, expires_in_seconds: int = 3600) -> Optional[str]:
    signed_result = get_client().storage.from_(Config.SUPABASE_BUCKET).create_signed_url(path, expires_in_seconds)
    if isinstance(signed_result, dict):
        return (
            signed_result.get('signedURL')
            or signed_result.get('signed_url')
            or signed_result.get('signedUrl')
            or signed_result.get('url')
        )
    return str(signed_result) if signed_result else None


def decode_data_url_image(data_url: Optional[str]) -> Optional[tuple[bytes, str]]:
    """Decode a `data:image/...;base64,` URL into (bytes, mime type)."""
    if not data_url:
        return None
    match = DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        return None
    try:
        return base64.b64decode(match.group(2), validate=True), match.group(1)
    except (ValueError, TypeError):
        return None


def store_signature_image(data_url: Optional[str], path: str) -> Optional[str]:
    """Upload a drawn signature; returns the stored path or None if it could not be stored."""
    decoded = decode_data_url_image(data_url)
    if decoded is None:
        return None
    image_bytes, mime_type = decoded
    try:
        return upload_file(path, image_bytes, mime_type)
    except Exception as e:
        logger.error(f"Failed to upload signature image {path}: {e}")
        return None
