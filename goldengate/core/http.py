import re

from fastapi import Request
from fastapi.responses import Response

from .config import Config


def get_client_ip(request: Request) -> str:
    """Best-effort client address, preferring proxy headers.

    Entries left of the ones our own proxies appended to X-Forwarded-For are
    client supplied, so the address is read that many hops from the right.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
        if hops:
            return hops[-min(max(Config.TRUSTED_PROXY_HOPS, 1), len(hops))]

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    vercel_forwarded_for = request.headers.get("x-vercel-forwarded-for")
    if vercel_forwarded_for:
        return vercel_forwarded_for.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def slugify(value: str | None, fallback: str = "document") -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")
    return slug or fallback


def pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache",
        },
    )


def format_currency(amount) -> str:
    try:
        return f"${float(amount):,.0f}"
    except (TypeError, ValueError):
        return "$0"
