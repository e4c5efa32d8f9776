import logging
from xml.sax.saxutils import escape

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from ..core.config import Config
from ..services import content_service


logger = logging.getLogger(__name__)

router = APIRouter(tags=["seo"])

# (path, changefreq, priority)
STATIC_PAGES = [
    ("", "weekly", "1.0"),
    ("/about", "monthly", "0.8"),
    ("/services", "monthly", "0.9"),
    ("/properties", "daily", "0.9"),
    ("/projects", "weekly", "0.8"),
    ("/testimonials", "monthly", "0.7"),
    ("/contact", "monthly", "0.8"),
    ("/get-started", "monthly", "0.9"),
    ("/get-started/buyer", "monthly", "0.8"),
    ("/get-started/seller", "monthly", "0.8"),
    ("/get-started/investor", "monthly", "0.8"),
]

DYNAMIC_SECTIONS = [
    ("properties", "/properties", "weekly", "0.8"),
    ("projects", "/projects", "monthly", "0.7"),
    ("services", "/services", "monthly", "0.8"),
]


def _url_entry(loc: str, changefreq: str, priority: str, lastmod: str | None = None) -> str:
    lines = ["  <url>", f"    <loc>{escape(loc)}</loc>"]
    if lastmod:
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
    lines.append(f"    <changefreq>{changefreq}</changefreq>")
    lines.append(f"    <priority>{priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def build_sitemap() -> str:
    base = Config.SITE_URL
    entries = [_url_entry(f"{base}{path}", freq, priority) for path, freq, priority in STATIC_PAGES]

    try:
        dynamic = content_service.sitemap_entries()
    except Exception as e:
        logger.error(f"Error loading sitemap entries: {e}", exc_info=True)
        dynamic = {}

    for key, prefix, freq, priority in DYNAMIC_SECTIONS:
        for item in dynamic.get(key, []):
            if not item.get("slug"):
                continue
            lastmod = (item.get("updated_at") or "")[:10] or None
            entries.append(_url_entry(f"{base}{prefix}/{item['slug']}", freq, priority, lastmod))

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(entries)
        + "\n</urlset>\n"
    )


@router.get("/sitemap.xml")
async def sitemap():
    return Response(
        content=build_sitemap(),
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@router.get("/robots.txt")
async def robots():
    body = "\n".join([
        "User-agent: *",
        "Allow: /",
        "",
        "Disallow: /admin/",
        "Disallow: /studio/",
        "Disallow: /investor/",
        "Disallow: /resource/",
        "",
        f"Sitemap: {Config.SITE_URL}/sitemap.xml",
        "",
        "Crawl-delay: 1",
        "",
    ])
    return PlainTextResponse(body, headers={"Cache-Control": "public, max-age=86400"})
