"""Marketing and opportunity content read from the content store.

Every query takes a `preview` flag: editors in preview mode also see
rows that are not yet published.
"""

import logging
from typing import Dict, List, Optional

from . import supabase_service as store
from ..models import ProspectusStatus


logger = logging.getLogger(__name__)

PROPERTY_LIST_COLUMNS = "id, title, slug, price, address, bedrooms, bathrooms, square_feet, featured_image, status, property_type, published_at"
PROJECT_LIST_COLUMNS = "id, title, slug, before_image, after_image, short_description, project_type, completion_date"
SERVICE_LIST_COLUMNS = "id, title, slug, short_description, icon, sort_order"
TESTIMONIAL_COLUMNS = "id, client_name, client_title, quote, rating, client_image, featured, date"
TEAM_MEMBER_COLUMNS = "id, name, role, bio, photo, email, phone, sort_order"
PROSPECTUS_LIST_COLUMNS = "id, title, slug, status, project_type, summary, location, cover_image, total_raise, minimum_investment, target_return, projected_timeline, close_date"


def _published(preview: bool) -> Dict[str, bool]:
    return {} if preview else {"published": True}


def _list(table: str, columns: str, preview: bool, order: str, desc: bool) -> List[dict]:
    return store.fetch_all(table, columns=columns, filters=_published(preview), order=order, desc=desc)


def _by_slug(table: str, slug: str, preview: bool) -> Optional[dict]:
    return store.fetch_one(table, slug=slug, **_published(preview))


def _ordered_refs(ids: Optional[List[str]], rows: Dict[str, dict]) -> List[dict]:
    # Keep the editor's ordering and drop dangling references
    return [rows[i] for i in (ids or []) if i in rows]


def get_site_settings() -> dict:
    return store.fetch_one("site_settings") or {}


def get_homepage(preview: bool = False) -> Optional[dict]:
    homepage = store.fetch_one("homepage")
    if homepage is None:
        return None

    def resolve(table: str, columns: str, ids: Optional[List[str]]) -> List[dict]:
        rows = store.fetch_by_ids(table, ids or [], columns=columns + ", published")
        if not preview:
            rows = {k: v for k, v in rows.items() if v.get("published")}
        return _ordered_refs(ids, rows)

    page = dict(homepage)
    page["featured_services"] = resolve("services", SERVICE_LIST_COLUMNS, homepage.get("featured_service_ids"))
    page["featured_testimonials"] = resolve("testimonials", TESTIMONIAL_COLUMNS, homepage.get("featured_testimonial_ids"))
    page["featured_properties"] = resolve("properties", PROPERTY_LIST_COLUMNS, homepage.get("featured_property_ids"))
    project_id = homepage.get("featured_project_id")
    projects = resolve("projects", PROJECT_LIST_COLUMNS, [project_id] if project_id else [])
    page["featured_project"] = projects[0] if projects else None
    return page


def list_properties(preview: bool = False) -> List[dict]:
    return _list("properties", PROPERTY_LIST_COLUMNS, preview, "published_at", True)


def get_property(slug: str, preview: bool = False) -> Optional[dict]:
    return _by_slug("properties", slug, preview)


def list_projects(preview: bool = False) -> List[dict]:
    return _list("projects", PROJECT_LIST_COLUMNS, preview, "completion_date", True)


def get_project(slug: str, preview: bool = False) -> Optional[dict]:
    return _by_slug("projects", slug, preview)


def list_services(preview: bool = False) -> List[dict]:
    return _list("services", SERVICE_LIST_COLUMNS, preview, "sort_order", False)


def get_service(slug: str, preview: bool = False) -> Optional[dict]:
    return _by_slug("services", slug, preview)


def list_testimonials(preview: bool = False) -> List[dict]:
    return _list("testimonials", TESTIMONIAL_COLUMNS, preview, "date", True)


def list_team_members(preview: bool = False) -> List[dict]:
    return _list("team_members", TEAM_MEMBER_COLUMNS, preview, "sort_order", False)


def get_page(slug: str, preview: bool = False) -> Optional[dict]:
    return _by_slug("pages", slug, preview)


def list_prospectuses(preview: bool = False) -> List[dict]:
    """Opportunities visible to investors; drafts only show in preview."""
    rows = store.fetch_all("prospectuses", columns=PROSPECTUS_LIST_COLUMNS, order="close_date", desc=False)
    if preview:
        return rows
    return [row for row in rows if row.get("status") != ProspectusStatus.DRAFT.value]


def get_prospectus(slug: str, preview: bool = False) -> Optional[dict]:
    prospectus = store.fetch_one("prospectuses", slug=slug)
    if prospectus and not preview and prospectus.get("status") == ProspectusStatus.DRAFT.value:
        return None
    return prospectus


def get_prospectus_by_id(prospectus_id: str) -> Optional[dict]:
    return store.fetch_one("prospectuses", id=prospectus_id)


def sitemap_entries() -> Dict[str, List[dict]]:
    """Slugs and last-modified stamps of published, addressable content."""
    entries = {}
    for table in ("properties", "projects", "services"):
        rows = store.fetch_all(table, columns="slug, updated_at", filters={"published": True})
        entries[table] = [row for row in rows if row.get("slug")]
    return entries
