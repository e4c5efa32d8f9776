"""Page data for the public marketing site."""

import logging

from fastapi import APIRouter, HTTPException, Request

from ..core.config import Config
from ..core.sessions import is_preview
from ..forms import get_form, list_forms
from ..services import content_service as content


logger = logging.getLogger(__name__)

router = APIRouter(tags=["marketing"])


def _found(record, what: str):
    if not record:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return record


@router.get("/")
async def home(request: Request):
    return {"homepage": content.get_homepage(preview=is_preview(request))}


@router.get("/site-settings")
async def site_settings():
    return {
        "settings": content.get_site_settings(),
        "analytics": {"ga_measurement_id": Config.GA_MEASUREMENT_ID or None},
    }


@router.get("/about")
async def about(request: Request):
    preview = is_preview(request)
    return {
        "page": content.get_page("about", preview=preview),
        "team": content.list_team_members(preview=preview),
    }


@router.get("/services")
async def services(request: Request):
    return {"services": content.list_services(preview=is_preview(request))}


@router.get("/services/{slug}")
async def service_detail(slug: str, request: Request):
    return {"service": _found(content.get_service(slug, preview=is_preview(request)), "Service")}


@router.get("/properties")
async def properties(request: Request):
    return {"properties": content.list_properties(preview=is_preview(request))}


@router.get("/properties/{slug}")
async def property_detail(slug: str, request: Request):
    return {"property": _found(content.get_property(slug, preview=is_preview(request)), "Property")}


@router.get("/projects")
async def projects(request: Request):
    return {"projects": content.list_projects(preview=is_preview(request))}


@router.get("/projects/{slug}")
async def project_detail(slug: str, request: Request):
    return {"project": _found(content.get_project(slug, preview=is_preview(request)), "Project")}


@router.get("/testimonials")
async def testimonials(request: Request):
    return {"testimonials": content.list_testimonials(preview=is_preview(request))}


@router.get("/contact")
async def contact():
    return {"settings": content.get_site_settings()}


@router.get("/get-started")
async def get_started():
    return {"types": list_forms()}


@router.get("/get-started/success")
async def get_started_success():
    return {
        "success": True,
        "message": "Your request has been received. A member of our team will reach out shortly.",
    }


@router.get("/get-started/{lead_type}")
async def get_started_form(lead_type: str):
    return {"form": _found(get_form(lead_type), "Form")}


@router.get("/pages/{slug}")
async def page(slug: str, request: Request):
    return {"page": _found(content.get_page(slug, preview=is_preview(request)), "Page")}
