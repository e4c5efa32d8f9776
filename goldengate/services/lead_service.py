import logging
from typing import Dict, List, Mapping, Optional

from fastapi import HTTPException

from . import supabase_service as store
from .investor_service import create_investor
from ..models import LeadStatus, LeadType, values
from ..core.validation import is_valid_email


logger = logging.getLogger(__name__)

LEADS = "leads"

ADDITIONAL_FIELDS = (
    "budget", "neighborhoods", "bedrooms", "bathrooms", "timeline",
    "propertyAddress", "propertyType", "investmentType",
    "investmentBudget", "experience", "accreditedStatus", "company",
)

# Field names used by the get-started forms that map onto stored names
FIELD_ALIASES = {
    "address": "propertyAddress",
    "accredited": "accreditedStatus",
}


def _text(form: Mapping, name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def collect_form_data(form: Mapping) -> Dict[str, str]:
    collected: Dict[str, str] = {}
    for field in ADDITIONAL_FIELDS:
        value = _text(form, field)
        if value:
            collected[field] = value
    for alias, field in FIELD_ALIASES.items():
        value = _text(form, alias)
        if value and field not in collected:
            collected[field] = value
    return collected


def build_lead(form: Mapping) -> dict:
    """Validate a submitted lead form and return the record to store."""
    name = _text(form, "name")
    email = _text(form, "email")
    if not name or not email:
        raise HTTPException(status_code=400, detail="Name and email are required")
    if not is_valid_email(email):
        raise HTTPException(status_code=400, detail="Please provide a valid email address")

    lead_type = _text(form, "leadType") or _text(form, "type") or LeadType.CONTACT.value
    if lead_type not in values(LeadType):
        raise HTTPException(status_code=400, detail="Invalid lead type")

    form_data = collect_form_data(form)
    return {
        "name": name,
        "email": email,
        "phone": _text(form, "phone"),
        "lead_type": lead_type,
        "status": LeadStatus.NEW.value,
        "notes": _text(form, "message") or _text(form, "notes"),
        "form_data": form_data or None,
        "submitted_at": store.utcnow_iso(),
    }


def create_lead(record: dict) -> dict:
    lead = store.insert_row(LEADS, record)
    logger.info(f"Created {record['lead_type']} lead {lead['id']}")
    return lead


def get_lead(lead_id: str) -> Optional[dict]:
    return store.fetch_one(LEADS, id=lead_id)


def list_leads(status: Optional[str] = None, lead_type: Optional[str] = None) -> List[dict]:
    filters = {}
    if status:
        filters["status"] = status
    if lead_type:
        filters["lead_type"] = lead_type
    return store.fetch_all(LEADS, filters=filters, order="submitted_at", desc=True)


def update_lead_status(lead_id: str, status: str) -> List[dict]:
    return store.update_row(LEADS, lead_id, {"status": status})


def convert_to_investor(lead_id: str) -> dict:
    lead = get_lead(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")

    investor = create_investor(
        name=lead["name"],
        email=lead["email"],
        phone=lead.get("phone"),
        lead_id=lead_id,
    )
    update_lead_status(lead_id, LeadStatus.CONVERTED.value)
    return investor
