"""Investor portal loaders and the profile action."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..core.auth import require_user_id
from ..core.observability import set_user
from ..core.validation import validate_choice
from ..models import (
    INVESTED_LOI_STATUSES,
    InvestmentCapacity,
    InvestmentInterest,
    LOIStatus,
    ProspectusStatus,
    values,
)
from ..services import content_service, investor_service, loi_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/investor", tags=["investor"])


def _current_investor(user_id: str):
    investor = investor_service.get_investor_by_clerk_id(user_id)
    if investor:
        set_user(user_id, investor.get("email"))
    return investor


def _require_investor(user_id: str) -> dict:
    investor = _current_investor(user_id)
    if not investor:
        raise HTTPException(status_code=404, detail="Investor profile not found")
    return investor


@router.get("/dashboard")
async def dashboard(user_id: str = Depends(require_user_id)):
    opportunities = content_service.list_prospectuses()
    investor = _current_investor(user_id)
    lois = loi_service.list_investor_lois(investor["id"]) if investor else []

    return {
        "investor": investor,
        "opportunities": opportunities[:3],
        "lois": lois,
        "stats": {
            "active_opportunities": sum(1 for p in opportunities if p.get("status") == ProspectusStatus.OPEN.value),
            "submitted_lois": sum(1 for loi in lois if loi.get("status") == LOIStatus.SUBMITTED.value),
            "approved_lois": sum(1 for loi in lois if loi.get("status") == LOIStatus.APPROVED.value),
            "total_invested": sum(
                float(loi.get("investment_amount") or 0)
                for loi in lois
                if loi.get("status") in INVESTED_LOI_STATUSES
            ),
        },
    }


@router.get("/opportunities")
async def opportunities(user_id: str = Depends(require_user_id)):
    return {"opportunities": content_service.list_prospectuses()}


@router.get("/opportunities/{slug}")
async def opportunity(slug: str, user_id: str = Depends(require_user_id)):
    prospectus = content_service.get_prospectus(slug)
    if not prospectus:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return {"prospectus": prospectus}


@router.get("/opportunities/{slug}/loi")
async def loi_form(slug: str, user_id: str = Depends(require_user_id)):
    prospectus = content_service.get_prospectus(slug)
    if not prospectus:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    if prospectus.get("status") != ProspectusStatus.OPEN.value:
        raise HTTPException(status_code=403, detail="This opportunity is not currently accepting LOIs")
    return {"prospectus": prospectus, "investor": _current_investor(user_id)}


@router.get("/lois")
async def lois(user_id: str = Depends(require_user_id)):
    investor = _require_investor(user_id)
    return {"lois": loi_service.list_investor_lois(investor["id"])}


@router.get("/profile")
async def profile(user_id: str = Depends(require_user_id)):
    return {
        "investor": _current_investor(user_id),
        "capacities": values(InvestmentCapacity),
        "interests": values(InvestmentInterest),
    }


@router.post("/profile")
async def update_profile(request: Request, user_id: str = Depends(require_user_id)):
    investor = _require_investor(user_id)
    form = await request.form()

    changes = {
        "phone": (form.get("phone") or "").strip() or None,
        "company": (form.get("company") or "").strip() or None,
    }
    if form.get("investmentCapacity"):
        changes["investment_capacity"] = validate_choice(
            form.get("investmentCapacity"), values(InvestmentCapacity), "investmentCapacity"
        )
    interests = [i for i in form.getlist("investmentInterests") if i]
    for interest in interests:
        validate_choice(interest, values(InvestmentInterest), "investmentInterests")
    changes["investment_interests"] = interests

    try:
        investor_service.update_investor(investor["id"], changes)
    except Exception as e:
        logger.error(f"Error updating profile for investor {investor['id']}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return {"success": True, "message": "Profile updated successfully"}
