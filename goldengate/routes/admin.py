"""Admin back office: session login plus the data behind each admin screen.

Every screen except login/logout depends on ``require_admin``; mutations are
form posts carrying an ``intent`` field, mirroring the admin UI's buttons.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from ..core.auth import require_admin
from ..core.rate_limit import enforce_rate_limit
from ..core.sessions import (
    clear_admin_session,
    create_admin_session,
    is_admin_authenticated,
    verify_admin_password,
)
from ..core.validation import validate_choice, validate_record_id
from ..models import (
    AccreditedStatus,
    DocumentStatus,
    InvestorStatus,
    LeadStatus,
    LeadType,
    LOIStatus,
    values,
)
from ..services import email_service, investor_service, lead_service, loi_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

# intent -> (new status, statuses it may be applied from)
LOI_INTENTS = {
    "review": (LOIStatus.REVIEW.value, (LOIStatus.SUBMITTED.value,)),
    "approve": (LOIStatus.APPROVED.value, (LOIStatus.SUBMITTED.value, LOIStatus.REVIEW.value)),
    "reject": (LOIStatus.REJECTED.value, (LOIStatus.SUBMITTED.value, LOIStatus.REVIEW.value)),
}

DOCUMENT_INTENTS = {
    "approve": DocumentStatus.APPROVED.value,
    "reject": DocumentStatus.REJECTED.value,
    "review": DocumentStatus.UNDER_REVIEW.value,
}


def _unknown_intent(intent: Optional[str]) -> HTTPException:
    return HTTPException(status_code=400, detail=f"Unknown intent: {intent or ''}".strip())


def _store_failure(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed {action}")


@router.get("/login")
async def login_page(request: Request):
    if is_admin_authenticated(request):
        return RedirectResponse(url="/admin", status_code=303)
    return {"authenticated": False}


@router.post("/login")
async def login(request: Request):
    enforce_rate_limit(request, identifier="admin-login", limit=10, window_seconds=300)
    form = await request.form()
    password = form.get("password")
    if not password:
        raise HTTPException(status_code=400, detail="Password is required")
    if not verify_admin_password(password):
        logger.warning("Failed admin login attempt")
        raise HTTPException(status_code=401, detail="Invalid password")

    response = RedirectResponse(url="/admin", status_code=303)
    create_admin_session(response)
    return response


@router.post("/logout")
async def logout():
    response = RedirectResponse(url="/admin/login", status_code=303)
    clear_admin_session(response)
    return response


@router.get("/logout")
async def logout_page():
    return RedirectResponse(url="/admin", status_code=303)


@router.get("", dependencies=[Depends(require_admin)])
async def dashboard():
    try:
        leads = lead_service.list_leads()
        investors = investor_service.list_investors()
        lois = loi_service.list_lois()
    except Exception as e:
        raise _store_failure("loading dashboard", e)

    return {
        "stats": {
            "total_leads": len(leads),
            "new_leads": sum(1 for lead in leads if lead.get("status") == LeadStatus.NEW.value),
            "total_investors": len(investors),
            "pending_investors": sum(1 for i in investors if i.get("status") == InvestorStatus.PENDING.value),
            "total_lois": len(lois),
            "pending_lois": sum(1 for loi in lois if loi.get("status") == LOIStatus.SUBMITTED.value),
            "approved_lois": sum(1 for loi in lois if loi.get("status") == LOIStatus.APPROVED.value),
        },
        "recent_leads": leads[:5],
        "recent_lois": [
            {
                "id": loi["id"],
                "status": loi.get("status"),
                "investment_amount": loi.get("investment_amount"),
                "submitted_at": loi.get("submitted_at"),
                "investor_name": (loi.get("investor") or {}).get("name"),
                "prospectus_title": (loi.get("prospectus") or {}).get("title"),
            }
            for loi in lois[:5]
        ],
    }


# Leads

@router.get("/leads", dependencies=[Depends(require_admin)])
async def leads(status: Optional[str] = None, lead_type: Optional[str] = Query(None, alias="type")):
    return {
        "leads": lead_service.list_leads(status=status, lead_type=lead_type),
        "filters": {"status": status, "type": lead_type},
        "statuses": values(LeadStatus),
        "types": values(LeadType),
    }


@router.post("/leads", dependencies=[Depends(require_admin)])
async def lead_action(request: Request):
    form = await request.form()
    intent = form.get("intent")
    lead_id = validate_record_id(form.get("leadId"), "leadId")

    if intent == "updateStatus":
        status = validate_choice(form.get("status"), values(LeadStatus), "status")
        try:
            updated = lead_service.update_lead_status(lead_id, status)
        except Exception as e:
            raise _store_failure("updating lead", e)
        if not updated:
            raise HTTPException(status_code=404, detail="Lead not found")
        return {"success": True}

    if intent == "convertToInvestor":
        try:
            investor = lead_service.convert_to_investor(lead_id)
        except HTTPException:
            raise
        except Exception as e:
            raise _store_failure("converting lead", e)
        return {"success": True, "investorId": investor["id"]}

    raise _unknown_intent(intent)


# Investors

@router.get("/investors", dependencies=[Depends(require_admin)])
async def investors(status: Optional[str] = None, accredited: Optional[str] = None):
    return {
        "investors": investor_service.list_investors(status=status, accredited_status=accredited),
        "filters": {"status": status, "accredited": accredited},
        "statuses": values(InvestorStatus),
        "accredited_statuses": values(AccreditedStatus),
    }


@router.post("/investors", dependencies=[Depends(require_admin)])
async def investor_action(request: Request):
    form = await request.form()
    intent = form.get("intent")
    investor_id = validate_record_id(form.get("investorId"), "investorId")

    if intent == "updateStatus":
        changes = {"status": validate_choice(form.get("status"), values(InvestorStatus), "status")}
    elif intent == "updateAccreditation":
        changes = {
            "accredited_status": validate_choice(
                form.get("accreditedStatus"), values(AccreditedStatus), "accreditedStatus"
            )
        }
    elif intent == "approveInvestor":
        changes = {
            "status": InvestorStatus.ACTIVE.value,
            "accredited_status": AccreditedStatus.VERIFIED.value,
        }
    else:
        raise _unknown_intent(intent)

    try:
        updated = investor_service.update_investor(investor_id, changes)
    except Exception as e:
        raise _store_failure("updating investor", e)
    if not updated:
        raise HTTPException(status_code=404, detail="Investor not found")
    return {"success": True}


# Letters of Intent

@router.get("/lois", dependencies=[Depends(require_admin)])
async def lois(status: Optional[str] = None):
    try:
        all_lois = loi_service.list_lois()
    except Exception as e:
        raise _store_failure("loading LOIs", e)

    filtered = [loi for loi in all_lois if loi.get("status") == status] if status else all_lois
    return {
        "lois": filtered,
        "stats": loi_service.loi_stats(all_lois),
        "filters": {"status": status},
        "statuses": values(LOIStatus),
    }


@router.post("/lois", dependencies=[Depends(require_admin)])
async def loi_action(request: Request, background_tasks: BackgroundTasks):
    form = await request.form()
    intent = form.get("intent")
    loi_id = validate_record_id(form.get("loiId"), "loiId")

    if intent in LOI_INTENTS:
        new_status, allowed_from = LOI_INTENTS[intent]
        current = loi_service.get_loi(loi_id)
        if not current:
            raise HTTPException(status_code=404, detail="LOI not found")
        if current.get("status") not in allowed_from:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot {intent} an LOI with status {current.get('status')}",
            )
    elif intent == "updateStatus":
        new_status = validate_choice(form.get("status"), values(LOIStatus), "status")
    else:
        raise _unknown_intent(intent)

    try:
        loi = loi_service.set_status(loi_id, new_status)
    except HTTPException:
        raise
    except Exception as e:
        raise _store_failure("updating LOI", e)

    if new_status in (LOIStatus.APPROVED.value, LOIStatus.REJECTED.value):
        background_tasks.add_task(
            email_service.send_loi_status_update_email, loi, new_status, form.get("message") or None
        )
    return {"success": True, "status": new_status}


@router.get("/lois/{loi_id}/countersign", dependencies=[Depends(require_admin)])
async def countersign_page(loi_id: str):
    loi = loi_service.get_loi(loi_id)
    if not loi:
        raise HTTPException(status_code=404, detail="LOI not found")
    if loi.get("status") != LOIStatus.APPROVED.value:
        raise HTTPException(status_code=400, detail="LOI must be approved before countersigning")
    return {"loi": loi}


# Accreditation documents

@router.get("/accreditation", dependencies=[Depends(require_admin)])
async def accreditation(status: Optional[str] = None):
    try:
        result = investor_service.list_accreditation_documents(status=status)
    except Exception as e:
        raise _store_failure("loading accreditation documents", e)
    return dict(result, filters={"status": status}, statuses=values(DocumentStatus))


@router.post("/accreditation", dependencies=[Depends(require_admin)])
async def accreditation_action(request: Request):
    form = await request.form()
    intent = form.get("intent")
    if intent not in DOCUMENT_INTENTS:
        raise _unknown_intent(intent)

    investor_id = form.get("investorId")
    document_key = form.get("documentKey")
    if not investor_id or not document_key:
        raise HTTPException(status_code=400, detail="Missing investor ID or document key")
    validate_record_id(investor_id, "investorId")
    validate_record_id(document_key, "documentKey")

    if not investor_service.get_accreditation_document(investor_id, document_key):
        raise HTTPException(status_code=404, detail="Document not found")

    try:
        investor_service.review_accreditation_document(
            investor_id,
            document_key,
            DOCUMENT_INTENTS[intent],
            reviewer_notes=form.get("reviewerNotes") or None,
        )
    except Exception as e:
        raise _store_failure("updating document", e)
    return {"success": True, "status": DOCUMENT_INTENTS[intent]}
