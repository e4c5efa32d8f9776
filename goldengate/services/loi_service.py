"""Letters of Intent: submission, review transitions and countersigning."""

import logging
import math
from typing import Dict, List, Optional

from fastapi import HTTPException

from . import supabase_service as store
from .investor_service import get_investor_by_clerk_id
from ..core.validation import is_valid_email
from ..models import (
    ACTIVE_LOI_STATUSES,
    CountersignSubmission,
    INVESTED_LOI_STATUSES,
    LOIStatus,
    LOISubmission,
    ProspectusStatus,
)


logger = logging.getLogger(__name__)

LOIS = "letters_of_intent"

INVESTOR_SUMMARY_COLUMNS = "id, name, email, phone, accredited_status, clerk_id"
PROSPECTUS_SUMMARY_COLUMNS = "id, title, slug, target_return, minimum_investment, project_type, location, status"


def get_loi(loi_id: str) -> Optional[dict]:
    """A single LOI with its investor and prospectus resolved."""
    loi = store.fetch_one(LOIS, id=loi_id)
    if loi is None:
        return None
    return _with_references([loi])[0]


def _with_references(lois: List[dict]) -> List[dict]:
    investors = store.fetch_by_ids(
        "investors", [loi.get("investor_id") for loi in lois], columns=INVESTOR_SUMMARY_COLUMNS
    )
    prospectuses = store.fetch_by_ids(
        "prospectuses", [loi.get("prospectus_id") for loi in lois], columns=PROSPECTUS_SUMMARY_COLUMNS
    )
    return [
        dict(
            loi,
            investor=investors.get(loi.get("investor_id")),
            prospectus=prospectuses.get(loi.get("prospectus_id")),
        )
        for loi in lois
    ]


def list_lois(status: Optional[str] = None, limit: Optional[int] = None) -> List[dict]:
    filters = {"status": status} if status else {}
    lois = store.fetch_all(LOIS, filters=filters, order="submitted_at", desc=True, limit=limit)
    return _with_references(lois)


def list_investor_lois(investor_id: str) -> List[dict]:
    lois = store.fetch_all(LOIS, filters={"investor_id": investor_id}, order="submitted_at", desc=True)
    return _with_references(lois)


def loi_stats(lois: List[dict]) -> Dict[str, float]:
    approved = [loi for loi in lois if loi.get("status") in INVESTED_LOI_STATUSES]
    return {
        "total": len(lois),
        "pending": sum(1 for loi in lois if loi.get("status") == LOIStatus.SUBMITTED.value),
        "approved": sum(1 for loi in lois if loi.get("status") == LOIStatus.APPROVED.value),
        "total_amount": sum(float(loi.get("investment_amount") or 0) for loi in approved),
    }


def find_active_loi(investor_id: str, prospectus_id: str) -> Optional[dict]:
    rows = store.fetch_all(
        LOIS,
        columns="id, status",
        filters={"investor_id": investor_id, "prospectus_id": prospectus_id},
        in_filters={"status": list(ACTIVE_LOI_STATUSES)},
        limit=1,
    )
    return rows[0] if rows else None


def submit_loi(clerk_id: str, submission: LOISubmission, ip_address: str) -> dict:
    """Validate and record an investor's LOI.

    Returns a dict with the created LOI, the investor and the prospectus so
    that callers can send notifications.
    """
    if (
        not submission.prospectus_slug
        or not submission.investment_amount
        or not submission.signature_image
        or not (submission.printed_name or "").strip()
    ):
        raise HTTPException(status_code=400, detail="Missing required fields")
    if not math.isfinite(submission.investment_amount) or submission.investment_amount <= 0:
        raise HTTPException(status_code=400, detail="Investment amount must be a positive number")
    if not (submission.accredited_status and submission.risk_acknowledgment and submission.terms_accepted):
        raise HTTPException(status_code=400, detail="All acknowledgments must be accepted")
    if store.decode_data_url_image(submission.signature_image) is None:
        raise HTTPException(status_code=400, detail="Invalid signature image")

    investor = get_investor_by_clerk_id(clerk_id)
    if not investor:
        raise HTTPException(status_code=404, detail="Investor not found")

    prospectus = store.fetch_one("prospectuses", slug=submission.prospectus_slug)
    if not prospectus:
        raise HTTPException(status_code=404, detail="Prospectus not found")

    minimum = prospectus.get("minimum_investment")
    if minimum and submission.investment_amount < float(minimum):
        raise HTTPException(status_code=400, detail=f"Investment amount must be at least {minimum}")

    if prospectus.get("status") != ProspectusStatus.OPEN.value:
        raise HTTPException(status_code=400, detail="This opportunity is not open for investment")

    if find_active_loi(investor["id"], prospectus["id"]):
        raise HTTPException(status_code=400, detail="You have already submitted a Letter of Intent for this opportunity")

    loi_id = store.new_id()
    now = store.utcnow_iso()
    signature_path = store.store_signature_image(
        submission.signature_image, f"signatures/investor-{loi_id}.png"
    )

    loi = store.insert_row(LOIS, {
        "id": loi_id,
        "investor_id": investor["id"],
        "prospectus_id": prospectus["id"],
        "investment_amount": submission.investment_amount,
        "funding_source": submission.funding_source,
        "investor_type": submission.investor_type,
        "status": LOIStatus.SUBMITTED.value,
        "submitted_at": now,
        "investor_notes": submission.investor_notes or "",
        "investor_signature": {
            "signed": True,
            "signed_at": now,
            "ip_address": ip_address,
            "printed_name": submission.printed_name.strip(),
            "signature_image": signature_path,
        },
    })
    logger.info(f"LOI {loi['id']} submitted by investor {investor['id']} for {prospectus['id']}")
    return {"loi": loi, "investor": investor, "prospectus": prospectus}


def set_status(loi_id: str, new_status: str, reviewed_by: str = "Admin") -> dict:
    """Apply an admin status change; returns the LOI with references as it was before."""
    loi = get_loi(loi_id)
    if not loi:
        raise HTTPException(status_code=404, detail="LOI not found")

    changes = {"status": new_status}
    if new_status in (LOIStatus.APPROVED.value, LOIStatus.REJECTED.value):
        changes["reviewed_at"] = store.utcnow_iso()
        changes["reviewed_by"] = reviewed_by
    store.update_row(LOIS, loi_id, changes)
    logger.info(f"LOI {loi_id} status {loi.get('status')} -> {new_status}")
    return loi


def countersign(submission: CountersignSubmission, ip_address: str) -> dict:
    if not (
        submission.loi_id
        and submission.signer_name
        and submission.signer_email
        and submission.signer_title
        and submission.signature_image
    ):
        raise HTTPException(status_code=400, detail="Missing required fields")
    if not is_valid_email(submission.signer_email):
        raise HTTPException(status_code=400, detail="Invalid signer email")

    loi = get_loi(submission.loi_id)
    if not loi:
        raise HTTPException(status_code=404, detail="LOI not found")
    if loi.get("status") != LOIStatus.APPROVED.value:
        raise HTTPException(status_code=400, detail="LOI must be approved before countersigning")

    now = store.utcnow_iso()
    signature_path = store.store_signature_image(
        submission.signature_image, f"signatures/company-{submission.loi_id}.png"
    )
    store.update_row(LOIS, submission.loi_id, {
        "status": LOIStatus.COUNTERSIGNED.value,
        "company_signature": {
            "signed": True,
            "signed_at": now,
            "signer_name": submission.signer_name,
            "signer_email": submission.signer_email,
            "signer_title": submission.signer_title,
            "ip_address": ip_address,
            "signature_image": signature_path,
        },
    })
    logger.info(f"LOI {submission.loi_id} countersigned by {submission.signer_email}")
    return loi
