import logging
from typing import Dict, List, Optional

from . import supabase_service as store
from ..models import (
    AccreditedStatus,
    DocumentStatus,
    INVESTED_LOI_STATUSES,
    InvestorStatus,
)


logger = logging.getLogger(__name__)

INVESTORS = "investors"
DOCUMENTS = "accreditation_documents"


def get_investor_by_clerk_id(clerk_id: str) -> Optional[dict]:
    return store.fetch_one(INVESTORS, clerk_id=clerk_id)


def get_investor_by_email(email: str) -> Optional[dict]:
    return store.fetch_one(INVESTORS, email=email)


def create_investor(
    *,
    name: str,
    email: str,
    phone: Optional[str] = None,
    clerk_id: Optional[str] = None,
    status: str = InvestorStatus.PENDING.value,
    accredited_status: str = AccreditedStatus.PENDING.value,
    lead_id: Optional[str] = None,
) -> dict:
    now = store.utcnow_iso()
    record = {
        "name": name,
        "email": email,
        "phone": phone or None,
        "clerk_id": clerk_id,
        "status": status,
        "accredited_status": accredited_status,
        "lead_id": lead_id,
        "created_at": now,
        "updated_at": now,
    }
    investor = store.insert_row(INVESTORS, record)
    logger.info(f"Created investor {investor['id']} ({status})")
    return investor


def update_investor(investor_id: str, values: dict) -> List[dict]:
    changes = dict(values)
    changes["updated_at"] = store.utcnow_iso()
    return store.update_row(INVESTORS, investor_id, changes)


def list_investors(status: Optional[str] = None, accredited_status: Optional[str] = None) -> List[dict]:
    filters = {}
    if status:
        filters["status"] = status
    if accredited_status:
        filters["accredited_status"] = accredited_status
    investors = store.fetch_all(INVESTORS, filters=filters, order="created_at", desc=True)

    totals: Dict[str, float] = {}
    if investors:
        lois = store.fetch_all(
            "letters_of_intent",
            columns="investor_id, investment_amount, status",
            in_filters={"status": list(INVESTED_LOI_STATUSES)},
        )
        for loi in lois:
            totals[loi["investor_id"]] = totals.get(loi["investor_id"], 0) + float(loi.get("investment_amount") or 0)

    return [dict(investor, total_invested=totals.get(investor["id"], 0)) for investor in investors]


def add_accreditation_document(
    *,
    investor_id: str,
    title: str,
    document_type: str,
    file_path: str,
) -> dict:
    return store.insert_row(DOCUMENTS, {
        "investor_id": investor_id,
        "title": title,
        "document_type": document_type,
        "file_path": file_path,
        "status": DocumentStatus.PENDING.value,
        "uploaded_at": store.utcnow_iso(),
    })


def get_accreditation_document(investor_id: str, document_key: str) -> Optional[dict]:
    return store.fetch_one(DOCUMENTS, id=document_key, investor_id=investor_id)


def list_accreditation_documents(status: Optional[str] = None) -> Dict[str, object]:
    """All uploaded documents with their investor, newest first, plus per-status counts."""
    documents = store.fetch_all(DOCUMENTS, order="uploaded_at", desc=True)
    investors = store.fetch_by_ids(
        INVESTORS,
        [doc.get("investor_id") for doc in documents],
        columns="id, name, email, accredited_status",
    )

    stats = {
        "total": len(documents),
        "pending": sum(1 for d in documents if d.get("status") == DocumentStatus.PENDING.value),
        "under_review": sum(1 for d in documents if d.get("status") == DocumentStatus.UNDER_REVIEW.value),
        "approved": sum(1 for d in documents if d.get("status") == DocumentStatus.APPROVED.value),
        "rejected": sum(1 for d in documents if d.get("status") == DocumentStatus.REJECTED.value),
    }

    if status:
        documents = [d for d in documents if d.get("status") == status]

    # Undated uploads sort last
    documents.sort(key=lambda d: d.get("uploaded_at") or "", reverse=True)
    enriched = [
        dict(
            doc,
            investor=investors.get(doc.get("investor_id")),
            file_url=store.create_signed_url(doc["file_path"]) if doc.get("file_path") else None,
        )
        for doc in documents
    ]
    return {"documents": enriched, "stats": stats}


def review_accreditation_document(
    investor_id: str,
    document_key: str,
    new_status: str,
    reviewer_notes: Optional[str] = None,
) -> None:
    changes = {"status": new_status, "reviewed_at": store.utcnow_iso()}
    if reviewer_notes:
        changes["reviewer_notes"] = reviewer_notes
    store.update_row(DOCUMENTS, document_key, changes)

    if new_status == DocumentStatus.APPROVED.value:
        update_investor(investor_id, {"accredited_status": AccreditedStatus.VERIFIED.value})
