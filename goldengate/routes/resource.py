"""Resource endpoints: form actions, webhooks and generated files."""

import hmac
import logging
import time
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, RedirectResponse, Response

from ..core.auth import get_current_user_id, require_admin_api, require_user_id
from ..core.config import Config
from ..core.http import get_client_ip, pdf_response, slugify
from ..core.rate_limit import enforce_rate_limit
from ..core.sessions import disable_preview, enable_preview, is_admin_authenticated
from ..core.validation import secure_filename, validate_choice, validate_file, MAX_FILE_SIZE
from ..models import CountersignSubmission, DocumentType, LOISubmission, values
from ..services import (
    clerk_webhook,
    content_service,
    email_service,
    investor_service,
    lead_service,
    loi_service,
    og_image,
    pdf_service,
)
from ..services import supabase_service as store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resource", tags=["resource"])


@router.post("/lead")
async def submit_lead(request: Request, background_tasks: BackgroundTasks):
    enforce_rate_limit(request, identifier="lead-form", limit=5, window_seconds=60)
    form = await request.form()
    record = lead_service.build_lead(form)

    try:
        lead = lead_service.create_lead(record)
    except Exception as e:
        logger.error(f"Error creating lead: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An error occurred while processing your submission. Please try again.",
        )

    background_tasks.add_task(email_service.send_new_lead_email, lead)
    return {
        "success": True,
        "message": "Thank you for your submission. We'll be in touch soon!",
        "id": lead["id"],
    }


@router.post("/submit-loi")
async def submit_loi(
    submission: LOISubmission,
    request: Request,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(require_user_id),
):
    enforce_rate_limit(request, identifier="loi-submit", limit=5, window_seconds=300)
    try:
        result = loi_service.submit_loi(user_id, submission, get_client_ip(request))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting LOI for {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit Letter of Intent")

    background_tasks.add_task(
        email_service.send_loi_submitted_emails,
        result["investor"],
        result["prospectus"],
        submission.investment_amount,
    )
    return {
        "success": True,
        "loiId": result["loi"]["id"],
        "message": "Letter of Intent submitted successfully",
    }


@router.post("/countersign-loi", dependencies=[Depends(require_admin_api)])
async def countersign_loi(
    submission: CountersignSubmission,
    request: Request,
    background_tasks: BackgroundTasks,
):
    try:
        loi = loi_service.countersign(submission, get_client_ip(request))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error countersigning LOI {submission.loi_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to countersign LOI")

    background_tasks.add_task(email_service.send_loi_status_update_email, loi, "countersigned")
    return {"success": True, "message": "LOI countersigned successfully"}


@router.post("/upload-accreditation")
async def upload_accreditation(
    request: Request,
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    documentType: Optional[str] = Form(None),
    investorId: Optional[str] = Form(None),
    user_id: str = Depends(require_user_id),
):
    enforce_rate_limit(request, identifier="accreditation-upload", limit=10, window_seconds=300)
    if file is None or not (title or "").strip():
        raise HTTPException(status_code=400, detail="Missing required fields")
    document_type = validate_choice(documentType or DocumentType.OTHER.value, values(DocumentType), "document type")

    # Read one byte past the limit so oversized uploads are caught without buffering them whole
    file_bytes = await file.read(MAX_FILE_SIZE + 1)
    validate_file(file, size=len(file_bytes))

    investor = investor_service.get_investor_by_clerk_id(user_id)
    if not investor:
        raise HTTPException(status_code=404, detail="Investor not found")
    if investorId and investorId != investor["id"]:
        raise HTTPException(status_code=403, detail="Cannot upload documents for another investor")

    try:
        path = f"accreditation/{investor['id']}/{int(time.time() * 1000)}-{secure_filename(file.filename)}"
        store.upload_file(path, file_bytes, file.content_type)
        document = investor_service.add_accreditation_document(
            investor_id=investor["id"],
            title=title.strip(),
            document_type=document_type,
            file_path=path,
        )
    except Exception as e:
        logger.error(f"Error uploading accreditation document for {investor['id']}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload document")

    return {
        "success": True,
        "message": "Document uploaded successfully",
        "documentKey": document["id"],
    }


@router.post("/clerk-webhook")
async def clerk_webhook_event(request: Request):
    missing = [h for h in clerk_webhook.SVIX_HEADERS if not request.headers.get(h)]
    if missing:
        logger.error(f"Clerk webhook missing required svix headers: {missing}")
        raise HTTPException(status_code=400, detail="Missing svix headers")

    payload = await request.body()
    try:
        event = clerk_webhook.verify_event(payload, request.headers)
    except clerk_webhook.WebhookSignatureError as e:
        logger.error(f"Clerk webhook signature verification failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid signature")
    except RuntimeError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    try:
        clerk_webhook.process_event(event)
    except Exception as e:
        logger.error(f"Error processing Clerk webhook: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"success": True, "message": "Webhook processed"}


@router.get("/pdf/loi/{loi_id}")
async def loi_pdf(loi_id: str, request: Request, user_id: Optional[str] = Depends(get_current_user_id)):
    is_admin = is_admin_authenticated(request)
    if not is_admin and not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    loi = loi_service.get_loi(loi_id)
    if not loi:
        raise HTTPException(status_code=404, detail="Letter of Intent not found")

    owner_clerk_id = (loi.get("investor") or {}).get("clerk_id")
    if not is_admin and owner_clerk_id != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized to access this LOI")

    pdf_bytes = pdf_service.render_loi_pdf(loi)
    title_slug = slugify((loi.get("prospectus") or {}).get("title"), fallback="investment")
    return pdf_response(pdf_bytes, f"loi-{title_slug}-{loi['id'][-8:]}.pdf")


@router.get("/pdf/prospectus/{prospectus_id}")
async def prospectus_pdf(prospectus_id: str):
    prospectus = content_service.get_prospectus_by_id(prospectus_id)
    if not prospectus:
        raise HTTPException(status_code=404, detail="Prospectus not found")

    pdf_bytes = pdf_service.render_prospectus_pdf(prospectus)
    return pdf_response(pdf_bytes, f"{slugify(prospectus.get('title'), fallback='investment')}-prospectus.pdf")


@router.get("/og")
async def og(title: Optional[str] = None, subtitle: Optional[str] = None):
    return Response(
        content=og_image.render_og_image(title, subtitle),
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=86400"},
    )


def _safe_redirect_path(path: Optional[str]) -> str:
    # Only same-site absolute paths; "//host" would leave the site
    if not path or not path.startswith("/") or path.startswith("//"):
        return "/"
    return path


@router.get("/preview")
async def preview(secret: Optional[str] = None, redirect: Optional[str] = None):
    if not Config.PREVIEW_SECRET or not hmac.compare_digest((secret or "").encode(), Config.PREVIEW_SECRET.encode()):
        raise HTTPException(status_code=401, detail="Invalid preview secret")

    response = RedirectResponse(url=_safe_redirect_path(redirect), status_code=303)
    enable_preview(response)
    return response


@router.post("/preview/disable")
async def preview_disable(redirect: Optional[str] = None):
    response = RedirectResponse(url=_safe_redirect_path(redirect), status_code=303)
    disable_preview(response)
    return response


@router.post("/toggle-theme")
async def toggle_theme(request: Request):
    theme = "light" if request.cookies.get("theme") == "dark" else "dark"
    response = JSONResponse({"theme": theme})
    response.set_cookie("theme", theme, max_age=60 * 60 * 24 * 365, path="/", samesite="lax")
    return response
