"""Transactional email through the Resend HTTP API.

Sending is best effort: callers schedule these functions as background
tasks, and failures are logged rather than raised.
"""

import html
import logging
from typing import List, Optional, Union

import requests

from ..core.config import Config
from ..core.http import format_currency


logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

FOOTER = """
    <hr style="border: none; border-top: 1px solid #e5e5e5; margin: 30px 0;">
    <p style="font-size: 12px; color: #999; margin-bottom: 0;">
      Golden Gate Home Advisors<br>
      123 Market Street, Suite 456<br>
      San Francisco, CA 94102<br>
      (415) 555-1234
    </p>"""

STATUS_CONTENT = {
    "approved": {
        "title": "Letter of Intent Approved",
        "subject": "LOI Approved: {title}",
        "color": "#10b981",
        "background": "#d1fae5",
        "text": "Your Letter of Intent has been approved.",
    },
    "rejected": {
        "title": "Letter of Intent Update",
        "subject": "LOI Update: {title}",
        "color": "#ef4444",
        "background": "#fee2e2",
        "text": "Unfortunately, we are unable to proceed with your Letter of Intent at this time.",
    },
    "countersigned": {
        "title": "Letter of Intent Countersigned",
        "subject": "LOI Executed: {title}",
        "color": "#10b981",
        "background": "#d1fae5",
        "text": "Great news! Your Letter of Intent has been countersigned and is now fully executed.",
    },
}


def send_email(to: Union[str, List[str]], subject: str, body_html: str, reply_to: Optional[str] = None) -> dict:
    if not Config.RESEND_API_KEY:
        logger.info(f"Resend not configured, skipping email: {subject}")
        return {"success": False, "error": "Email service not configured"}

    try:
        response = requests.post(
            RESEND_API_URL,
            headers={"Authorization": f"Bearer {Config.RESEND_API_KEY}"},
            json={
                "from": Config.EMAIL_FROM,
                "to": to if isinstance(to, list) else [to],
                "subject": subject,
                "html": body_html,
                "reply_to": reply_to or Config.ADMIN_EMAIL,
            },
            timeout=10,
        )
    except requests.RequestException as e:
        logger.error(f"Failed to send email '{subject}': {e}")
        return {"success": False, "error": "Failed to send email"}

    if response.status_code >= 400:
        logger.error(f"Resend rejected email '{subject}': HTTP {response.status_code} {response.text}")
        return {"success": False, "error": response.text}

    try:
        email_id = response.json().get("id")
    except ValueError:
        email_id = None
    logger.info(f"Email sent: {email_id}")
    return {"success": True, "id": email_id}


def _layout(title: str, content: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1.0"></head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #1a1a1a; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #1a1a1a; padding: 30px; border-radius: 8px 8px 0 0;">
    <h1 style="color: #c9a961; margin: 0; font-size: 24px;">{html.escape(title)}</h1>
  </div>
  <div style="background: #f9f9f9; padding: 30px; border-radius: 0 0 8px 8px;">
{content}
  </div>
</body>
</html>
"""


def _rows(rows: List[tuple]) -> str:
    cells = "".join(
        f'<tr><td style="padding: 8px 0; color: #666;">{html.escape(label)}:</td>'
        f'<td style="padding: 8px 0; font-weight: 600;">{html.escape(str(value))}</td></tr>'
        for label, value in rows
        if value
    )
    return f'<table style="width: 100%; border-collapse: collapse;">{cells}</table>'


def _button(path: str, label: str) -> str:
    return (
        f'<a href="{Config.SITE_URL}{path}" style="display: inline-block; background: #c9a961; color: #1a1a1a; '
        f'padding: 12px 24px; border-radius: 6px; text-decoration: none; font-weight: 600;">{label}</a>'
    )


def loi_submitted_admin_template(investor_name: str, investor_email: str, prospectus_title: str, investment_amount: str) -> str:
    return _layout("New Letter of Intent Submitted", f"""
    <p style="margin-top: 0;">A new Letter of Intent has been submitted and requires your review.</p>
    {_rows([("Investor", investor_name), ("Email", investor_email), ("Opportunity", prospectus_title), ("Investment Amount", investment_amount)])}
    {_button("/admin/lois", "Review LOI in Admin Portal")}
    <p style="margin-top: 30px; font-size: 14px; color: #666;">This is an automated notification from Golden Gate Home Advisors.</p>""")


def loi_submitted_investor_template(investor_name: str, prospectus_title: str, investment_amount: str) -> str:
    return _layout("Letter of Intent Received", f"""
    <p style="margin-top: 0;">Dear {html.escape(investor_name)},</p>
    <p>Thank you for submitting your Letter of Intent. We have received your expression of interest and our team is reviewing your submission.</p>
    {_rows([("Opportunity", prospectus_title), ("Investment Amount", investment_amount), ("Status", "Under Review")])}
    <h3>What Happens Next?</h3>
    <ol style="padding-left: 20px;">
      <li>Our team will review your Letter of Intent within 2-3 business days.</li>
      <li>If approved, we will send you the full investment documentation.</li>
      <li>You will be contacted to schedule a call to discuss the opportunity in detail.</li>
    </ol>
    {_button("/investor/lois", "View Your LOIs")}
    {FOOTER}""")


def loi_status_update_template(investor_name: str, prospectus_title: str, status: str, message: Optional[str] = None) -> str:
    content = STATUS_CONTENT[status]
    note = f"<p>{html.escape(message)}</p>" if message else ""
    return _layout(content["title"], f"""
    <p style="margin-top: 0;">Dear {html.escape(investor_name)},</p>
    <div style="background: {content['background']}; border-left: 4px solid {content['color']}; padding: 15px 20px; margin: 20px 0;">
      <p style="margin: 0; color: {content['color']}; font-weight: 600;">{content['text']}</p>
    </div>
    <p><strong>{html.escape(prospectus_title)}</strong></p>
    {note}
    {_button("/investor/lois", "View Your LOIs")}
    {FOOTER}""")


def new_lead_template(name: str, email: str, lead_type: str, phone: Optional[str] = None, message: Optional[str] = None) -> str:
    return _layout("New Lead Submitted", f"""
    <p style="margin-top: 0;">A new lead has been submitted through the website.</p>
    {_rows([("Name", name), ("Email", email), ("Phone", phone), ("Interest Type", lead_type), ("Message", message)])}
    {_button("/admin/leads", "View in Admin Portal")}
    <p style="margin-top: 30px; font-size: 14px; color: #666;">This is an automated notification from Golden Gate Home Advisors.</p>""")


def send_loi_submitted_emails(investor: dict, prospectus: dict, investment_amount: float) -> None:
    amount = format_currency(investment_amount)
    name = investor.get("name") or "Investor"
    title = prospectus.get("title") or "Investment Opportunity"

    send_email(
        Config.ADMIN_EMAIL,
        f"New LOI: {name} - {title}",
        loi_submitted_admin_template(name, investor.get("email") or "", title, amount),
    )
    if investor.get("email"):
        send_email(
            investor["email"],
            f"LOI Received: {title}",
            loi_submitted_investor_template(name, title, amount),
        )


def send_loi_status_update_email(loi: dict, status: str, message: Optional[str] = None) -> None:
    """Notify the LOI's investor; silently skipped when contact details are missing."""
    investor = loi.get("investor") or {}
    prospectus = loi.get("prospectus") or {}
    if not investor.get("email") or not prospectus.get("title"):
        logger.info(f"Skipping {status} email for LOI {loi.get('id')}: missing investor email or prospectus")
        return
    send_email(
        investor["email"],
        STATUS_CONTENT[status]["subject"].format(title=prospectus["title"]),
        loi_status_update_template(investor.get("name") or "Investor", prospectus["title"], status, message),
    )


def send_new_lead_email(lead: dict) -> None:
    send_email(
        Config.ADMIN_EMAIL,
        f"New Lead: {lead['name']} ({lead['lead_type']})",
        new_lead_template(lead["name"], lead["email"], lead["lead_type"], lead.get("phone"), lead.get("notes")),
        reply_to=lead["email"],
    )
