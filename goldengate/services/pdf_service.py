"""PDF rendering for Letters of Intent and prospectus summaries."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import fitz  # PyMuPDF

from ..core.http import format_currency


logger = logging.getLogger(__name__)

PAGE_WIDTH = 612  # US Letter
PAGE_HEIGHT = 792
MARGIN = 54

BRAND_DARK = (0.1, 0.1, 0.1)
BRAND_GOLD = (0.79, 0.66, 0.38)
MUTED = (0.4, 0.4, 0.4)
WATERMARK = (0.92, 0.92, 0.92)

STATUS_LABELS = {
    "submitted": "SUBMITTED",
    "review": "UNDER REVIEW",
    "approved": "APPROVED",
    "rejected": "REJECTED",
    "countersigned": "FULLY EXECUTED",
}

ACKNOWLEDGMENTS = (
    "I confirm that I am an accredited investor as defined by SEC Regulation D, Rule 501.",
    "I understand that real estate investments involve significant risk, including the potential loss of principal.",
    "I acknowledge that this Letter of Intent is non-binding and does not constitute an offer to sell securities.",
    "I agree to the terms and conditions and authorize Golden Gate Home Advisors to contact me regarding this opportunity.",
)


def format_date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%B %d, %Y")
    except ValueError:
        return value


class _Writer:
    """Top-to-bottom text layout with automatic page breaks."""

    def __init__(self, watermark: Optional[str] = None):
        self.doc = fitz.open()
        self.watermark = watermark
        self.page = None
        self.y = 0.0
        self._new_page()

    def _new_page(self) -> None:
        self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        if self.watermark:
            pivot = fitz.Point(PAGE_WIDTH / 2, PAGE_HEIGHT / 2)
            width = fitz.get_text_length(self.watermark, fontname="hebo", fontsize=96)
            self.page.insert_text(
                fitz.Point(pivot.x - width / 2, pivot.y + 30),
                self.watermark,
                fontname="hebo",
                fontsize=96,
                color=WATERMARK,
                morph=(pivot, fitz.Matrix(-30)),
            )
        self.y = MARGIN

    def _ensure_space(self, height: float) -> None:
        if self.y + height > PAGE_HEIGHT - MARGIN:
            self._new_page()

    def _wrap(self, text: str, fontname: str, fontsize: float, width: float) -> List[str]:
        lines: List[str] = []
        for paragraph in str(text).splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}".strip()
                if fitz.get_text_length(candidate, fontname=fontname, fontsize=fontsize) <= width or not current:
                    current = candidate
                else:
                    lines.append(current)
                    current = word
            lines.append(current)
        return lines

    def text(self, text: str, *, fontsize: float = 10, bold: bool = False, color=BRAND_DARK,
             indent: float = 0, spacing: float = 4) -> None:
        fontname = "hebo" if bold else "helv"
        width = PAGE_WIDTH - 2 * MARGIN - indent
        for line in self._wrap(text, fontname, fontsize, width):
            self._ensure_space(fontsize + spacing)
            self.y += fontsize
            self.page.insert_text(fitz.Point(MARGIN + indent, self.y), line,
                                  fontname=fontname, fontsize=fontsize, color=color)
            self.y += spacing

    def gap(self, height: float = 10) -> None:
        self.y += height

    def rule(self, color=BRAND_GOLD, width: float = 1.5) -> None:
        self._ensure_space(8)
        self.y += 4
        self.page.draw_line(fitz.Point(MARGIN, self.y), fitz.Point(PAGE_WIDTH - MARGIN, self.y),
                            color=color, width=width)
        self.y += 8

    def section(self, title: str) -> None:
        self.gap(8)
        self.text(title, fontsize=11, bold=True, color=BRAND_GOLD)
        self.rule(color=(0.9, 0.9, 0.9), width=0.5)

    def row(self, label: str, value) -> None:
        if value in (None, ""):
            return
        self._ensure_space(16)
        self.y += 10
        self.page.insert_text(fitz.Point(MARGIN, self.y), f"{label}:", fontname="helv", fontsize=10, color=MUTED)
        self.y -= 10
        self.text(str(value), fontsize=10, bold=True, indent=170)

    def header(self, subtitle: str) -> None:
        self.text("Golden Gate Home Advisors", fontsize=20, bold=True)
        self.text(subtitle, fontsize=9, color=BRAND_GOLD)
        self.rule()

    def footer_note(self, text: str) -> None:
        self.gap(16)
        self.text(text, fontsize=8, color=MUTED)

    def render(self) -> bytes:
        try:
            return self.doc.tobytes()
        finally:
            self.doc.close()


def _signature_block(writer: _Writer, heading: str, signature: Optional[dict], name_key: str, fallback_name: str) -> None:
    writer.text(heading, fontsize=10, bold=True)
    if signature and signature.get("signed"):
        name = signature.get(name_key) or fallback_name
        writer.text(f"Signed electronically by {name}", fontsize=10)
        if signature.get("signer_title"):
            writer.text(signature["signer_title"], fontsize=9, color=MUTED)
        writer.text(f"Date: {format_date(signature.get('signed_at'))}", fontsize=9, color=MUTED)
    else:
        writer.text("Awaiting signature", fontsize=10, color=MUTED)
    writer.gap(6)


def render_loi_pdf(loi: dict) -> bytes:
    """Render a LOI (with `investor` and `prospectus` resolved) to PDF bytes."""
    status = loi.get("status") or "submitted"
    investor = loi.get("investor") or {}
    prospectus = loi.get("prospectus") or {}
    pending = status in ("submitted", "review")

    writer = _Writer(watermark="PENDING" if pending else None)
    writer.header("LETTER OF INTENT")
    writer.text(f"LOI #{str(loi.get('id', ''))[-8:].upper()}", fontsize=9, color=MUTED)
    writer.text(f"Status: {STATUS_LABELS.get(status, status.upper())}", fontsize=9, bold=True)
    writer.gap(8)
    writer.text("Letter of Intent", fontsize=18, bold=True)
    writer.text("Non-binding expression of interest to invest", fontsize=10, color=MUTED)

    writer.section("INVESTMENT DETAILS")
    writer.row("Investment Opportunity", prospectus.get("title") or "Unknown Opportunity")
    writer.row("Investment Amount", format_currency(loi.get("investment_amount")))
    writer.row("Target Return", prospectus.get("target_return"))
    writer.row("Property Type", prospectus.get("project_type"))
    writer.row("Location", prospectus.get("location"))
    writer.row("Funding Source", loi.get("funding_source"))

    writer.section("INVESTOR INFORMATION")
    writer.row("Investor Name", investor.get("name") or "Unknown Investor")
    writer.row("Email Address", investor.get("email"))
    writer.row("Phone Number", investor.get("phone"))
    writer.row("Accreditation Status", investor.get("accredited_status") or "Pending Verification")

    writer.section("SUBMISSION DETAILS")
    writer.row("Date Submitted", format_date(loi.get("submitted_at")))
    writer.row("Date Reviewed", format_date(loi.get("reviewed_at")))

    if loi.get("investor_notes"):
        writer.section("INVESTOR NOTES")
        writer.text(loi["investor_notes"], fontsize=10)

    writer.section("ACKNOWLEDGMENTS")
    for item in ACKNOWLEDGMENTS:
        writer.text(f"- {item}", fontsize=9)

    writer.section("SIGNATURES")
    _signature_block(writer, "Investor", loi.get("investor_signature"), "printed_name", investor.get("name") or "Investor")
    _signature_block(writer, "Golden Gate Home Advisors", loi.get("company_signature"), "signer_name", "Authorized Signatory")

    writer.footer_note(
        "This Letter of Intent is a non-binding expression of interest. Any investment is subject to "
        "definitive documentation, due diligence and applicable securities laws."
    )
    return writer.render()


def _bullets(writer: _Writer, items: Iterable[str]) -> None:
    for item in items:
        if item:
            writer.text(f"- {item}", fontsize=10)


def render_prospectus_pdf(prospectus: dict) -> bytes:
    writer = _Writer(watermark="DRAFT" if prospectus.get("status") == "draft" else None)
    writer.header("INVESTMENT PROSPECTUS")
    writer.text(prospectus.get("title") or "Investment Opportunity", fontsize=18, bold=True)
    if prospectus.get("summary"):
        writer.text(prospectus["summary"], fontsize=10, color=MUTED)

    writer.section("OVERVIEW")
    writer.row("Property Type", prospectus.get("project_type"))
    writer.row("Location", prospectus.get("location") or prospectus.get("property_address"))
    writer.row("Target Return", prospectus.get("target_return"))
    if prospectus.get("minimum_investment"):
        writer.row("Minimum Investment", format_currency(prospectus["minimum_investment"]))
    if prospectus.get("total_raise"):
        writer.row("Total Raise", format_currency(prospectus["total_raise"]))
    writer.row("Projected Timeline", prospectus.get("projected_timeline"))
    writer.row("Distributions", prospectus.get("distribution_schedule"))

    if prospectus.get("description"):
        writer.section("DESCRIPTION")
        writer.text(prospectus["description"], fontsize=10)

    highlights = prospectus.get("highlights") or []
    financials = prospectus.get("financial_highlights") or []
    if highlights or financials:
        writer.section("HIGHLIGHTS")
        _bullets(writer, highlights)
        for item in financials:
            writer.row(item.get("label") or "", item.get("value"))

    writer.footer_note(
        "This summary is provided for informational purposes only and does not constitute an offer to "
        "sell or a solicitation of an offer to buy any securities."
    )
    return writer.render()
