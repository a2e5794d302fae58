# bizdocs/domain/services/pdf_components.py
"""
Header and footer renderers shared by the invoice, challan and letter PDFs.

Each renderer only draws; it keeps no state, so it is called once for page 1
before any body content and again for every page added later.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from bizdocs.domain.models.company import CompanyInfo
from bizdocs.domain.models.enums import DocumentKind
from bizdocs.domain.services.pdf_layout import (
    COLOR_PRIMARY,
    COLOR_SECONDARY,
    COLOR_TEXT,
    FONT_HEADER,
    FONT_SMALL,
    FONT_SUBHEADER,
    FONT_TINY,
    FONT_TITLE,
    LOGO_HEIGHT,
    LOGO_WIDTH,
    MARGIN,
    MARGIN_LARGE,
    PageCanvas,
)

logger = logging.getLogger("pdf_components")

INVOICE_HEADER_BOTTOM = 40.0
_LOGO_TOP = 8.0


def format_date(value) -> str:
    """``"2026-10-19"`` -> ``"19 October 2026"``; blank -> ``"N/A"``; junk passes through."""
    if not value:
        return "N/A"
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        text = str(value).strip()
        try:
            day = datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return text
    return f"{day.day} {day:%B %Y}"


def _draw_logo(canvas: PageCanvas, logo_path: Optional[str], x: float) -> None:
    if logo_path:
        canvas.image(logo_path, x, _LOGO_TOP, LOGO_WIDTH, LOGO_HEIGHT)


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

def render_invoice_header(
    canvas: PageCanvas,
    company: CompanyInfo,
    *,
    title: str = "TAX INVOICE",
    logo_path: Optional[str] = None,
) -> float:
    """Centred company block used on tax invoices. Returns the Y below the divider."""
    page_width = canvas.width

    _draw_logo(canvas, logo_path, MARGIN)

    # GSTIN below the logo slot
    canvas.text(MARGIN, _LOGO_TOP + LOGO_HEIGHT + 4, f"GSTIN: {company.gstin}", size=FONT_SMALL)

    canvas.text(page_width / 2, 15, title, size=FONT_HEADER, bold=True, align="center")
    canvas.text(page_width / 2, 24, company.name, size=FONT_TITLE, bold=True, color=COLOR_PRIMARY, align="center")
    if company.tagline:
        canvas.text(page_width / 2, 30, company.tagline, size=FONT_SMALL, align="center")
    if company.address:
        canvas.text(page_width / 2, 35, company.address, size=FONT_SMALL, align="center")
    if company.contacts:
        canvas.text(page_width - MARGIN, 15, company.contacts, size=FONT_SMALL, align="right")

    canvas.line(MARGIN, INVOICE_HEADER_BOTTOM, page_width - MARGIN, INVOICE_HEADER_BOTTOM, width=0.8, color=COLOR_PRIMARY)
    return INVOICE_HEADER_BOTTOM


def render_letterhead(
    canvas: PageCanvas,
    company: CompanyInfo,
    *,
    title: Optional[str] = None,
    logo_path: Optional[str] = None,
    margin: float = MARGIN_LARGE,
) -> float:
    """
    Logo-left letterhead used by challans and letters.

    Company name, tagline, wrapped address and ``contacts | GSTIN`` sit to
    the right of the logo slot, followed by a full-width rule and, when
    given, a centred document title. Returns the Y where content may start.
    """
    page_width = canvas.width
    text_x = margin + LOGO_WIDTH + 5

    _draw_logo(canvas, logo_path, margin)

    canvas.text(text_x, _LOGO_TOP + 6, company.name, size=FONT_HEADER, bold=True, color=COLOR_PRIMARY)
    canvas.text(text_x, _LOGO_TOP + 11, company.tagline, size=FONT_SMALL, italic=True)

    address_lines = canvas.wrap(company.address, page_width - 2 * margin - LOGO_WIDTH - 5, FONT_TINY)
    y = canvas.lines(text_x, _LOGO_TOP + 16, address_lines, leading=4, size=FONT_TINY)

    contact_parts = [part for part in (company.contacts, f"GSTIN: {company.gstin}" if company.gstin else "") if part]
    canvas.text(text_x, y + 1, " | ".join(contact_parts), size=FONT_TINY)

    rule_y = y + 5
    canvas.line(margin, rule_y, page_width - margin, rule_y, width=0.5, color=COLOR_TEXT)

    if not title:
        return rule_y + 6

    title_y = rule_y + 8
    canvas.text(page_width / 2, title_y, title, size=FONT_SUBHEADER, bold=True, color=COLOR_PRIMARY, align="center")
    return title_y + 5


def render_header(
    canvas: PageCanvas,
    kind: DocumentKind,
    company: CompanyInfo,
    *,
    title: Optional[str] = None,
    logo_path: Optional[str] = None,
) -> float:
    """Draw the header for ``kind`` and return the Y where body content may begin."""
    if kind is DocumentKind.INVOICE:
        return render_invoice_header(canvas, company, title=title or "TAX INVOICE", logo_path=logo_path)
    if kind is DocumentKind.CHALLAN:
        return render_letterhead(canvas, company, title=title or "DELIVERY CHALLAN", logo_path=logo_path)
    return render_letterhead(canvas, company, title=title, logo_path=logo_path)


# ---------------------------------------------------------------------------
# Footer
# ---------------------------------------------------------------------------

def render_footer(
    canvas: PageCanvas,
    *,
    text: str = "",
    show_page_number: bool = True,
    margin: float = MARGIN,
) -> None:
    """Page number bottom-right and an optional centred grey caption."""
    page_width, page_height = canvas.width, canvas.height

    if show_page_number:
        canvas.text(
            page_width - margin, page_height - 5, f"Page {canvas.page_number}",
            size=FONT_TINY, align="right",
        )
    if text:
        canvas.text(page_width / 2, page_height - 10, text, size=FONT_TINY, color=COLOR_SECONDARY, align="center")
