# bizdocs/domain/services/letter_pdf.py
"""
Generate business letters on the company letterhead.

The body flows line by line and breaks onto new pages (letterhead and
footer repeated) as needed; closing and signature are kept together.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from bizdocs.domain.models.company import CompanyInfo, resolve_company
from bizdocs.domain.models.documents import Letter
from bizdocs.domain.models.enums import DocumentKind, LetterTemplate
from bizdocs.domain.models.export import ExportOptions, RenderedDocument
from bizdocs.domain.services.pdf_components import format_date, render_footer, render_header
from bizdocs.domain.services.pdf_layout import (
    CONTENT_BOTTOM,
    FONT_BODY,
    MARGIN_LARGE,
    PageCanvas,
    PageDecorator,
    company_filename,
    ensure_space,
    flow_lines,
)

logger = logging.getLogger("letter_pdf")

LETTER_FOOTER = "This is a computer-generated letter"
CLOSING_RESERVE = 30.0

_LEADING = 5.0


def salutation_for(letter: Letter) -> str:
    if letter.template is LetterTemplate.FORMAL:
        return "Dear Sir/Madam,"
    return f"Dear {letter.recipient_name or 'Sir/Madam'},"


def closing_for(letter: Letter) -> str:
    return "Yours faithfully," if letter.template is LetterTemplate.FORMAL else "Yours sincerely,"


def generate_letter_pdf(
    letter: Letter | dict[str, Any],
    *,
    company: Optional[CompanyInfo | dict[str, Any]] = None,
    options: Optional[ExportOptions] = None,
) -> RenderedDocument:
    """Render a letter; see :func:`generate_invoice_pdf` for the arguments."""
    if not isinstance(letter, Letter):
        letter = Letter.model_validate(letter)
    company = resolve_company(company)
    options = options or ExportOptions()
    footer = LETTER_FOOTER if options.footer_text is None else options.footer_text
    margin = MARGIN_LARGE

    canvas = PageCanvas(title=letter.subject or "Letter", author=company.name, subject=letter.subject)
    decor = PageDecorator(
        canvas,
        draw_header=lambda: render_header(canvas, DocumentKind.LETTER, company, logo_path=options.logo_path),
        draw_footer=lambda: render_footer(
            canvas, text=footer, show_page_number=options.show_page_number, margin=margin,
        ),
    )
    text_width = canvas.width - 2 * margin

    def flow(y: float, values: list[str], **kwargs) -> float:
        return flow_lines(
            canvas, margin, y, values,
            leading=_LEADING, bottom=CONTENT_BOTTOM, on_new_page=decor.new_page, size=FONT_BODY, **kwargs,
        )

    y = decor.decorate() + 4

    canvas.text(margin, y, f"Ref: {letter.ref_no or 'N/A'}", size=FONT_BODY)
    canvas.text(canvas.width - margin, y, f"Date: {format_date(letter.date)}", size=FONT_BODY, align="right")
    y += 10

    canvas.text(margin, y, "To,", size=FONT_BODY, bold=True)
    recipient = [letter.recipient_name] if letter.recipient_name else []
    if letter.recipient_address:
        recipient += canvas.wrap(letter.recipient_address, text_width, FONT_BODY)
    y = flow(y + _LEADING, recipient) + _LEADING

    canvas.text(margin, y, "Subject:", size=FONT_BODY, bold=True)
    y = flow(y + _LEADING, canvas.wrap(letter.subject, text_width, FONT_BODY)) + _LEADING

    y = flow(y, [salutation_for(letter)]) + 3

    if letter.body:
        y = flow(y, canvas.wrap(letter.body, text_width, FONT_BODY))

    y = ensure_space(canvas, y + 10, CLOSING_RESERVE, decor.new_page)
    canvas.text(margin, y, closing_for(letter), size=FONT_BODY)
    y += 15
    if letter.sender_name:
        canvas.text(margin, y, letter.sender_name, size=FONT_BODY, bold=True)
        y += _LEADING
    if letter.sender_designation:
        canvas.text(margin, y, letter.sender_designation, size=FONT_BODY, italic=True)

    content = canvas.finish()
    logger.info("Letter %s rendered: %d pages", letter.ref_no or "(draft)", canvas.page_count)
    return RenderedDocument(
        filename=company_filename(letter.kind_label, letter.reference, company.name),
        content=content,
        page_texts=canvas.page_texts,
    )
