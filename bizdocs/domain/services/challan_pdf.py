# bizdocs/domain/services/challan_pdf.py
"""
Generate delivery challan PDFs.

Letterhead titled DELIVERY CHALLAN on every page, challan no/date, From/To
blocks, the items table, total quantity, optional transport details and
terms, and a two-column signature block near the bottom of the last page.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from bizdocs.domain.models.company import CompanyInfo, resolve_company
from bizdocs.domain.models.documents import Challan, ChallanItem
from bizdocs.domain.models.enums import DocumentKind
from bizdocs.domain.models.export import ExportOptions, RenderedDocument
from bizdocs.domain.services.money import format_quantity
from bizdocs.domain.services.pdf_components import format_date, render_footer, render_header
from bizdocs.domain.services.pdf_layout import (
    CONTENT_BOTTOM,
    FONT_BODY,
    FONT_SMALL,
    MARGIN_LARGE,
    PageCanvas,
    PageDecorator,
    company_filename,
    ensure_space,
    flow_lines,
)
from bizdocs.domain.services.pdf_table import ColumnSpec, draw_flowing_table

logger = logging.getLogger("challan_pdf")

CHALLAN_TITLE = "DELIVERY CHALLAN"
CHALLAN_FOOTER = "This is a computer-generated delivery challan"

ITEM_COLUMNS = (
    ColumnSpec("S.No", 15, "center"),
    ColumnSpec("Description", 70, "left"),
    ColumnSpec("Quantity", 25, "center"),
    ColumnSpec("Unit", 20, "center"),
    ColumnSpec("Remarks", 40, "left"),
)

SIGNATURE_RESERVE = 35.0
# Signature block never sits higher than this (distance from page bottom)
SIGNATURE_FROM_BOTTOM = 50.0

_LEADING = 5.0


def _item_rows(items: Iterable[ChallanItem]) -> list[list[str]]:
    return [
        [str(idx), item.description, format_quantity(item.quantity), item.unit, item.remarks]
        for idx, item in enumerate(items, start=1)
    ]


def _draw_party(canvas: PageCanvas, x: float, y: float, label: str, name: str, address: str, width: float) -> float:
    canvas.text(x, y, label, size=FONT_BODY, bold=True)
    canvas.text(x, y + _LEADING, name, size=FONT_BODY, bold=True)
    address_lines = canvas.wrap(address, width, FONT_SMALL) if address else []
    return canvas.lines(x, y + 2 * _LEADING, address_lines, leading=4.5, size=FONT_SMALL)


def _draw_signatures(canvas: PageCanvas, company: CompanyInfo, challan: Challan, y: float) -> float:
    margin = MARGIN_LARGE
    right_x = canvas.width - margin - 60

    canvas.text(margin, y, f"For {challan.supplier_name or company.name}", size=FONT_BODY, bold=True)
    canvas.line(margin, y + 15, margin + 60, y + 15, width=0.3)
    canvas.text(margin, y + 20, "Authorized Signatory", size=FONT_SMALL)

    canvas.text(right_x, y, "Receiver's Signature", size=FONT_BODY, bold=True)
    canvas.line(right_x, y + 15, canvas.width - margin, y + 15, width=0.3)
    canvas.text(right_x, y + 20, "Name & Stamp", size=FONT_SMALL)
    return y + 20


def generate_challan_pdf(
    challan: Challan | dict[str, Any],
    *,
    company: Optional[CompanyInfo | dict[str, Any]] = None,
    options: Optional[ExportOptions] = None,
) -> RenderedDocument:
    """Render a delivery challan; see :func:`generate_invoice_pdf` for the arguments."""
    if not isinstance(challan, Challan):
        challan = Challan.model_validate(challan)
    company = resolve_company(company)
    options = options or ExportOptions()
    footer = CHALLAN_FOOTER if options.footer_text is None else options.footer_text
    margin = MARGIN_LARGE

    canvas = PageCanvas(title=f"Delivery Challan {challan.challan_no}".strip(), author=company.name)
    decor = PageDecorator(
        canvas,
        draw_header=lambda: render_header(
            canvas, DocumentKind.CHALLAN, company, title=CHALLAN_TITLE, logo_path=options.logo_path,
        ),
        draw_footer=lambda: render_footer(
            canvas, text=footer, show_page_number=options.show_page_number, margin=margin,
        ),
    )

    y = decor.decorate() + 4

    canvas.text(margin, y, f"Challan No: {challan.challan_no}", size=FONT_BODY, bold=True)
    canvas.text(canvas.width - margin, y, f"Date: {format_date(challan.date)}", size=FONT_BODY, align="right")
    y += 8

    column_width = canvas.width / 2 - margin - 5
    from_end = _draw_party(
        canvas, margin, y, "From:", challan.supplier_name, challan.supplier_address, column_width,
    )
    to_end = _draw_party(
        canvas, canvas.width / 2 + 5, y, "To:", challan.recipient_name, challan.recipient_address, column_width,
    )

    table = draw_flowing_table(
        canvas,
        ITEM_COLUMNS,
        _item_rows(challan.items),
        max(from_end, to_end) + 6,
        decor.new_page,
        x=margin,
        empty_policy=options.empty_items_policy,
    )

    y = ensure_space(canvas, table.final_y + 7, 10, decor.new_page)
    canvas.text(
        canvas.width - margin, y, f"Total Quantity: {format_quantity(challan.total_quantity)}",
        size=FONT_BODY, bold=True, align="right",
    )

    transport = challan.transport_details
    if not transport.is_empty:
        y = ensure_space(canvas, y + 10, 20, decor.new_page)
        canvas.text(margin, y, "Transport Details:", size=FONT_BODY, bold=True)
        lines = []
        if transport.vehicle_no:
            lines.append(f"Vehicle No: {transport.vehicle_no}")
        if transport.driver_name:
            lines.append(f"Driver Name: {transport.driver_name}")
        y = canvas.lines(margin, y + _LEADING, lines, leading=_LEADING, size=FONT_SMALL)

    if challan.terms.strip():
        y = ensure_space(canvas, y + 10, 15, decor.new_page)
        canvas.text(margin, y, "Terms & Conditions:", size=FONT_BODY, bold=True)
        y = flow_lines(
            canvas, margin, y + _LEADING, canvas.wrap(challan.terms, canvas.width - 2 * margin, FONT_SMALL),
            leading=4.5, bottom=CONTENT_BOTTOM, on_new_page=decor.new_page, size=FONT_SMALL,
        )

    y = ensure_space(canvas, y + 10, SIGNATURE_RESERVE, decor.new_page)
    _draw_signatures(canvas, company, challan, max(y, canvas.height - SIGNATURE_FROM_BOTTOM))

    content = canvas.finish()
    logger.info(
        "Challan %s rendered: %d items, %d pages",
        challan.challan_no or "(draft)", len(challan.items), canvas.page_count,
    )
    return RenderedDocument(
        filename=company_filename(challan.kind_label, challan.reference, company.name),
        content=content,
        page_texts=canvas.page_texts,
    )
