# bizdocs/domain/services/invoice_pdf.py
"""
Generate GST tax invoice PDFs.

Page 1: header, invoice/bill-to blocks, then the items table which flows
over as many pages as needed. After the table: totals with the GST split
and amount in words, bank details, terms, and the signature block. Each
trailing block reserves its space first so it is never cut by a page break.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from bizdocs.domain.models.company import CompanyInfo, resolve_company
from bizdocs.domain.models.documents import Invoice, LineItem
from bizdocs.domain.models.enums import DocumentKind, TaxMode
from bizdocs.domain.models.export import ExportOptions, RenderedDocument
from bizdocs.domain.services.money import (
    amount_in_words,
    format_amount,
    format_quantity,
    gst_breakup,
)
from bizdocs.domain.services.pdf_components import format_date, render_footer, render_header
from bizdocs.domain.services.pdf_layout import (
    COLOR_LIGHT_GRAY,
    FONT_BODY,
    FONT_SMALL,
    MARGIN,
    PageCanvas,
    PageDecorator,
    company_filename,
    ensure_space,
)
from bizdocs.domain.services.pdf_table import ColumnSpec, draw_flowing_table

logger = logging.getLogger("invoice_pdf")

ITEM_COLUMNS = (
    ColumnSpec("S.No", 12, "center"),
    ColumnSpec("Description", 70, "left"),
    ColumnSpec("HSN/SAC", 20, "center"),
    ColumnSpec("Qty", 14, "center"),
    ColumnSpec("Rate", 22, "right"),
    ColumnSpec("GST %", 14, "center"),
    ColumnSpec("Amount", 26, "right"),
)

TERMS = (
    "1. Interest 24% p.a. will be charged on all invoices if not paid within due date.",
    "2. All payment to be made only by crossed cheques drawn in our favour.",
    "3. PAYMENT WITHIN .............. DAYS",
)

# Space reserved (mm) before each trailing block
TOTALS_RESERVE = 25.0
BANK_TERMS_RESERVE = 80.0
SIGNATURE_RESERVE = 30.0

_META_TOP = 45.0
_META_LEADING = 5.0
_TOTALS_ROW = 7.0
_TOTALS_LABEL_WIDTH = 45.0
_TOTALS_VALUE_WIDTH = 40.0
_BLOCK_LEADING = 4.5


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaxLine:
    label: str
    amount: float


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    igst: float
    cgst: float
    sgst: float
    tax_lines: tuple[TaxLine, ...]

    @property
    def tax_total(self) -> float:
        return self.igst + self.cgst + self.sgst

    @property
    def grand_total(self) -> float:
        return self.subtotal + self.tax_total

    @property
    def amount_in_words(self) -> str:
        return amount_in_words(self.grand_total)


def compute_invoice_totals(items: Iterable[LineItem], tax_mode: TaxMode | str = TaxMode.IGST) -> InvoiceTotals:
    """
    Subtotal of ``qty * rate`` and GST per rate slab.

    Items are grouped by their GST rate; each slab is split with
    :func:`gst_breakup` so mixed-rate invoices get one tax line per slab.
    """
    mode = TaxMode(tax_mode)
    base_by_rate: dict[float, float] = defaultdict(float)
    subtotal = 0.0
    for item in items:
        subtotal += item.base_amount
        base_by_rate[item.tax_rate] += item.base_amount

    igst = cgst = sgst = 0.0
    lines: list[TaxLine] = []
    for rate in sorted(base_by_rate):
        if rate <= 0:
            continue
        split = gst_breakup(base_by_rate[rate], rate, mode)
        igst += split.igst
        cgst += split.cgst
        sgst += split.sgst
        if mode is TaxMode.IGST:
            lines.append(TaxLine(f"IGST ({format_quantity(rate)}%)", split.igst))
        else:
            half = format_quantity(rate / 2)
            lines.append(TaxLine(f"CGST ({half}%)", split.cgst))
            lines.append(TaxLine(f"SGST ({half}%)", split.sgst))

    return InvoiceTotals(subtotal=subtotal, igst=igst, cgst=cgst, sgst=sgst, tax_lines=tuple(lines))


def _item_rows(items: Iterable[LineItem]) -> list[list[str]]:
    return [
        [
            str(idx),
            item.description,
            item.hsn_code,
            format_quantity(item.quantity),
            format_amount(item.rate, symbol=""),
            format_quantity(item.tax_rate),
            format_amount(item.base_amount, symbol=""),
        ]
        for idx, item in enumerate(items, start=1)
    ]


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def _draw_meta_blocks(canvas: PageCanvas, invoice: Invoice) -> float:
    """Invoice refs on the left, Bill To on the right. Returns the lower of the two ends."""
    half = canvas.width / 2

    left = [f"Invoice No: {invoice.invoice_no}", f"Date: {format_date(invoice.date)}"]
    if invoice.po_no:
        left.append(f"PO No: {invoice.po_no}")
    if invoice.dc_no:
        left.append(f"DC No: {invoice.dc_no}")
    left_end = canvas.lines(MARGIN, _META_TOP, left, leading=_META_LEADING, size=FONT_BODY)

    canvas.text(half, _META_TOP, "Bill To:", size=FONT_BODY, bold=True)
    right = [invoice.customer_name]
    right += canvas.wrap(invoice.customer_address, half - MARGIN, FONT_BODY) if invoice.customer_address else []
    if invoice.party_gstin:
        right.append(f"GSTIN: {invoice.party_gstin}")
    right_end = canvas.lines(half, _META_TOP + _META_LEADING, right, leading=_META_LEADING, size=FONT_BODY)

    return max(left_end, right_end)


def _draw_totals(canvas: PageCanvas, totals: InvoiceTotals, y: float) -> float:
    """Amount in words (left) beside the totals grid (right)."""
    words_width = canvas.width / 2 - MARGIN - 4
    canvas.text(MARGIN, y + 5, "Amount in words:", size=FONT_BODY, bold=True)
    words_lines = canvas.wrap(totals.amount_in_words, words_width, FONT_BODY)
    words_end = canvas.lines(MARGIN, y + 10, words_lines, leading=5, size=FONT_BODY)

    rows = [("Subtotal", totals.subtotal, True)]
    rows += [(line.label, line.amount, False) for line in totals.tax_lines]
    rows.append(("Grand Total", totals.grand_total, True))

    x_label = canvas.width - MARGIN - _TOTALS_LABEL_WIDTH - _TOTALS_VALUE_WIDTH
    x_value = x_label + _TOTALS_LABEL_WIDTH
    row_y = y
    for idx, (label, amount, bold) in enumerate(rows):
        is_grand = idx == len(rows) - 1
        fill = COLOR_LIGHT_GRAY if is_grand else None
        canvas.rect(x_label, row_y, _TOTALS_LABEL_WIDTH, _TOTALS_ROW, fill=fill)
        canvas.rect(x_value, row_y, _TOTALS_VALUE_WIDTH, _TOTALS_ROW, fill=fill)
        baseline = row_y + _TOTALS_ROW - 2.2
        canvas.text(x_label + 2, baseline, label, size=FONT_BODY, bold=bold)
        canvas.text(x_value + _TOTALS_VALUE_WIDTH - 2, baseline, format_amount(amount), size=FONT_BODY, bold=is_grand, align="right")
        row_y += _TOTALS_ROW

    return max(words_end, row_y)


def _totals_height(totals: InvoiceTotals) -> float:
    return (len(totals.tax_lines) + 2) * _TOTALS_ROW


def _draw_bank_and_terms(canvas: PageCanvas, company: CompanyInfo, y: float) -> float:
    bank = [
        f"NAME: {company.bank_name}",
        f"AC.NO: {company.account_no}",
        f"BRANCH: {company.branch}",
        f"IFSC CODE: {company.ifsc}",
    ]
    canvas.text(MARGIN, y, company.bank_title, size=FONT_SMALL, bold=True)
    y = canvas.lines(MARGIN, y + _BLOCK_LEADING, bank, leading=_BLOCK_LEADING, size=FONT_SMALL)

    y += 4
    canvas.text(MARGIN, y, "Terms & Conditions:", size=FONT_SMALL, bold=True)
    return canvas.lines(MARGIN, y + _BLOCK_LEADING, list(TERMS), leading=_BLOCK_LEADING, size=FONT_SMALL)


def _draw_signature(canvas: PageCanvas, company: CompanyInfo, y: float) -> float:
    x = canvas.width - MARGIN - 50
    canvas.text(x, y, f"For {company.name}", size=FONT_BODY, bold=True)
    canvas.line(x, y + 14, canvas.width - MARGIN, y + 14, width=0.3)
    canvas.text(x, y + 19, "Proprietor", size=FONT_SMALL, bold=True)
    return y + 19


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def generate_invoice_pdf(
    invoice: Invoice | dict[str, Any],
    *,
    tax_mode: Optional[TaxMode | str] = None,
    company: Optional[CompanyInfo | dict[str, Any]] = None,
    options: Optional[ExportOptions] = None,
) -> RenderedDocument:
    """
    Render a tax invoice.

    Args:
        invoice: Invoice model (or a dict accepted by ``Invoice``).
        tax_mode: IGST or CGST_SGST; overrides ``options.tax_mode`` and the
                  invoice's own ``tax_mode``.
        company: Issuing company; partial records are merged over the defaults.
        options: Export options (logo, footer, empty-table policy).

    Returns:
        RenderedDocument with the PDF bytes and suggested filename.
    """
    if not isinstance(invoice, Invoice):
        invoice = Invoice.model_validate(invoice)
    company = resolve_company(company)
    options = options or ExportOptions()
    mode = TaxMode(tax_mode or options.tax_mode or invoice.tax_mode)

    canvas = PageCanvas(title=f"Tax Invoice {invoice.invoice_no}".strip(), author=company.name)
    decor = PageDecorator(
        canvas,
        draw_header=lambda: render_header(canvas, DocumentKind.INVOICE, company, logo_path=options.logo_path),
        draw_footer=lambda: render_footer(
            canvas, text=options.footer_text or "", show_page_number=options.show_page_number,
        ),
    )

    # Header/footer for page 1 before any content
    decor.decorate()

    meta_end = _draw_meta_blocks(canvas, invoice)

    table = draw_flowing_table(
        canvas,
        ITEM_COLUMNS,
        _item_rows(invoice.items),
        max(meta_end, 60.0) + 6,
        decor.new_page,
        empty_policy=options.empty_items_policy,
    )

    totals = compute_invoice_totals(invoice.items, mode)
    y = ensure_space(canvas, table.final_y + 8, max(TOTALS_RESERVE, _totals_height(totals) + 2), decor.new_page)
    y = _draw_totals(canvas, totals, y)

    y = ensure_space(canvas, y + 8, BANK_TERMS_RESERVE, decor.new_page)
    y = _draw_bank_and_terms(canvas, company, y)

    y = ensure_space(canvas, y + 10, SIGNATURE_RESERVE, decor.new_page)
    _draw_signature(canvas, company, y)

    content = canvas.finish()
    logger.info(
        "Invoice %s rendered: %d items, %d pages, grand total %s",
        invoice.invoice_no or "(draft)", len(invoice.items), canvas.page_count, format_amount(totals.grand_total),
    )
    return RenderedDocument(
        filename=company_filename(invoice.kind_label, invoice.reference, company.name),
        content=content,
        page_texts=canvas.page_texts,
    )
