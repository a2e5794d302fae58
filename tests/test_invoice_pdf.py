"""Tests for tax invoice rendering."""

import logging
from datetime import date

import pytest
from PIL import Image

from bizdocs import (
    EmptyTablePolicy,
    ExportOptions,
    Invoice,
    TaxMode,
    generate_document_pdf,
    generate_invoice_pdf,
)
from bizdocs.domain.models.documents import LineItem
from bizdocs.domain.services.invoice_pdf import compute_invoice_totals
from bizdocs.domain.services.validation import DocumentValidationError


def _texts(rendered):
    return [text for page in rendered.page_texts for text in page]


def _invoice_with(count: int) -> Invoice:
    return Invoice(
        invoice_no="INV-MULTI-001",
        date="2026-10-19",
        po_no="PO-118",
        dc_no="DC-044",
        customer_name="Test Customer Pvt Ltd",
        customer_address="123 Test Street, Test City",
        party_gstin="33AAAAA0000A1Z5",
        items=[
            {"description": f"DG Set Rental Service - Item {i}", "hsn_code": "997319", "quantity": 1, "rate": 1000}
            for i in range(1, count + 1)
        ],
    )


# =====================================================================
# Totals
# =====================================================================

class TestInvoiceTotals:
    """Subtotal, GST per slab, grand total and words."""

    def test_single_line_igst(self, sample_invoice):
        totals = compute_invoice_totals(sample_invoice.items, TaxMode.IGST)
        assert totals.subtotal == pytest.approx(1000)
        assert totals.igst == pytest.approx(180)
        assert totals.cgst == 0 and totals.sgst == 0
        assert totals.grand_total == pytest.approx(1180)
        assert totals.amount_in_words == "Rupees one thousand one hundred eighty only"
        assert [line.label for line in totals.tax_lines] == ["IGST (18%)"]

    def test_single_line_cgst_sgst(self, sample_invoice):
        totals = compute_invoice_totals(sample_invoice.items, TaxMode.CGST_SGST)
        assert totals.cgst == pytest.approx(90)
        assert totals.sgst == pytest.approx(90)
        assert totals.grand_total == pytest.approx(1180)
        assert [line.label for line in totals.tax_lines] == ["CGST (9%)", "SGST (9%)"]

    def test_mixed_rates_grouped_by_slab(self):
        items = [
            LineItem(description="a", quantity=1, rate=100, tax_rate=5),
            LineItem(description="b", quantity=2, rate=100, tax_rate=18),
            LineItem(description="c", quantity=1, rate=100, tax_rate=5),
            LineItem(description="d", quantity=1, rate=50, tax_rate=0),
        ]
        totals = compute_invoice_totals(items, TaxMode.IGST)
        assert totals.subtotal == pytest.approx(450)
        assert [(line.label, round(line.amount, 2)) for line in totals.tax_lines] == [
            ("IGST (5%)", 10.0),
            ("IGST (18%)", 36.0),
        ]
        assert totals.grand_total == pytest.approx(sum(item.amount for item in items))

    def test_half_rate_label(self):
        items = [LineItem(description="a", quantity=1, rate=100, tax_rate=5)]
        totals = compute_invoice_totals(items, "cgst_sgst")
        assert totals.tax_lines[0].label == "CGST (2.5%)"


# =====================================================================
# Rendering
# =====================================================================

class TestInvoicePdf:
    def test_single_item_invoice(self, sample_invoice):
        rendered = generate_invoice_pdf(sample_invoice, tax_mode=TaxMode.IGST)
        texts = _texts(rendered)

        assert rendered.content[:5] == b"%PDF-"
        assert rendered.page_count == 1
        assert rendered.filename == "Invoice_INV-2026-001_SURYA_POWER.pdf"
        assert "TAX INVOICE" in texts
        assert "Invoice No: INV-2026-001" in texts
        assert "Date: 19 October 2026" in texts
        assert "GSTIN: 27AADCB2230M1ZP" in texts
        assert "Rs. 1,000.00" in texts
        assert "Rs. 180.00" in texts
        assert "Rs. 1,180.00" in texts
        assert "Proprietor" in texts

    def test_optional_refs_omitted(self, sample_invoice):
        texts = _texts(generate_invoice_pdf(sample_invoice))
        assert not any(text.startswith("PO No") for text in texts)
        assert not any(text.startswith("DC No") for text in texts)

    def test_cgst_sgst_lines(self, sample_invoice):
        texts = _texts(generate_invoice_pdf(sample_invoice, tax_mode="cgst_sgst"))
        assert "CGST (9%)" in texts
        assert "SGST (9%)" in texts
        assert texts.count("Rs. 90.00") == 2

    def test_tax_mode_falls_back_to_invoice(self, sample_invoice):
        invoice = sample_invoice.model_copy(update={"tax_mode": TaxMode.CGST_SGST})
        assert "CGST (9%)" in _texts(generate_invoice_pdf(invoice))

    def test_many_items_span_pages(self):
        rendered = generate_invoice_pdf(_invoice_with(60))

        assert rendered.page_count >= 3
        for number, page in enumerate(rendered.page_texts, start=1):
            assert page.count("TAX INVOICE") == 1
            assert f"Page {number}" in page
        items = [t for t in _texts(rendered) if t.startswith("DG Set Rental Service - Item ")]
        assert len(items) == 60
        assert "Grand Total" in rendered.page_texts[-1]
        assert "Proprietor" in rendered.page_texts[-1]

    def test_dict_input_with_camel_case_keys(self):
        rendered = generate_invoice_pdf(
            {
                "invoiceNo": "7",
                "customerName": "ACME",
                "items": [{"description": "x", "qty": "2", "rate": "50", "gst": 18}],
            }
        )
        assert "Rs. 118.00" in _texts(rendered)

    def test_date_object_input(self):
        rendered = generate_invoice_pdf(
            {
                "invoiceNo": "1",
                "date": date(2026, 10, 19),
                "customerName": "ACME",
                "items": [{"description": "x", "qty": 1, "rate": 100}],
            }
        )
        texts = _texts(rendered)
        assert "Date: 19 October 2026" in texts
        assert rendered.filename == "Invoice_1_SURYA_POWER.pdf"

    def test_draft_filename(self):
        rendered = generate_invoice_pdf(Invoice(customer_name="ACME", items=[{"description": "x"}]))
        assert rendered.filename.startswith("Invoice_draft_SURYA_POWER_")

    def test_company_override(self, sample_invoice):
        rendered = generate_invoice_pdf(sample_invoice, company={"name": "Acme Traders"})
        texts = _texts(rendered)
        assert "Acme Traders" in texts
        assert "For Acme Traders" in texts
        assert rendered.filename.endswith("_Acme_Traders.pdf")

    def test_empty_items_placeholder_and_reject(self):
        invoice = Invoice(invoice_no="E-1", customer_name="ACME")
        assert generate_invoice_pdf(invoice).page_count == 1
        with pytest.raises(DocumentValidationError):
            generate_invoice_pdf(invoice, options=ExportOptions(empty_items_policy=EmptyTablePolicy.REJECT))

    def test_no_page_numbers(self, sample_invoice):
        rendered = generate_invoice_pdf(sample_invoice, options=ExportOptions(show_page_number=False))
        assert "Page 1" not in _texts(rendered)

    def test_missing_logo_is_skipped(self, sample_invoice, tmp_path, caplog):
        options = ExportOptions(logo_path=str(tmp_path / "missing.png"))
        with caplog.at_level(logging.WARNING, logger="pdf_layout"):
            rendered = generate_invoice_pdf(sample_invoice, options=options)
        assert rendered.content[:5] == b"%PDF-"
        assert "Logo loading error" in caplog.text

    def test_png_logo(self, sample_invoice, tmp_path):
        logo = tmp_path / "logo.png"
        Image.new("RGB", (60, 36), "navy").save(logo)
        rendered = generate_invoice_pdf(sample_invoice, options=ExportOptions(logo_path=str(logo)))
        assert rendered.content[:5] == b"%PDF-"

    def test_dispatch_and_save(self, sample_invoice, tmp_path):
        rendered = generate_document_pdf(sample_invoice.model_dump(mode="json"))
        path = rendered.save(tmp_path / "out")
        assert path.read_bytes()[:5] == b"%PDF-"
        assert path.name == rendered.filename
