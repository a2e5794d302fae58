"""Tests for document models and company defaults."""

import re
from datetime import date, datetime

import pytest

from bizdocs import (
    DEFAULT_COMPANY_INFO,
    Challan,
    CompanyInfo,
    DocumentKind,
    Invoice,
    Letter,
    LineItem,
    TaxMode,
    parse_document,
    resolve_company,
)
from bizdocs.domain.models.documents import BaseDocument, advance_timestamp, new_document_id


class TestLineItem:
    def test_amount_is_derived(self):
        item = LineItem(description="x", quantity=10, rate=100, tax_rate=18)
        assert item.base_amount == 1000
        assert item.amount == pytest.approx(1180)
        assert item.model_dump()["amount"] == pytest.approx(1180)

    def test_bad_numbers_become_zero(self):
        item = LineItem(quantity="abc", rate=None, tax_rate=-5)
        assert item.quantity == 0
        assert item.rate == 0
        assert item.tax_rate == 0
        assert item.amount == 0

    def test_default_tax_rate(self):
        assert LineItem().tax_rate == 18

    def test_camel_case_and_numeric_text(self):
        item = LineItem.model_validate({"hsnCode": 997319, "qty": "3", "gst": "5", "description": None})
        assert item.hsn_code == "997319"
        assert item.quantity == 3
        assert item.tax_rate == 5
        assert item.description == ""


class TestDocuments:
    """Kind stamping, aliases and coercion."""

    def test_kind_is_stamped(self):
        assert Invoice().kind is DocumentKind.INVOICE
        assert Challan(kind="letter").kind is DocumentKind.CHALLAN
        assert Letter().kind is DocumentKind.LETTER

    def test_tax_mode_aliases(self):
        assert Invoice(gstType="CGST+SGST").tax_mode is TaxMode.CGST_SGST
        assert Invoice(tax_mode="nonsense").tax_mode is TaxMode.IGST

    def test_documents_are_frozen(self):
        invoice = Invoice()
        with pytest.raises(Exception):
            invoice.invoice_no = "X"

    def test_challan_total_quantity(self):
        challan = Challan(items=[{"quantity": 2}, {"quantity": "3.5"}, {"quantity": None}])
        assert challan.total_quantity == 5.5
        assert challan.transport_details.is_empty

    def test_parse_document(self):
        doc = parse_document({"kind": "letter", "refNo": "L-1", "senderName": "R"})
        assert isinstance(doc, Letter)
        assert doc.reference == "L-1"
        assert doc.sender_name == "R"

    def test_parse_document_explicit_kind(self):
        doc = parse_document({"challanNo": "C-9"}, DocumentKind.CHALLAN)
        assert doc.reference == "C-9"

    def test_id_format(self):
        assert re.fullmatch(r"\d{13}-[0-9a-f]{9}", new_document_id())
        assert new_document_id() != new_document_id()

    def test_advance_timestamp_is_strict(self):
        first = Invoice().updated_at
        assert advance_timestamp(first, now=first) > first

    def test_date_objects_become_iso_text(self):
        assert Invoice(date=date(2026, 10, 19)).date == "2026-10-19"
        assert Challan(date=datetime(2026, 10, 19, 17, 45)).date == "2026-10-19"
        assert Letter.model_validate({"date": date(2026, 1, 5)}).date == "2026-01-05"


class TestDocumentReference:
    """Every kind exposes its human number and filename label."""

    def test_base_document_is_abstract(self):
        with pytest.raises(TypeError):
            BaseDocument()

    @pytest.mark.parametrize(
        "document, label, reference",
        [
            (Invoice(invoice_no="INV-9"), "Invoice", "INV-9"),
            (Challan(challan_no="DC-4"), "Challan", "DC-4"),
            (Letter(ref_no="L/22"), "Letter", "L/22"),
        ],
    )
    def test_reference_and_label(self, document, label, reference):
        assert document.kind_label == label
        assert document.reference == reference


class TestCompany:
    def test_defaults(self):
        assert resolve_company() is DEFAULT_COMPANY_INFO
        assert DEFAULT_COMPANY_INFO.gstin == "33AKNPR3914K1ZT"

    def test_partial_merge(self):
        company = resolve_company({"name": "Acme", "gstin": "", "ifsc": None, "unknown": "x"})
        assert company.name == "Acme"
        assert company.gstin == DEFAULT_COMPANY_INFO.gstin
        assert company.ifsc == DEFAULT_COMPANY_INFO.ifsc

    def test_model_merge(self):
        company = resolve_company(CompanyInfo(name="Acme"))
        assert company.name == "Acme"
        assert company.bank_title == DEFAULT_COMPANY_INFO.bank_title
