"""Shared test fixtures for the bizdocs test suite."""

import pytest

from bizdocs.domain.models.company import DEFAULT_COMPANY_INFO
from bizdocs.domain.models.documents import Challan, Invoice, Letter
from bizdocs.domain.services.pdf_layout import CONTENT_TOP, PageCanvas
from bizdocs.infrastructure.store.backends import InMemoryBackend
from bizdocs.infrastructure.store.document_store import DocumentStore


@pytest.fixture
def company():
    return DEFAULT_COMPANY_INFO


@pytest.fixture
def sample_invoice() -> Invoice:
    """Single-line invoice: 10 x 100 at 18% GST."""
    return Invoice(
        invoice_no="INV-2026-001",
        date="2026-10-19",
        customer_name="XYZ Enterprises",
        customer_address="Mumbai, Maharashtra",
        party_gstin="27AADCB2230M1ZP",
        items=[{"description": "DG Set Rental", "hsn_code": "997319", "quantity": 10, "rate": 100, "tax_rate": 18}],
    )


@pytest.fixture
def sample_challan() -> Challan:
    """25 short items: the table runs onto a second page."""
    return Challan(
        challan_no="DC-2026-044",
        date="2026-10-19",
        supplier_name="SURYA POWER",
        supplier_address="No.1/11, G.N.T Road, Padiyanallur Redhills, Chennai - 600 052",
        recipient_name="Test Recipient Company",
        recipient_address="456 Delivery Street, Test City, Tamil Nadu - 600002",
        items=[
            {"description": f"Equipment Part {i}", "quantity": 2, "unit": "Nos", "remarks": ""}
            for i in range(1, 26)
        ],
        transport_details={"vehicle_no": "TN-01-AB-1234", "driver_name": "Ravi Kumar"},
        terms="Goods once delivered will not be taken back.",
    )


@pytest.fixture
def sample_letter() -> Letter:
    return Letter(
        ref_no="SP/LTR/2026/17",
        date="2026-10-19",
        recipient_name="Mr. Kumar",
        recipient_address="456 Delivery Street, Test City",
        subject="Confirmation of DG set hire",
        body="We confirm the hire of a 125 kVA generator set.\n\nThank you for your business.",
        sender_name="R. Suresh",
        sender_designation="Proprietor",
        template="formal",
    )


@pytest.fixture
def memory_store() -> DocumentStore:
    return DocumentStore(InMemoryBackend())


@pytest.fixture
def bare_canvas():
    """A canvas plus a page-break callback that only starts a new page."""
    canvas = PageCanvas()

    def new_page() -> float:
        canvas.new_page()
        return CONTENT_TOP

    return canvas, new_page
