"""
bizdocs: GST tax invoices, delivery challans and business letters as PDFs.

    from bizdocs import Invoice, generate_invoice_pdf

    rendered = generate_invoice_pdf(Invoice(invoice_no="INV-7", items=[...]))
    rendered.save("output")
"""

from bizdocs.domain.models.company import DEFAULT_COMPANY_INFO, CompanyInfo, resolve_company
from bizdocs.domain.models.documents import (
    Challan,
    ChallanItem,
    Invoice,
    Letter,
    LineItem,
    TransportDetails,
    parse_document,
)
from bizdocs.domain.models.enums import DocumentKind, EmptyTablePolicy, LetterTemplate, TaxMode
from bizdocs.domain.models.export import ExportOptions, RenderedDocument
from bizdocs.domain.services.export import (
    generate_challan_pdf,
    generate_document_pdf,
    generate_invoice_pdf,
    generate_letter_pdf,
)
from bizdocs.domain.services.validation import DocumentValidationError, ensure_exportable, validate_for_export

__all__ = [
    "DEFAULT_COMPANY_INFO",
    "Challan",
    "ChallanItem",
    "CompanyInfo",
    "DocumentKind",
    "DocumentValidationError",
    "EmptyTablePolicy",
    "ExportOptions",
    "Invoice",
    "Letter",
    "LetterTemplate",
    "LineItem",
    "RenderedDocument",
    "TaxMode",
    "TransportDetails",
    "ensure_exportable",
    "generate_challan_pdf",
    "generate_document_pdf",
    "generate_invoice_pdf",
    "generate_letter_pdf",
    "parse_document",
    "resolve_company",
    "validate_for_export",
]
