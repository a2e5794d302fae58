# bizdocs/domain/services/export.py
"""
Export entry points.

    from bizdocs.domain.services.export import generate_document_pdf

    rendered = generate_document_pdf(invoice, options=ExportOptions.from_settings())
    rendered.save("output")

Documents may be passed as models or as plain dicts (``kind`` selects the
model). Nothing here validates: call ``ensure_exportable`` first when the
data comes from a form.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from bizdocs.domain.models.company import CompanyInfo
from bizdocs.domain.models.documents import Challan, Document, Invoice, Letter, parse_document
from bizdocs.domain.models.enums import DocumentKind, TaxMode
from bizdocs.domain.models.export import ExportOptions, RenderedDocument
from bizdocs.domain.services.challan_pdf import generate_challan_pdf
from bizdocs.domain.services.invoice_pdf import generate_invoice_pdf
from bizdocs.domain.services.letter_pdf import generate_letter_pdf

logger = logging.getLogger("export")

__all__ = [
    "generate_challan_pdf",
    "generate_document_pdf",
    "generate_invoice_pdf",
    "generate_letter_pdf",
]


def generate_document_pdf(
    document: Document | dict[str, Any],
    *,
    kind: Optional[DocumentKind | str] = None,
    tax_mode: Optional[TaxMode | str] = None,
    company: Optional[CompanyInfo | dict[str, Any]] = None,
    options: Optional[ExportOptions] = None,
) -> RenderedDocument:
    """Render any document, dispatching on its kind. ``tax_mode`` only applies to invoices."""
    if isinstance(document, dict):
        document = parse_document(document, kind)

    if isinstance(document, Invoice):
        return generate_invoice_pdf(document, tax_mode=tax_mode, company=company, options=options)
    if isinstance(document, Challan):
        return generate_challan_pdf(document, company=company, options=options)
    if isinstance(document, Letter):
        return generate_letter_pdf(document, company=company, options=options)

    raise TypeError(f"Cannot export {type(document).__name__}")
