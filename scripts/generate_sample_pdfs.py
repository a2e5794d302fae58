# scripts/generate_sample_pdfs.py
"""Render a 25-item invoice, a 25-item challan and a long letter into OUTPUT_DIR."""

import os
import sys
from loguru import logger

# Ensure project root (the folder containing 'bizdocs') is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from bizdocs import (  # noqa: E402
    ExportOptions,
    TaxMode,
    generate_challan_pdf,
    generate_invoice_pdf,
    generate_letter_pdf,
)
from bizdocs.core.config import settings  # noqa: E402
from bizdocs.core.logging_config import setup_logging  # noqa: E402

ITEM_COUNT = 25


def sample_invoice() -> dict:
    return {
        "invoiceNo": "INV-MULTI-001",
        "date": "2026-10-19",
        "poNo": "PO-2026-118",
        "dcNo": "DC-2026-044",
        "customerName": "Test Customer Pvt Ltd",
        "customerAddress": "123 Test Street, Test City, Tamil Nadu - 600001",
        "partyGstin": "33AAAAA0000A1Z5",
        "items": [
            {
                "description": f"DG Set Rental Service - Item {i}",
                "hsnCode": "997319",
                "qty": i % 5 + 1,
                "rate": 1000 + i * 100,
                "gst": 18,
            }
            for i in range(1, ITEM_COUNT + 1)
        ],
    }


def sample_challan() -> dict:
    return {
        "challanNo": "DC-MULTI-001",
        "date": "2026-10-19",
        "supplierName": "SURYA POWER",
        "supplierAddress": "No.1/11, G.N.T Road, Padiyanallur Redhills, Chennai - 600 052",
        "recipientName": "Test Recipient Company",
        "recipientAddress": "456 Delivery Street, Test City, Tamil Nadu - 600002",
        "items": [
            {"description": f"Equipment Part {i}", "quantity": i * 2, "unit": "Nos", "remarks": f"Batch {i}"}
            for i in range(1, ITEM_COUNT + 1)
        ],
        "transportDetails": {"vehicleNo": "TN-01-AB-1234", "driverName": "Ravi Kumar"},
        "terms": "Goods once delivered will not be taken back.\nPlease verify quantities on receipt.",
    }


def sample_letter() -> dict:
    paragraph = (
        "We write to confirm the hire of a 125 kVA diesel generator set for the period discussed. "
        "The unit will be delivered and commissioned by our technicians, who will remain on call "
        "for the duration of the hire."
    )
    return {
        "refNo": "SP/LTR/2026/17",
        "date": "2026-10-19",
        "recipientName": "The Facilities Manager",
        "recipientAddress": "Test Recipient Company, 456 Delivery Street, Test City - 600002",
        "subject": "Confirmation of DG set hire",
        "body": "\n\n".join([paragraph] * 12),
        "senderName": "R. Suresh",
        "senderDesignation": "Proprietor",
        "template": "formal",
    }


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    options = ExportOptions.from_settings()

    rendered = [
        generate_invoice_pdf(sample_invoice(), tax_mode=TaxMode.CGST_SGST, options=options),
        generate_challan_pdf(sample_challan(), options=options),
        generate_letter_pdf(sample_letter(), options=options),
    ]
    for doc in rendered:
        path = doc.save(settings.OUTPUT_DIR)
        logger.info(f"{path.name}: {doc.page_count} pages")

    logger.success(f"Sample PDFs written to {settings.OUTPUT_DIR}")


if __name__ == "__main__":
    main()
