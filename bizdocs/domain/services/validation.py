# bizdocs/domain/services/validation.py
"""
Form-level validation for documents.

Validation happens *before* export. The PDF composers never call these
functions themselves; they coerce bad values and keep rendering.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Iterable, Mapping

from bizdocs.domain.models.documents import Challan, Document, Invoice, Letter
from bizdocs.domain.models.enums import GST_RATES
from bizdocs.domain.services.money import coerce_number

logger = logging.getLogger("validation")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[6-9]\d{9}$")
_GSTIN_RE = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")

REQUIRED_MESSAGE = "This field is required"

_REQUIRED_FIELDS: dict[type, tuple[str, ...]] = {
    Invoice: ("invoice_no", "date", "customer_name"),
    Challan: ("challan_no", "date", "supplier_name", "recipient_name"),
    Letter: ("date", "recipient_name", "subject", "body"),
}


class DocumentValidationError(Exception):
    """Raised when a document is not fit for export."""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------

def validate_required(data: Mapping[str, Any], required_fields: Iterable[str]) -> dict[str, str]:
    """Return ``{field: message}`` for every missing or blank required field."""
    errors: dict[str, str] = {}
    for name in required_fields:
        value = data.get(name)
        if value is None or value == "" or (isinstance(value, str) and not value.strip()):
            errors[name] = REQUIRED_MESSAGE
    return errors


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def validate_phone(phone: str) -> bool:
    """Indian 10-digit mobile number; whitespace is ignored."""
    return bool(_PHONE_RE.match(re.sub(r"\s+", "", phone or "")))


def validate_gstin(gstin: str) -> bool:
    return bool(_GSTIN_RE.match(gstin or ""))


def validate_positive_number(value: Any) -> bool:
    return coerce_number(value) > 0


def validate_not_future(value: str | date | datetime, today: date | None = None) -> bool:
    """True if ``value`` is today or earlier. Unparseable dates are invalid."""
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        try:
            day = date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            return False
    return day <= (today or date.today())


def format_errors(errors: Mapping[str, str]) -> str:
    return ", ".join(errors.values())


# ---------------------------------------------------------------------------
# Document-level
# ---------------------------------------------------------------------------

def validate_for_export(document: Document) -> dict[str, str]:
    """
    Check a document is complete enough to export.

    Returns an empty dict when it is; otherwise ``{field: message}``.
    Item errors use ``items.<index>.<field>`` keys.
    """
    errors = validate_required(document.model_dump(), _REQUIRED_FIELDS[type(document)])

    if isinstance(document, (Invoice, Challan)):
        if not document.items:
            errors["items"] = "At least one item is required"
        for idx, item in enumerate(document.items):
            if not item.description.strip():
                errors[f"items.{idx}.description"] = REQUIRED_MESSAGE

    if isinstance(document, Invoice):
        for idx, item in enumerate(document.items):
            if item.tax_rate not in GST_RATES:
                errors[f"items.{idx}.tax_rate"] = (
                    f"GST rate must be one of {', '.join(str(r) for r in GST_RATES)}"
                )
        if document.party_gstin and not validate_gstin(document.party_gstin):
            errors["party_gstin"] = "Invalid GSTIN format"

    return errors


def ensure_exportable(document: Document) -> None:
    """Raise :class:`DocumentValidationError` if the document cannot be exported."""
    errors = validate_for_export(document)
    if errors:
        logger.info("Document %s failed validation: %s", document.id, format_errors(errors))
        raise DocumentValidationError(format_errors(errors), errors)
