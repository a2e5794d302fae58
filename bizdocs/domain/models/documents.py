from __future__ import annotations

import time
import uuid
from abc import abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Any, ClassVar, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from bizdocs.domain.models.enums import DEFAULT_GST_RATE, DocumentKind, LetterTemplate, TaxMode
from bizdocs.domain.services.money import coerce_non_negative, line_amount


def new_document_id() -> str:
    """``<epoch-ms>-<9 hex chars>``, unique enough for a local store."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def advance_timestamp(previous: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    """Return a timestamp strictly later than ``previous``."""
    now = now or utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class _Record(BaseModel):
    """Frozen model base: ``None`` means "use the default", numbers may fill text fields."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info):
        field = cls.model_fields[info.field_name]
        if value is None:
            return field.get_default(call_default_factory=True)
        if field.annotation is str and isinstance(value, date):
            # datetimes keep only their calendar date
            return (value.date() if isinstance(value, datetime) else value).isoformat()
        if field.annotation is str and isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def field_names_for(cls, data: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
        """
        Re-key ``data`` by model field name, accepting any validation alias
        (``customerName`` -> ``customer_name``). Returns ``(renamed, unknown_keys)``.
        """
        lookup: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            lookup[name] = name
            if isinstance(field.validation_alias, AliasChoices):
                for choice in field.validation_alias.choices:
                    if isinstance(choice, str):
                        lookup.setdefault(choice, name)
            elif isinstance(field.validation_alias, str):
                lookup.setdefault(field.validation_alias, name)

        renamed: dict[str, Any] = {}
        unknown: list[str] = []
        for key, value in data.items():
            if key in lookup:
                renamed[lookup[key]] = value
            else:
                unknown.append(key)
        return renamed, unknown


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

class LineItem(_Record):
    """Invoice line. ``amount`` is derived and never accepted as input."""

    description: str = ""
    hsn_code: str = Field(default="", validation_alias=AliasChoices("hsn_code", "hsnCode", "hsn"))
    quantity: float = Field(default=0.0, validation_alias=AliasChoices("quantity", "qty"))
    rate: float = 0.0
    tax_rate: float = Field(default=DEFAULT_GST_RATE, validation_alias=AliasChoices("tax_rate", "gst"))

    @field_validator("quantity", "rate", "tax_rate", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> float:
        return coerce_non_negative(value)

    @property
    def base_amount(self) -> float:
        return self.quantity * self.rate

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> float:
        return line_amount(self.quantity, self.rate, self.tax_rate)


class ChallanItem(_Record):
    description: str = ""
    quantity: float = 0.0
    unit: str = ""
    remarks: str = ""

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> float:
        return coerce_non_negative(value)


class TransportDetails(_Record):
    vehicle_no: str = Field(default="", validation_alias=AliasChoices("vehicle_no", "vehicleNo"))
    driver_name: str = Field(default="", validation_alias=AliasChoices("driver_name", "driverName"))

    @property
    def is_empty(self) -> bool:
        return not (self.vehicle_no.strip() or self.driver_name.strip())


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class BaseDocument(_Record):
    """Common envelope. ``kind`` always matches the concrete class."""

    KIND: ClassVar[DocumentKind]

    id: str = Field(default_factory=new_document_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    kind: DocumentKind

    @model_validator(mode="before")
    @classmethod
    def _stamp_kind(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {**data, "kind": cls.KIND}
        return data

    @property
    @abstractmethod
    def reference(self) -> str:
        """The human document number (invoice no, challan no, letter ref)."""

    @property
    def kind_label(self) -> str:
        """Title-case kind used in filenames (``Invoice``, ``Challan``, ``Letter``)."""
        return self.KIND.value.title()


class Invoice(BaseDocument):
    KIND: ClassVar[DocumentKind] = DocumentKind.INVOICE

    invoice_no: str = Field(default="", validation_alias=AliasChoices("invoice_no", "invoiceNo"))
    date: str = ""
    po_no: str = Field(default="", validation_alias=AliasChoices("po_no", "poNo"))
    dc_no: str = Field(default="", validation_alias=AliasChoices("dc_no", "dcNo"))
    customer_name: str = Field(default="", validation_alias=AliasChoices("customer_name", "customerName"))
    customer_address: str = Field(default="", validation_alias=AliasChoices("customer_address", "customerAddress"))
    party_gstin: str = Field(default="", validation_alias=AliasChoices("party_gstin", "partyGstin"))
    items: tuple[LineItem, ...] = ()
    tax_mode: TaxMode = Field(default=TaxMode.IGST, validation_alias=AliasChoices("tax_mode", "gstType"))

    @field_validator("tax_mode", mode="before")
    @classmethod
    def _coerce_tax_mode(cls, value: Any) -> TaxMode:
        try:
            return TaxMode(value)
        except ValueError:
            return TaxMode.IGST

    @property
    def reference(self) -> str:
        return self.invoice_no


class Challan(BaseDocument):
    KIND: ClassVar[DocumentKind] = DocumentKind.CHALLAN

    challan_no: str = Field(default="", validation_alias=AliasChoices("challan_no", "challanNo"))
    date: str = ""
    supplier_name: str = Field(default="", validation_alias=AliasChoices("supplier_name", "supplierName"))
    supplier_address: str = Field(default="", validation_alias=AliasChoices("supplier_address", "supplierAddress"))
    recipient_name: str = Field(default="", validation_alias=AliasChoices("recipient_name", "recipientName"))
    recipient_address: str = Field(default="", validation_alias=AliasChoices("recipient_address", "recipientAddress"))
    items: tuple[ChallanItem, ...] = ()
    transport_details: TransportDetails = Field(
        default_factory=TransportDetails,
        validation_alias=AliasChoices("transport_details", "transportDetails"),
    )
    terms: str = ""

    @property
    def reference(self) -> str:
        return self.challan_no

    @property
    def total_quantity(self) -> float:
        return sum(item.quantity for item in self.items)


class Letter(BaseDocument):
    KIND: ClassVar[DocumentKind] = DocumentKind.LETTER

    ref_no: str = Field(default="", validation_alias=AliasChoices("ref_no", "refNo"))
    date: str = ""
    recipient_name: str = Field(default="", validation_alias=AliasChoices("recipient_name", "recipientName"))
    recipient_address: str = Field(default="", validation_alias=AliasChoices("recipient_address", "recipientAddress"))
    subject: str = ""
    body: str = ""
    sender_name: str = Field(default="", validation_alias=AliasChoices("sender_name", "senderName"))
    sender_designation: str = Field(
        default="",
        validation_alias=AliasChoices("sender_designation", "senderDesignation"),
    )
    template: LetterTemplate = LetterTemplate.FORMAL

    @field_validator("template", mode="before")
    @classmethod
    def _coerce_template(cls, value: Any) -> LetterTemplate:
        try:
            return LetterTemplate(value)
        except ValueError:
            return LetterTemplate.FORMAL

    @property
    def reference(self) -> str:
        return self.ref_no


Document = Union[Invoice, Challan, Letter]

DOCUMENT_MODELS: dict[DocumentKind, type[BaseDocument]] = {
    DocumentKind.INVOICE: Invoice,
    DocumentKind.CHALLAN: Challan,
    DocumentKind.LETTER: Letter,
}


def parse_document(data: dict[str, Any], kind: DocumentKind | str | None = None) -> Document:
    """Build the right document model from a plain dict (e.g. a stored record)."""
    kind = DocumentKind(kind or data.get("kind"))
    return DOCUMENT_MODELS[kind].model_validate(data)
