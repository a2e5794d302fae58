from enum import Enum


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    CHALLAN = "challan"
    LETTER = "letter"


class TaxMode(str, Enum):
    """IGST for inter-state supply, CGST+SGST (half rate each) for intra-state."""
    IGST = "igst"
    CGST_SGST = "cgst_sgst"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower().replace("+", "_").replace("/", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class LetterTemplate(str, Enum):
    FORMAL = "formal"
    SEMIFORMAL = "semiformal"


# GST slabs accepted on a line item
GST_RATES = (0, 5, 12, 18, 28)
DEFAULT_GST_RATE = 18


class EmptyTablePolicy(str, Enum):
    PLACEHOLDER = "placeholder"   # draw one blank row
    REJECT = "reject"             # refuse to draw an empty table
