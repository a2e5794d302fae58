from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class CompanyInfo(BaseModel):
    """Issuing company shown in every header, the bank block and the signature."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    tagline: str = ""
    address: str = ""
    gstin: str = ""
    contacts: str = ""

    # Bank block (invoice only)
    bank_title: str = ""
    bank_name: str = ""
    account_no: str = ""
    branch: str = ""
    ifsc: str = ""


DEFAULT_COMPANY_INFO = CompanyInfo(
    name="SURYA POWER",
    tagline="DG Set Hiring, Old DG Set Buying, Selling & Servicing",
    address="No.1/11, G.N.T Road, Padiyanallur Redhills, Chennai, Thiruvallur, Tamil Nadu - 600 052",
    gstin="33AKNPR3914K1ZT",
    contacts="Mob: 9790987190 / 9840841887",
    bank_title="TAMILNAD MERCANTILE BANK",
    bank_name="SURYA POWER",
    account_no="22815005800163",
    branch="NARAVARIKUPPAM BRANCH",
    ifsc="TMBL0000228",
)


def resolve_company(company: Optional[CompanyInfo | dict[str, Any]] = None) -> CompanyInfo:
    """Shallow-merge a partial company record over the defaults.

    Missing, ``None`` and blank values keep the default.
    """
    if company is None:
        return DEFAULT_COMPANY_INFO
    if isinstance(company, CompanyInfo):
        overrides = company.model_dump()
    else:
        overrides = dict(company)
    merged = DEFAULT_COMPANY_INFO.model_dump()
    for key, value in overrides.items():
        if key in merged and value not in (None, ""):
            merged[key] = str(value)
    return CompanyInfo(**merged)
