"""Row shapes returned by the backend.

Every field is optional and unknown fields are kept: the dashboard only
reads what it displays and passes everything else through to exports.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

log = logging.getLogger(__name__)

INTENT_STATUSES = ["High", "High-Medium", "Medium", "Low", "Green Field Account"]


class Row(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class IntentRow(Row):
    companyName: str | None = None
    intentStatus: str | None = None


class NtpRow(Row):
    companyName: str | None = None
    domain: str | None = None
    category: str | None = None
    technology: str | None = None
    purchaseProbability: float | str | None = None
    purchasePrediction: str | None = None
    ntpAnalysis: str | None = None
    latestDetectedDate: str | None = None
    previousDetectedDate: str | None = None


class TechnographicsRow(Row):
    companyName: str | None = None
    domain: str | None = None
    industry: str | None = None
    region: str | None = None
    employeeSize: str | int | None = None
    revenue: str | float | None = None
    category: str | None = None
    technology: str | None = None
    linkedinUrl: str | None = None
    latestDetectedDate: str | None = None
    previousDetectedDate: str | None = None
    renewalDate: str | None = None


class RenewalRow(Row):
    companyName: str | None = None
    product: str | None = None
    renewalDate: str | None = None
    qtr: str | None = None


class ProductRow(Row):
    prodName: str | None = None
    category: str | None = None
    subCategory: str | None = None
    description: str | None = None


class BuyerGroupRow(Row):
    id: int | str | None = None
    uniqueId: str | None = None
    companyName: str | None = None
    domain: str | None = None
    industry: str | None = None
    country: str | None = None
    buyerGroupName: str | None = None
    relation: str | None = None
    shares: float | str | None = None
    description: str | None = None
    date: str | None = None


class OrgPerson(BaseModel):
    id: str = ""
    name: str = "N/A"
    designation: str = "N/A"
    email: str = "N/A"
    linkedin: str = ""
    reportsTo: str = "N/A"
    category: str = "N/A"
    hierarchy: str = "Other"


class AuthResult(BaseModel):
    ok: bool
    message: str = ""
    username: str | None = None


def normalize_rows(model: type[Row], rows: list[Any]) -> list[dict]:
    """Validate rows against `model`, dropping anything that isn't an object."""
    out = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            log.warning("Skipping row %d: expected an object, got %s", i, type(row).__name__)
            continue
        try:
            out.append(model.model_validate(row).model_dump())
        except ValidationError as e:
            log.warning("Skipping row %d: %s", i, e.errors()[0]["msg"])
    return out
