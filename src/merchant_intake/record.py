from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

from merchant_intake.coercion import to_boolean, to_int, to_number, to_text
from merchant_intake.form_state import CURRENCY_FIELDS, FIELD_NAMES, PERCENT_FIELDS, WIRE_NAMES


class SubmissionRecord(BaseModel):
    """
    One row of `merchant_applications`.

    Every form field gets a typed, optional column; the untouched request body
    is kept alongside in `raw_payload` so fields added to the form later are
    not lost before a column exists for them.
    """

    dba_name: Optional[str] = None
    legal_name: Optional[str] = None
    corp_structure: Optional[str] = None
    industry: Optional[str] = None
    website_url: Optional[str] = None
    website_login: Optional[str] = None
    website_password: Optional[str] = None
    ecommerce_platform: Optional[str] = None
    gateway: Optional[str] = None
    legal_addr1: Optional[str] = None
    legal_addr2: Optional[str] = None
    legal_city: Optional[str] = None
    legal_state: Optional[str] = None
    legal_zip: Optional[str] = None
    loc_addr1: Optional[str] = None
    loc_addr2: Optional[str] = None
    loc_city: Optional[str] = None
    loc_state: Optional[str] = None
    loc_zip: Optional[str] = None
    separate_mailing: bool = False
    mail_addr1: Optional[str] = None
    mail_addr2: Optional[str] = None
    mail_city: Optional[str] = None
    mail_state: Optional[str] = None
    mail_zip: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    vmd_monthly: Optional[float] = None
    amex_monthly: Optional[float] = None
    internet_pct: Optional[int] = None
    retail_pct: Optional[int] = None
    keyed_pct: Optional[int] = None
    notes: Optional[str] = None

    raw_payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


def _pick(payload: Mapping[str, Any], name: str) -> Any:
    wire = WIRE_NAMES[name]
    if wire in payload:
        return payload[wire]
    return payload.get(name)


def build_submission_record(payload: Mapping[str, Any]) -> SubmissionRecord:
    """Coerce a raw lead body into a record. Never fails on bad values; they become None."""
    columns: Dict[str, Any] = {}
    for name in FIELD_NAMES:
        raw = _pick(payload, name)
        if name == "separate_mailing":
            columns[name] = to_boolean(raw)
        elif name in PERCENT_FIELDS:
            columns[name] = to_int(raw)
        elif name in CURRENCY_FIELDS:
            columns[name] = to_number(raw)
        else:
            columns[name] = to_text(raw)
    return SubmissionRecord(**columns, raw_payload=dict(payload))
