from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Iterator, Mapping, Set

from pydantic import BaseModel, ConfigDict, Field


class FormState(BaseModel):
    """
    Answers collected by the merchant application form.

    Attribute names are snake_case; the wire names (what the browser form and
    the intake endpoint exchange) are the camelCase aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Company
    dba_name: str = Field(default="", alias="dbaName", description="(DBA) merchant name")
    legal_name: str = Field(default="", alias="legalName")
    corp_structure: str = Field(default="", alias="corpStructure")

    # Merchandise
    industry: str = Field(default="", description="Merchandise / services sold")

    # Online & gateway
    website_url: str = Field(default="", alias="websiteUrl")
    website_login: str = Field(default="", alias="websiteLogin")
    website_password: str = Field(default="", alias="websitePassword")
    ecommerce_platform: str = Field(default="", alias="ecommercePlatform")
    gateway: str = Field(default="")

    # Legal address
    legal_addr1: str = Field(default="", alias="legalAddr1")
    legal_addr2: str = Field(default="", alias="legalAddr2")
    legal_city: str = Field(default="", alias="legalCity")
    legal_state: str = Field(default="", alias="legalState")
    legal_zip: str = Field(default="", alias="legalZip")

    # Business location
    loc_addr1: str = Field(default="", alias="locAddr1")
    loc_addr2: str = Field(default="", alias="locAddr2")
    loc_city: str = Field(default="", alias="locCity")
    loc_state: str = Field(default="", alias="locState")
    loc_zip: str = Field(default="", alias="locZip")

    # Mailing address (only required when separate_mailing is set)
    separate_mailing: bool = Field(default=False, alias="separateMailing")
    mail_addr1: str = Field(default="", alias="mailAddr1")
    mail_addr2: str = Field(default="", alias="mailAddr2")
    mail_city: str = Field(default="", alias="mailCity")
    mail_state: str = Field(default="", alias="mailState")
    mail_zip: str = Field(default="", alias="mailZip")

    # Primary contact
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    title: str = Field(default="")
    phone: str = Field(default="")
    email: str = Field(default="")

    # Volumes
    vmd_monthly: str = Field(default="", alias="vmdMonthly", description="Visa/MC/Discover monthly volume")
    amex_monthly: str = Field(default="", alias="amexMonthly", description="American Express monthly volume")

    # Method of acceptance (must total 100)
    internet_pct: str = Field(default="", alias="internetPct")
    retail_pct: str = Field(default="", alias="retailPct")
    keyed_pct: str = Field(default="", alias="keyedPct")

    notes: str = Field(default="")

    def update(self, patch: Mapping[str, Any]) -> None:
        """
        Merge `patch` into the state. Only the named fields change.

        Keys may be attribute names or wire aliases. Unknown keys raise KeyError;
        the patch is validated as a whole before anything is applied.
        """
        resolved: Dict[str, Any] = {}
        for key, value in patch.items():
            resolved[resolve_field(key)] = value
        if not resolved:
            return
        candidate = FormState.model_validate({**self.model_dump(), **resolved})
        for name in resolved:
            setattr(self, name, getattr(candidate, name))

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the intake endpoint (camelCase keys)."""
        return self.model_dump(by_alias=True)


FIELD_NAMES = tuple(FormState.model_fields)
WIRE_NAMES: Dict[str, str] = {
    name: (info.alias or name) for name, info in FormState.model_fields.items()
}
_BY_WIRE_NAME = {wire: name for name, wire in WIRE_NAMES.items()}

PERCENT_FIELDS = ("internet_pct", "retail_pct", "keyed_pct")
CURRENCY_FIELDS = ("vmd_monthly", "amex_monthly")

_PERCENT_INPUT = re.compile(r"\d{0,3}")
_CURRENCY_INPUT = re.compile(r"[0-9,]*\.?[0-9]*")


def resolve_field(key: str) -> str:
    if key in WIRE_NAMES:
        return key
    if key in _BY_WIRE_NAME:
        return _BY_WIRE_NAME[key]
    raise KeyError(f"unknown form field: {key!r}")


def accepts_percent_input(value: str) -> bool:
    return bool(_PERCENT_INPUT.fullmatch(value))


def accepts_currency_input(value: str) -> bool:
    return bool(_CURRENCY_INPUT.fullmatch(value))


class TouchedFields:
    """Fields the user has interacted with (or tried to move past). Only ever grows."""

    def __init__(self, fields: Iterable[str] = ()) -> None:
        self._fields: Set[str] = set(fields)

    def mark(self, fields: Iterable[str]) -> None:
        self._fields.update(fields)

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"TouchedFields({sorted(self._fields)!r})"
