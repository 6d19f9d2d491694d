from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from merchant_intake.form_state import FormState, PERCENT_FIELDS
from merchant_intake.steps import STEPS

ACCEPTANCE = "acceptance"  # virtual field carrying the percentage-sum error

REQUIRED = "Required"
BAD_URL = "Start with http:// or https://"
BAD_EMAIL = "Enter a valid email"
BAD_ACCEPTANCE = "Totals must equal 100%"

_URL_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_EMAIL_SHAPE = re.compile(r"^\S+@\S+\.\S+$")
_LEADING_DIGITS = re.compile(r"\d+")

_COMPANY_FIELDS = ("dba_name", "legal_name", "corp_structure")
_LEGAL_ADDRESS = ("legal_addr1", "legal_city", "legal_state", "legal_zip")
_LOCATION_ADDRESS = ("loc_addr1", "loc_city", "loc_state", "loc_zip")
_MAILING_ADDRESS = ("mail_addr1", "mail_city", "mail_state", "mail_zip")
_CONTACT_FIELDS = ("first_name", "last_name", "phone", "email")

# Checked again right before the final submit, whatever step the user is on.
CRITICAL_FIELDS: Tuple[str, ...] = (
    *_COMPANY_FIELDS,
    "industry",
    *_LEGAL_ADDRESS,
    *_LOCATION_ADDRESS,
    *_CONTACT_FIELDS,
)

ErrorSet = Dict[str, str]


def _percent(raw: str) -> int:
    # Same reading as parseInt(x || "0") || 0 on the browser side.
    m = _LEADING_DIGITS.match((raw or "").strip())
    return int(m.group(0)) if m else 0


def acceptance_total(state: FormState) -> int:
    return sum(_percent(getattr(state, f)) for f in PERCENT_FIELDS)


def _blank(value: str) -> bool:
    return not (value or "").strip()


def validate(state: FormState) -> ErrorSet:
    """
    Compute every error for the current answers in one pass.

    Stateless on purpose: callers re-run it after each edit instead of
    patching a previous result.
    """
    errors: ErrorSet = {}

    required = [*_COMPANY_FIELDS, "industry", *_LEGAL_ADDRESS, *_LOCATION_ADDRESS]
    if state.separate_mailing:
        required.extend(_MAILING_ADDRESS)
    required.extend(_CONTACT_FIELDS)
    for field in required:
        if _blank(getattr(state, field)):
            errors[field] = REQUIRED

    url = state.website_url.strip()
    if url and not _URL_SCHEME.match(url):
        errors["website_url"] = BAD_URL

    email = state.email.strip()
    if email and not _EMAIL_SHAPE.match(email):
        errors["email"] = BAD_EMAIL

    if acceptance_total(state) != 100:
        errors[ACCEPTANCE] = BAD_ACCEPTANCE

    return errors


def fields_for_step(step_key: str, state: FormState) -> List[str]:
    """Field ids a step is responsible for. The address step depends on `separate_mailing`."""
    if step_key == "company":
        return list(_COMPANY_FIELDS)
    if step_key == "merch":
        return ["industry"]
    if step_key == "online":
        # Optional, but a malformed URL still blocks.
        return ["website_url"]
    if step_key == "address":
        fields = [*_LEGAL_ADDRESS, *_LOCATION_ADDRESS]
        if state.separate_mailing:
            fields.extend(_MAILING_ADDRESS)
        return fields
    if step_key == "contact":
        return list(_CONTACT_FIELDS)
    if step_key == "accept":
        return [ACCEPTANCE]
    if step_key in {"volume", "notes", "review"}:
        return []
    raise KeyError(f"unknown step: {step_key!r}")


def step_has_errors(step_key: str, state: FormState, errors: Optional[Mapping[str, str]] = None) -> bool:
    if errors is None:
        errors = validate(state)
    return any(errors.get(f) for f in fields_for_step(step_key, state))


def first_step_with_errors(state: FormState, errors: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Index of the earliest step that still has errors, or None."""
    if errors is None:
        errors = validate(state)
    for i, step in enumerate(STEPS):
        if step_has_errors(step.key, state, errors):
            return i
    return None


def visible_errors(errors: Mapping[str, str], touched: Iterable[str]) -> ErrorSet:
    """Errors the UI should show: only for fields the user has touched."""
    touched_set = set(touched)
    return {f: msg for f, msg in errors.items() if f in touched_set}
