from __future__ import annotations

from typing import List, Tuple

from merchant_intake.form_state import FormState
from merchant_intake.validation import acceptance_total

EMPTY = "—"


def _or_empty(value: str) -> str:
    return value if value and value.strip() else EMPTY


def _money(value: str) -> str:
    return f"${value}" if value else EMPTY


def acceptance_summary(state: FormState) -> str:
    return (
        f"{acceptance_total(state)}% "
        f"(Internet {state.internet_pct or 0} / Retail {state.retail_pct or 0} / Keyed {state.keyed_pct or 0})"
    )


def review_rows(state: FormState) -> List[Tuple[str, str]]:
    """Label/value pairs shown on the review step before submitting."""
    contact = f"{state.first_name} {state.last_name}".strip()
    return [
        ("DBA", _or_empty(state.dba_name)),
        ("Legal Name", _or_empty(state.legal_name)),
        ("Corp Structure", _or_empty(state.corp_structure)),
        ("Industry", _or_empty(state.industry)),
        ("Website", _or_empty(state.website_url)),
        ("Gateway", _or_empty(state.gateway)),
        ("Contact", _or_empty(contact)),
        ("Email", _or_empty(state.email)),
        ("Phone", _or_empty(state.phone)),
        ("V/MC/Disc", _money(state.vmd_monthly)),
        ("Amex", _money(state.amex_monthly)),
        ("Acceptance", acceptance_summary(state)),
        ("Notes", _or_empty(state.notes)),
    ]
