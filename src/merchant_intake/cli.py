"""
Terminal front end for the merchant application form.

Walks a FormSession step by step and submits to the intake endpoint:

    merchant-intake-form --url http://localhost:8000/api/lead

At any prompt, Enter keeps the current value and "-" clears it.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence

from merchant_intake.choices import SELECT_OPTIONS
from merchant_intake.form_state import PERCENT_FIELDS
from merchant_intake.session import FormSession
from merchant_intake.submission import IntakeClient, SubmissionResult
from merchant_intake.validation import ACCEPTANCE, CRITICAL_FIELDS, acceptance_total

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

FIELD_LABELS: Dict[str, str] = {
    "dba_name": "(DBA) Merchant Name",
    "legal_name": "Legal Business Name",
    "corp_structure": "Corp Structure",
    "industry": "Merchandise / Services Sold",
    "website_url": "Website URL",
    "website_login": "Website Login",
    "website_password": "Website Password",
    "ecommerce_platform": "E-Commerce Platform",
    "gateway": "Gateway",
    "legal_addr1": "Legal Address",
    "legal_addr2": "Legal Address 2",
    "legal_city": "Legal City",
    "legal_state": "Legal State",
    "legal_zip": "Legal Zip",
    "loc_addr1": "Business Location Address",
    "loc_addr2": "Business Location Address 2",
    "loc_city": "Business Location City",
    "loc_state": "Business Location State",
    "loc_zip": "Business Location Zip",
    "separate_mailing": "Separate mailing address?",
    "mail_addr1": "Mailing Address",
    "mail_addr2": "Mailing Address 2",
    "mail_city": "Mailing City",
    "mail_state": "Mailing State",
    "mail_zip": "Mailing Zip",
    "first_name": "First Name",
    "last_name": "Last Name",
    "title": "Title",
    "phone": "Phone",
    "email": "Email",
    "vmd_monthly": "Visa/MC/Discover Monthly Volume ($)",
    "amex_monthly": "American Express Monthly Volume ($)",
    "internet_pct": "Internet %",
    "retail_pct": "Retail / Swiped %",
    "keyed_pct": "Keyed MO/TO %",
    "notes": "Notes",
    ACCEPTANCE: "Method of acceptance",
}

# What each step asks for, in display order (optional fields included).
STEP_INPUTS: Dict[str, List[str]] = {
    "company": ["dba_name", "legal_name", "corp_structure"],
    "merch": ["industry"],
    "online": ["website_url", "website_login", "website_password", "ecommerce_platform", "gateway"],
    "address": [
        "legal_addr1", "legal_addr2", "legal_city", "legal_state", "legal_zip",
        "loc_addr1", "loc_addr2", "loc_city", "loc_state", "loc_zip",
        "separate_mailing",
        "mail_addr1", "mail_addr2", "mail_city", "mail_state", "mail_zip",
    ],
    "contact": ["first_name", "last_name", "title", "phone", "email"],
    "volume": ["vmd_monthly", "amex_monthly"],
    "accept": list(PERCENT_FIELDS),
    "notes": ["notes"],
    "review": [],
}

_MAILING = {"mail_addr1", "mail_addr2", "mail_city", "mail_state", "mail_zip"}
_REQUIRED_MARK = set(CRITICAL_FIELDS) | (_MAILING - {"mail_addr2"}) | set(PERCENT_FIELDS)


def _prompt_text(session: FormSession, field: str, ask: InputFn, out: OutputFn) -> None:
    current = getattr(session.state, field)
    options = SELECT_OPTIONS.get(field)
    if options:
        out("    " + "  ".join(f"{i}) {o}" for i, o in enumerate(options, start=1)))
    marker = " *" if field in _REQUIRED_MARK else ""
    default = f" [{current}]" if current else ""
    answer = ask(f"  {FIELD_LABELS[field]}{marker}{default}: ").strip()
    if not answer:
        return
    if answer == "-":
        answer = ""
    elif options and answer.isdigit() and 1 <= int(answer) <= len(options):
        answer = options[int(answer) - 1]
    if not session.edit(field, answer):
        out(f"    {answer!r} is not accepted here; kept {current!r}")


def _prompt_flag(session: FormSession, field: str, ask: InputFn) -> None:
    current = bool(getattr(session.state, field))
    answer = ask(f"  {FIELD_LABELS[field]} (y/n) [{'y' if current else 'n'}]: ").strip().lower()
    if answer in {"y", "yes"}:
        session.edit(field, True)
    elif answer in {"n", "no"}:
        session.edit(field, False)


def fill_step(session: FormSession, ask: InputFn, out: OutputFn) -> None:
    for field in STEP_INPUTS[session.current_step.key]:
        if field == "separate_mailing":
            _prompt_flag(session, field, ask)
            continue
        if field in _MAILING and not session.state.separate_mailing:
            continue
        _prompt_text(session, field, ask, out)
    if session.current_step.key == "accept":
        out(f"  Total: {acceptance_total(session.state)}%")


def print_errors(session: FormSession, out: OutputFn) -> None:
    for field, msg in session.visible_errors.items():
        if field in session.current_fields:
            out(f"  ! {FIELD_LABELS.get(field, field)}: {msg}")


def run(session: FormSession, ask: InputFn = input, out: OutputFn = print) -> Optional[SubmissionResult]:
    """Drive the form until it is submitted (returns the result) or the user quits (None)."""
    while True:
        step = session.current_step
        out(f"\n{session.navigator.progress_label()}  {step.label}")

        if step.key == "review":
            for label, value in session.review():
                out(f"  {label}: {value}")
            choice = ask("[s]ubmit, [e]dit, [b]ack, [q]uit: ").strip().lower()
            if choice == "s":
                result = asyncio.run(session.submit())
                if result.notice:
                    out(result.notice)
                if result.ok:
                    if result.crm_forwarded is False:
                        out("(Your application was saved; our team will pick it up manually.)")
                    return result
                if result.step_index is not None:
                    out(f"Please fix {session.current_step.label} before submitting.")
                    print_errors(session, out)
            elif choice == "e":
                session.edit_from_review()
            elif choice == "b":
                session.retreat()
            elif choice == "q":
                return None
            continue

        fill_step(session, ask, out)
        choice = ask("[c]ontinue, [b]ack, [q]uit: ").strip().lower()
        if choice in {"", "c"}:
            if not session.advance():
                print_errors(session, out)
        elif choice == "b":
            session.retreat()
        elif choice == "q":
            return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Fill in and submit a merchant application from the terminal.")
    ap.add_argument("--url", default=None, help="Intake endpoint (default: $MERCHANT_INTAKE_URL or localhost).")
    ap.add_argument("--timeout", type=float, default=None, help="Submit timeout in seconds (default 30).")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    session = FormSession(client=IntakeClient(args.url, timeout_seconds=args.timeout))
    try:
        result = run(session)
    except (KeyboardInterrupt, EOFError):
        print()
        return 130
    return 0 if result is not None and result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
