"""
Whole flow: a FormSession filled step by step, submitted through the real
intake app (in-process) which relays to a local webhook. Only the database
insert is stubbed.
"""

import asyncio
from typing import Any, Dict, List

import httpx
import pytest

from merchant_intake.api import supabase_client
from merchant_intake.api.main import create_app
from merchant_intake.session import FormSession
from merchant_intake.submission import ACCEPTANCE_INVALID, MISSING_FIELDS, SUBMITTED, IntakeError

from test_crm_webhook import closed_port_url, start_webhook


class InProcessIntake:
    def __init__(self, app) -> None:
        self.app = app
        self.calls = 0

    async def submit_lead(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls += 1
        transport = httpx.ASGITransport(app=self.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://intake") as client:
            res = await client.post("/api/lead", json=payload)
        if res.status_code != 200:
            raise IntakeError(f"intake endpoint returned HTTP {res.status_code}", status=res.status_code)
        return res.json()


@pytest.fixture
def stored(monkeypatch) -> List[Any]:
    rows: List[Any] = []

    async def fake_insert(record):
        rows.append(record)

    monkeypatch.setattr(supabase_client, "insert_merchant_application", fake_insert)
    return rows


def fill_and_walk(session: FormSession, answers: Dict[str, Any]) -> None:
    """Fill each step's answers, then press Continue, until the review step."""
    by_step = {
        "company": ("dbaName", "legalName", "corpStructure"),
        "merch": ("industry",),
        "online": ("websiteUrl", "gateway"),
        "address": (
            "legalAddr1", "legalCity", "legalState", "legalZip",
            "locAddr1", "locCity", "locState", "locZip",
        ),
        "contact": ("firstName", "lastName", "phone", "email"),
        "volume": ("vmdMonthly", "amexMonthly"),
        "accept": ("internetPct", "retailPct", "keyedPct"),
        "notes": (),
    }
    while not session.navigator.is_terminal:
        key = session.current_step.key
        for field in by_step[key]:
            if field in answers:
                assert session.edit(field, answers[field])
        assert session.advance(), f"blocked on {key}: {session.visible_errors}"


def test_complete_application_is_submitted(monkeypatch, stored, complete_answers):
    async def scenario():
        runner, url, received = await start_webhook()
        monkeypatch.setenv("SALESFORCE_WEBHOOK_URL", url)
        intake = InProcessIntake(create_app())
        session = FormSession(client=intake)
        try:
            fill_and_walk(session, complete_answers)
            result = await session.submit()
        finally:
            await runner.cleanup()
        return result, received

    result, received = asyncio.run(scenario())

    assert result.outcome == SUBMITTED
    assert result.crm_forwarded is True
    assert len(stored) == 1
    assert stored[0].internet_pct == 40
    assert stored[0].vmd_monthly == 12500.0
    assert received[0]["legalName"] == "Green Leaf Goods LLC"


def test_unreachable_crm_still_succeeds_with_flag_off(monkeypatch, stored, complete_answers):
    monkeypatch.delenv("CRM_WEBHOOK_URL", raising=False)
    monkeypatch.setenv("SALESFORCE_WEBHOOK_URL", closed_port_url())
    monkeypatch.setenv("CRM_WEBHOOK_TIMEOUT_SECONDS", "5")

    async def scenario():
        session = FormSession(client=InProcessIntake(create_app()))
        fill_and_walk(session, complete_answers)
        return await session.submit()

    result = asyncio.run(scenario())

    assert result.outcome == SUBMITTED
    assert result.crm_forwarded is False
    assert len(stored) == 1


def test_missing_legal_name_jumps_back_without_calling_endpoint(stored, complete_answers):
    intake = InProcessIntake(create_app())
    session = FormSession(client=intake)
    session.state.update({k: v for k, v in complete_answers.items() if k != "legalName"})
    session.jump_to(8)

    result = asyncio.run(session.submit())

    assert result.outcome == MISSING_FIELDS
    assert session.current_step.key == "company"
    assert intake.calls == 0
    assert stored == []


def test_over_allocated_acceptance_jumps_to_acceptance_step(stored, complete_answers):
    intake = InProcessIntake(create_app())
    session = FormSession(client=intake)
    session.state.update({**complete_answers, "internetPct": "50", "retailPct": "50", "keyedPct": "50"})
    session.jump_to(8)

    result = asyncio.run(session.submit())

    assert result.outcome == ACCEPTANCE_INVALID
    assert session.current_step.key == "accept"
    assert intake.calls == 0


def test_database_outage_surfaces_failure_notice(monkeypatch, complete_answers):
    async def broken(record):
        raise supabase_client.PersistenceError("connection refused")

    monkeypatch.setattr(supabase_client, "insert_merchant_application", broken)
    session = FormSession(client=InProcessIntake(create_app()))
    session.state.update(complete_answers)
    session.jump_to(8)

    result = asyncio.run(session.submit())

    assert not result.ok
    assert result.notice.startswith("There was an error")
    assert session.state.legal_name == "Green Leaf Goods LLC"
    assert not session.submitting
