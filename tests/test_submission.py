import asyncio
from typing import Any, Dict, List

import pytest

from merchant_intake.session import FormSession
from merchant_intake.submission import (
    ACCEPTANCE_INVALID,
    FAILED,
    FAILURE_NOTICE,
    IN_FLIGHT,
    MISSING_FIELDS,
    SUBMITTED,
    SUCCESS_NOTICE,
    IntakeClient,
    IntakeError,
)

from test_crm_webhook import start_webhook


class RecordingSink:
    def __init__(self, response: Dict[str, Any] = None, error: Exception = None) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.response = response if response is not None else {"success": True, "crmForwarded": True}
        self.error = error

    async def submit_lead(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(payload)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.response


def _session_on_review(answers, sink):
    session = FormSession(client=sink)
    session.state.update(answers)
    session.jump_to(8)
    return session


def test_successful_submit_sends_full_payload(complete_answers):
    sink = RecordingSink()
    session = _session_on_review(complete_answers, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == SUBMITTED
    assert result.ok
    assert result.notice == SUCCESS_NOTICE
    assert result.crm_forwarded is True
    assert len(sink.calls) == 1
    assert sink.calls[0]["legalName"] == "Green Leaf Goods LLC"
    assert sink.calls[0]["internetPct"] == "40"
    assert not session.submitting


def test_bad_acceptance_routes_to_acceptance_step(complete_answers):
    sink = RecordingSink()
    session = _session_on_review({**complete_answers, "internetPct": "50", "retailPct": "50", "keyedPct": "50"}, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == ACCEPTANCE_INVALID
    assert session.current_step.key == "accept"
    assert "acceptance" in session.visible_errors
    assert sink.calls == []


def test_acceptance_checked_before_critical_fields(complete_answers):
    sink = RecordingSink()
    session = _session_on_review({**complete_answers, "legalName": "", "keyedPct": ""}, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == ACCEPTANCE_INVALID
    assert session.current_step.key == "accept"
    assert "legal_name" not in session.touched


def test_missing_legal_name_routes_to_company_step(complete_answers):
    sink = RecordingSink()
    session = _session_on_review({**complete_answers, "legalName": ""}, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == MISSING_FIELDS
    assert result.step_index == 0
    assert session.current_step.key == "company"
    assert session.visible_errors == {"legal_name": "Required"}
    assert sink.calls == []


def test_first_bad_step_wins(complete_answers):
    sink = RecordingSink()
    session = _session_on_review({**complete_answers, "email": "nope", "locZip": ""}, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == MISSING_FIELDS
    assert session.current_step.key == "address"


def test_failure_keeps_data_and_allows_retry(complete_answers):
    sink = RecordingSink(error=IntakeError("intake endpoint returned HTTP 500", status=500))
    session = _session_on_review(complete_answers, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == FAILED
    assert result.notice == FAILURE_NOTICE
    assert not session.submitting
    assert session.state.dba_name == "Green Leaf Goods"
    assert session.navigator.is_terminal

    sink.error = None
    retry = asyncio.run(session.submit())
    assert retry.outcome == SUBMITTED
    assert len(sink.calls) == 2


def test_second_submit_while_in_flight_is_ignored(complete_answers):
    sink = RecordingSink()
    session = _session_on_review(complete_answers, sink)

    async def double_click():
        return await asyncio.gather(session.submit(), session.submit())

    first, second = asyncio.run(double_click())

    assert first.outcome == SUBMITTED
    assert second.outcome == IN_FLIGHT
    assert len(sink.calls) == 1
    assert not session.submitting


def test_submit_only_from_review_step(complete_answers):
    session = FormSession(client=RecordingSink())
    session.state.update(complete_answers)
    with pytest.raises(RuntimeError):
        asyncio.run(session.submit())


def test_intake_client_reports_unreachable_endpoint():
    import socket

    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    client = IntakeClient(f"http://127.0.0.1:{port}/api/lead", timeout_seconds=5)

    with pytest.raises(IntakeError):
        asyncio.run(client.submit_lead({"dbaName": "x"}))


def test_intake_client_timeout_from_env(monkeypatch):
    monkeypatch.setenv("MERCHANT_INTAKE_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("MERCHANT_INTAKE_URL", "http://intake.local/api/lead")
    client = IntakeClient()
    assert client.timeout_seconds == 12.5
    assert client.url == "http://intake.local/api/lead"


def test_intake_client_raises_on_error_status():
    async def scenario():
        runner, url, received = await start_webhook(status=500)
        try:
            with pytest.raises(IntakeError) as info:
                await IntakeClient(url, timeout_seconds=5).submit_lead({"dbaName": "Acme"})
        finally:
            await runner.cleanup()
        return info.value, received

    err, received = asyncio.run(scenario())
    assert err.status == 500
    assert received == [{"dbaName": "Acme"}]


def test_error_status_from_real_client_is_failed_result(complete_answers):
    async def scenario():
        runner, url, received = await start_webhook(status=500)
        session = _session_on_review(complete_answers, IntakeClient(url, timeout_seconds=5))
        try:
            result = await session.submit()
        finally:
            await runner.cleanup()
        return session, result, received

    session, result, received = asyncio.run(scenario())
    assert result.outcome == FAILED
    assert result.notice == FAILURE_NOTICE
    assert len(received) == 1
    assert received[0]["legalName"] == "Green Leaf Goods LLC"
    assert not session.submitting


def test_unexpected_sink_error_is_failed_result(complete_answers):
    sink = RecordingSink(error=RuntimeError("socket closed"))
    session = _session_on_review(complete_answers, sink)

    result = asyncio.run(session.submit())

    assert result.outcome == FAILED
    assert result.notice == FAILURE_NOTICE
    assert not session.submitting
    assert len(sink.calls) == 1


def test_edit_stores_numbers_as_text():
    session = FormSession(client=RecordingSink())
    assert session.edit("internetPct", 40)
    assert session.state.internet_pct == "40"
    assert not session.edit("retailPct", 1000)
    assert session.state.retail_pct == ""
    assert session.edit("amexMonthly", 1500.5)
    assert session.state.amex_monthly == "1500.5"
    assert session.edit("notes", None)
    assert session.state.notes == ""
