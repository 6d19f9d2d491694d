from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import aiohttp

from merchant_intake.form_state import FormState, TouchedFields
from merchant_intake.navigation import StepNavigator
from merchant_intake.steps import step_index
from merchant_intake.utils import env_float, env_str
from merchant_intake.validation import ACCEPTANCE, CRITICAL_FIELDS, first_step_with_errors, validate

logger = logging.getLogger(__name__)

DEFAULT_INTAKE_URL = "http://localhost:8000/api/lead"
# Bounded so a hung endpoint cannot leave the form stuck in "submitting".
DEFAULT_TIMEOUT_SECONDS = 30.0

SUCCESS_NOTICE = "Application submitted successfully. A representative will follow up shortly."
FAILURE_NOTICE = "There was an error submitting the application. Please try again."

SUBMITTED = "submitted"
ACCEPTANCE_INVALID = "acceptance_invalid"
MISSING_FIELDS = "missing_fields"
FAILED = "failed"
IN_FLIGHT = "in_flight"


class IntakeError(Exception):
    """The intake endpoint could not be reached or did not acknowledge the lead."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class LeadSink(Protocol):
    async def submit_lead(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...


class IntakeClient:
    """POSTs a completed form to the intake endpoint."""

    def __init__(self, url: Optional[str] = None, *, timeout_seconds: Optional[float] = None) -> None:
        self.url = url or env_str("MERCHANT_INTAKE_URL", DEFAULT_INTAKE_URL)
        if timeout_seconds is None:
            timeout_seconds = env_float("MERCHANT_INTAKE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
        self.timeout_seconds = timeout_seconds

    async def submit_lead(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as sess:
                async with sess.post(self.url, json=payload) as resp:
                    if not 200 <= resp.status < 300:
                        raise IntakeError(f"intake endpoint returned HTTP {resp.status}", status=resp.status)
                    try:
                        body = await resp.json(content_type=None)
                    except ValueError:
                        body = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise IntakeError(f"intake endpoint unreachable: {exc!r}") from exc
        return body if isinstance(body, dict) else {}


@dataclass
class SubmissionResult:
    outcome: str
    notice: Optional[str] = None
    step_index: Optional[int] = None
    response: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome == SUBMITTED

    @property
    def crm_forwarded(self) -> Optional[bool]:
        v = self.response.get("crmForwarded")
        return v if isinstance(v, bool) else None


class SubmissionHandler:
    """
    Final gate and hand-off of a completed form.

    One attempt per call, no retries. Entered data is never cleared, so a
    failed attempt can simply be repeated.
    """

    def __init__(
        self,
        state: FormState,
        touched: TouchedFields,
        navigator: StepNavigator,
        client: LeadSink,
    ) -> None:
        self._state = state
        self._touched = touched
        self._navigator = navigator
        self._client = client
        self.submitting = False

    async def submit(self) -> SubmissionResult:
        if not self._navigator.is_terminal:
            raise RuntimeError("submit is only available from the review step")
        if self.submitting:
            return SubmissionResult(IN_FLIGHT)

        errors = validate(self._state)

        self._touched.mark([ACCEPTANCE])
        if errors.get(ACCEPTANCE):
            accept_index = step_index("accept")
            self._navigator.jump_to(accept_index)
            return SubmissionResult(ACCEPTANCE_INVALID, step_index=accept_index)

        self._touched.mark(CRITICAL_FIELDS)
        if any(errors.get(f) for f in CRITICAL_FIELDS):
            first_bad = first_step_with_errors(self._state, errors)
            target = 0 if first_bad is None else first_bad
            self._navigator.jump_to(target)
            return SubmissionResult(MISSING_FIELDS, step_index=target)

        payload = self._state.to_payload()
        self.submitting = True
        try:
            ack = await self._client.submit_lead(payload)
        except IntakeError as exc:
            logger.warning("lead submission failed: %s", exc)
            return SubmissionResult(FAILED, notice=FAILURE_NOTICE)
        except Exception:
            logger.exception("lead submission failed unexpectedly")
            return SubmissionResult(FAILED, notice=FAILURE_NOTICE)
        finally:
            self.submitting = False

        logger.info("lead submitted crmForwarded=%s", ack.get("crmForwarded"))
        return SubmissionResult(SUBMITTED, notice=SUCCESS_NOTICE, response=ack)
