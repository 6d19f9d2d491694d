from __future__ import annotations

from typing import Any, List, Optional, Tuple

from merchant_intake.form_state import (
    CURRENCY_FIELDS,
    PERCENT_FIELDS,
    FormState,
    TouchedFields,
    accepts_currency_input,
    accepts_percent_input,
    resolve_field,
)
from merchant_intake.navigation import StepNavigator
from merchant_intake.review import review_rows
from merchant_intake.steps import Step
from merchant_intake.submission import IntakeClient, LeadSink, SubmissionHandler, SubmissionResult
from merchant_intake.validation import ErrorSet, fields_for_step, validate, visible_errors


class FormSession:
    """
    One user's pass through the application form.

    Owns the answers, the touched set, the step position and the submit
    trigger. Nothing here is shared between sessions.
    """

    def __init__(self, client: Optional[LeadSink] = None, state: Optional[FormState] = None) -> None:
        self.state = state or FormState()
        self.touched = TouchedFields()
        self.navigator = StepNavigator(self.state, self.touched)
        self.submission = SubmissionHandler(
            self.state, self.touched, self.navigator, client or IntakeClient()
        )

    # --- editing -----------------------------------------------------------

    def edit(self, field: str, value: Any) -> bool:
        """
        Apply one user edit. Returns False when an input mask rejects it
        (the previous value is kept, like a masked input dropping a keystroke).

        Text fields take their value as typed, so numbers are stored as text
        and None clears the field.
        """
        name = resolve_field(field)
        if name != "separate_mailing":
            value = "" if value is None else str(value)
        if name in PERCENT_FIELDS and not accepts_percent_input(value):
            return False
        if name in CURRENCY_FIELDS and not accepts_currency_input(value):
            return False
        self.state.update({name: value})
        return True

    def touch(self, field: str) -> None:
        self.touched.mark([field])

    # --- derived -----------------------------------------------------------

    @property
    def errors(self) -> ErrorSet:
        return validate(self.state)

    @property
    def visible_errors(self) -> ErrorSet:
        return visible_errors(self.errors, self.touched)

    @property
    def current_step(self) -> Step:
        return self.navigator.current_step

    @property
    def current_fields(self) -> List[str]:
        return fields_for_step(self.current_step.key, self.state)

    @property
    def submitting(self) -> bool:
        return self.submission.submitting

    def review(self) -> List[Tuple[str, str]]:
        return review_rows(self.state)

    # --- navigation --------------------------------------------------------

    def advance(self) -> bool:
        return self.navigator.advance()

    def retreat(self) -> None:
        self.navigator.retreat()

    def jump_to(self, index: int) -> None:
        self.navigator.jump_to(index)

    def edit_from_review(self) -> None:
        """The review step's "Edit" link: back to the first step."""
        self.navigator.jump_to(0)

    async def submit(self) -> SubmissionResult:
        return await self.submission.submit()
