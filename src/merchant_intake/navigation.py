from __future__ import annotations

import logging
from typing import Sequence

from merchant_intake.form_state import FormState, TouchedFields
from merchant_intake.steps import STEPS, Step
from merchant_intake.validation import fields_for_step, step_has_errors, validate

logger = logging.getLogger(__name__)


class StepNavigator:
    """
    Position within the fixed step sequence.

    Moving forward is gated on the current step being error free; moving back
    and jumping are not gated.
    """

    def __init__(
        self,
        state: FormState,
        touched: TouchedFields,
        steps: Sequence[Step] = STEPS,
    ) -> None:
        if not steps:
            raise ValueError("a form needs at least one step")
        self._state = state
        self._touched = touched
        self._steps = tuple(steps)
        self._position = 0

    @property
    def steps(self) -> Sequence[Step]:
        return self._steps

    @property
    def position(self) -> int:
        return self._position

    @property
    def current_step(self) -> Step:
        return self._steps[self._position]

    @property
    def is_terminal(self) -> bool:
        return self._position == len(self._steps) - 1

    def advance(self) -> bool:
        """
        Try to move to the next step.

        The current step's fields are marked touched first so that, if the
        move is refused, their errors become visible.
        """
        step = self.current_step
        self._touched.mark(fields_for_step(step.key, self._state))
        if step_has_errors(step.key, self._state, validate(self._state)):
            logger.debug("advance refused on step %s", step.key)
            return False
        self._position = min(self._position + 1, len(self._steps) - 1)
        return True

    def retreat(self) -> None:
        self._position = max(self._position - 1, 0)

    def jump_to(self, index: int) -> None:
        if not 0 <= index < len(self._steps):
            raise IndexError(f"step index out of range: {index}")
        self._position = index

    def progress_label(self) -> str:
        return f"Step {self._position + 1} of {len(self._steps)}"
