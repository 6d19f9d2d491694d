from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Step:
    key: str
    label: str


STEPS: Tuple[Step, ...] = (
    Step("company", "Company"),
    Step("merch", "Merchandise"),
    Step("online", "Online & Gateway"),
    Step("address", "Addresses"),
    Step("contact", "Primary Contact"),
    Step("volume", "Volumes"),
    Step("accept", "Acceptance"),
    Step("notes", "Notes"),
    Step("review", "Review"),
)

STEP_KEYS: Tuple[str, ...] = tuple(s.key for s in STEPS)


def step_index(step_key: str) -> int:
    try:
        return STEP_KEYS.index(step_key)
    except ValueError:
        raise KeyError(f"unknown step: {step_key!r}") from None
