"""Sequential execution of client actions with cancellation."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from gridrows.client.errors import TransportError
    from gridrows.domain.model import ResultEnvelope

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """How one action resumed the sequence."""

    cancelled: bool
    envelope: ResultEnvelope | None = None
    error: TransportError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


type ActionStep = Callable[[], Awaitable[ActionOutcome | None]]


class ActionSequence:
    """Runs steps in order, skipping the rest once a step asks for cancellation."""

    def __init__(self, steps: Iterable[ActionStep] = ()) -> None:
        self._steps: list[ActionStep] = list(steps)

    def add(self, step: ActionStep) -> None:
        self._steps.append(step)

    async def run(self) -> list[ActionOutcome]:
        outcomes: list[ActionOutcome] = []
        for position, step in enumerate(self._steps, start=1):
            outcome = await step() or ActionOutcome(cancelled=False)
            outcomes.append(outcome)
            if outcome.cancelled:
                skipped = len(self._steps) - position
                log.info("Action %s cancelled the sequence, skipping %s step(s)", position, skipped)
                break
        return outcomes
