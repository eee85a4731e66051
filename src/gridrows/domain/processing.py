"""Sequential, fail-fast execution of a mutation fragment over every row of a context."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from gridrows.domain.model import ErrorIdentity, RowSignals

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, MutableMapping

    from gridrows.domain.ports import ExecutionContext

log = getLogger(__name__)


@dataclass(slots=True)
class RowContext:
    """What a mutation fragment sees for the row being processed."""

    values: Mapping[str, object]
    row_number: int
    session: object
    state: MutableMapping[str, str | None]
    signals: RowSignals

    def __getitem__(self, column: str) -> object:
        return self.values[column]

    def get(self, column: str, default: object = None) -> object:
        return self.values.get(column, default)


type MutationFragment = Callable[[RowContext], None]


class Rollback(Protocol):
    def rollback(self) -> None: ...


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    processed: int
    error: ErrorIdentity | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def process_rows(
    open_context: Callable[[], ExecutionContext],
    fragment: MutationFragment,
    *,
    transaction: Rollback,
    session: object,
    state: MutableMapping[str, str | None],
    signals: RowSignals,
) -> ProcessOutcome:
    """Run ``fragment`` once per row, stopping and rolling back at the first failure.

    Failures while fetching or mutating a row are returned as the outcome's error and
    never raised. The context is closed on every path; if opening it fails the error
    propagates unchanged.
    """

    context = open_context()
    processed = 0
    try:
        for values in context:
            fragment(
                RowContext(
                    values=values,
                    row_number=processed + 1,
                    session=session,
                    state=state,
                    signals=signals,
                )
            )
            processed += 1
    except Exception as exc:  # noqa: BLE001
        error = ErrorIdentity.from_exception(exc)
        log.warning(
            "Row %s failed after %s processed row(s), rolling back: %s",
            processed + 1,
            processed,
            error.full_text,
        )
        context.close()
        transaction.rollback()
        return ProcessOutcome(processed=processed, error=error)
    finally:
        context.close()

    log.debug("Processed %s row(s)", processed)
    return ProcessOutcome(processed=processed)
