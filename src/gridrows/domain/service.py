"""Application service handling one row-processing request end to end."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gridrows.domain.composer import (
    MessageOptions,
    compose_empty_selection,
    compose_error,
    compose_success,
)
from gridrows.domain.errors import MissingIdentifierColumnsError
from gridrows.domain.model import ProcessMode, RowSignals
from gridrows.domain.processing import process_rows
from gridrows.domain.selection import MaterializedSelection, decode_selection

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from gridrows.domain.actions import ProcessRowsAction
    from gridrows.domain.model import IdentifierTuple, ResultEnvelope
    from gridrows.domain.ports import ExecutionContext, ProcessingUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessRequest:
    """Decoded transport parameters of one request."""

    selection_chunks: tuple[str, ...] = ()
    items: Mapping[str, str | None] = field(default_factory=dict)


def _submitted_state(
    action: ProcessRowsAction,
    items: Mapping[str, str | None],
) -> dict[str, str | None]:
    submitted = {name.upper(): value for name, value in items.items()}
    ignored = sorted(set(submitted) - set(action.items_to_submit))
    if ignored:
        log.debug("Ignoring items not declared for submission: %s", ", ".join(ignored))
    return {name: submitted.get(name) for name in action.items_to_submit}


def handle_process_request(
    action: ProcessRowsAction,
    request: ProcessRequest,
    *,
    unit_of_work_factory: Callable[[], ProcessingUnitOfWork],
) -> ResultEnvelope:
    """Process the rows addressed by ``request`` and compose the result envelope.

    Configuration errors (for example a dataset without identifier columns in
    selection mode) propagate; row failures are reported in the envelope.
    """

    log.debug(
        "Request parameters: dataset=%s, mode=%s, chunks=%s, items=%s",
        action.dataset.name,
        action.mode,
        len(request.selection_chunks),
        dict(request.items),
    )
    state = _submitted_state(action, request.items)
    options = MessageOptions(
        substitute_on_client=action.substitute_on_client,
        escape=action.escape_message,
    )

    tuples: list[IdentifierTuple] = []
    if action.mode is ProcessMode.SELECTION:
        tuples = decode_selection(request.selection_chunks)
        if not tuples:
            log.info("No records selected for %s; nothing to process", action.dataset.name)
            return compose_empty_selection(
                action.zero_selection_message,
                warn=action.warn_on_empty_selection,
                state=state,
                options=options,
            )

    signals = RowSignals()
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        selection: MaterializedSelection | None = None
        if action.mode is ProcessMode.SELECTION:
            columns = repositories.contexts.identifier_columns(action.dataset)
            if not columns:
                raise MissingIdentifierColumnsError(action.dataset.name)
            selection = MaterializedSelection.build(tuples, len(columns))
            repositories.selections.materialize(selection)

        def open_context() -> ExecutionContext:
            return repositories.contexts.open(action.dataset, state=state, selection=selection)

        try:
            outcome = process_rows(
                open_context,
                action.fragment,
                transaction=uow,
                session=uow.session,
                state=state,
                signals=signals,
            )
        finally:
            if selection is not None:
                repositories.selections.teardown(selection)
        uow.commit()

    if outcome.error is not None:
        return compose_error(
            signals,
            outcome.error,
            default_message=action.error_message,
            state=state,
            options=options,
        )

    log.info("Processed %s row(s) of %s", outcome.processed, action.dataset.name)
    return compose_success(
        signals,
        default_message=action.success_message,
        state=state,
        items_to_return=action.items_to_return,
        options=options,
    )
