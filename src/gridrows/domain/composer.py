"""Packaging of processing outcomes into result envelopes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gridrows.domain.messages import escape_html, substitute_error_message, substitute_items
from gridrows.domain.model import MessageType, ResultEnvelope, ReturnedItem, Status

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from gridrows.domain.model import ErrorIdentity, RowSignals


@dataclass(frozen=True, slots=True)
class MessageOptions:
    """Where message post-processing happens.

    ``substitute_on_client`` defers item substitution to the client. ``escape`` asks
    for HTML escaping; it is applied here unless substitution is deferred, in which
    case the client escapes after substituting.
    """

    substitute_on_client: bool = False
    escape: bool = True

    @property
    def escape_on_server(self) -> bool:
        return self.escape and not self.substitute_on_client

    @property
    def escape_deferred(self) -> bool:
        return self.escape and self.substitute_on_client


def _substitute(
    text: str | None,
    state: Mapping[str, str | None],
    options: MessageOptions,
) -> str | None:
    if text is None:
        return None
    if not options.substitute_on_client:
        text = substitute_items(text, state)
    return text


def _as_item_value(value: object) -> str | None:
    # fragments may store any value in the state; the wire carries text
    return None if value is None else str(value)


def _escape(text: str | None, options: MessageOptions) -> str | None:
    if text is None or not options.escape_on_server:
        return text
    return escape_html(text)


def compose_success(
    signals: RowSignals,
    *,
    default_message: str | None,
    state: Mapping[str, str | None],
    items_to_return: Sequence[str],
    options: MessageOptions,
) -> ResultEnvelope:
    message = _escape(_substitute(signals.message or default_message, state, options), options)
    title = _escape(_substitute(signals.message_title, state, options), options)
    message_type = MessageType.resolve(signals.message_type) if signals.message_type else None
    return ResultEnvelope(
        status=Status.SUCCESS,
        message=message or None,
        message_title=title or None,
        message_type=message_type,
        items_to_return=tuple(
            ReturnedItem(name=name, value=_as_item_value(state.get(name)))
            for name in items_to_return
        ),
        cancel_actions=signals.cancel_actions.cancels,
        event_name=signals.event_name or None,
    )


def compose_error(
    signals: RowSignals,
    error: ErrorIdentity,
    *,
    default_message: str | None,
    state: Mapping[str, str | None],
    options: MessageOptions,
) -> ResultEnvelope:
    template = signals.message or default_message
    message = None
    if template is not None:
        # error values are escaped on their own only when nothing escapes the whole message
        message = substitute_error_message(
            template,
            error,
            items=None if options.substitute_on_client else state,
            escape=not options.escape,
        )
    message = _escape(message, options)
    title = _escape(_substitute(signals.message_title, state, options), options)
    return ResultEnvelope(
        status=Status.ERROR,
        message=message or None,
        message_title=title or None,
        message_type=MessageType.ERROR,
        cancel_actions=True,
        event_name=signals.event_name or None,
    )


def compose_empty_selection(
    message: str | None,
    *,
    warn: bool,
    state: Mapping[str, str | None] | None = None,
    options: MessageOptions | None = None,
) -> ResultEnvelope:
    """Envelope for a selection-mode request that carried no identifier tuples.

    Without ``options`` the message is taken as already rendered (the client passes
    the message it received with the action configuration).
    """

    if not (warn and message):
        return ResultEnvelope(status=Status.NOOP)
    if options is not None:
        message = _escape(_substitute(message, state or {}, options), options)
    return ResultEnvelope(status=Status.NOOP, message=message, message_type=MessageType.WARNING)
