"""Client entry point: gather the selection, call the server, hand off the result."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from gridrows.client.actions import ActionOutcome
from gridrows.client.errors import TransportError
from gridrows.client.handler import ResponseHandler
from gridrows.client.notifications import Notification, NotificationOptions
from gridrows.config.processing import get_processing_config
from gridrows.domain.composer import compose_empty_selection
from gridrows.domain.model import MessageType, ProcessMode
from gridrows.domain.selection import encode_selection_chunks

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from gridrows.client.ports import EventBus, GridRegion, ItemStore, Notifier, ServerTransport
    from gridrows.domain.actions import ClientActionConfig

log = getLogger(__name__)

type InitHook = Callable[[ClientActionConfig, NotificationOptions], None]


@dataclass(slots=True)
class ClientEnvironment:
    grid: GridRegion
    items: ItemStore
    notifier: Notifier
    transport: ServerTransport
    events: EventBus | None = None


async def process_rows(
    env: ClientEnvironment,
    config: ClientActionConfig,
    *,
    init: InitHook | None = None,
    chunk_size: int | None = None,
) -> ActionOutcome:
    """Process the grid's selected (or filtered) rows on the server.

    ``init`` may adjust a private copy of ``config`` and the notification options
    right before the request is assembled. A selection-mode call without selected
    records never contacts the server. Transport failures are reported as an error
    notification and a cancelled outcome. ``chunk_size`` defaults to
    ``GRIDROWS_CHUNK_SIZE``.
    """

    config = replace(config, items_to_submit=list(config.items_to_submit))
    options = NotificationOptions(dismiss_after=config.dismiss_after)
    if init is not None:
        init(config, options)
    log.debug("Processing rows with %s", config)

    handler = ResponseHandler(
        grid=env.grid,
        items=env.items,
        notifier=env.notifier,
        config=config,
        events=env.events,
        notification_options=options,
    )

    chunks: list[str] = []
    original_selection: Sequence[object] | None = None
    if config.mode is ProcessMode.SELECTION:
        records = list(env.grid.selected_records())
        if config.refresh_selection:
            original_selection = records

        if not records:
            log.info("No selected records. Continuing without server call.")
            envelope = compose_empty_selection(
                config.zero_selection_message,
                warn=config.zero_selection_message is not None,
            )
            handler.handle(envelope)
            return ActionOutcome(cancelled=False, envelope=envelope)

        keys = [env.grid.primary_key(record) for record in records]
        size = chunk_size or get_processing_config().chunk_size
        chunks = encode_selection_chunks(keys, chunk_size=size)

    items = {name: env.items.get(name) for name in config.items_to_submit}
    try:
        envelope = await env.transport.process(config.ajax_id, chunks=chunks, items=items)
    except TransportError as exc:
        log.warning("Processing request for %s failed: %s", config.ajax_id, exc)
        env.notifier.notify(
            Notification(type=MessageType.ERROR, message=str(exc), options=options)
        )
        return ActionOutcome(cancelled=True, error=exc)

    cancelled = handler.handle(envelope, original_selection=original_selection)
    return ActionOutcome(cancelled=cancelled, envelope=envelope)
