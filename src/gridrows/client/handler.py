"""Applying a result envelope to the client's grid, items and notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gridrows.client.notifications import Notification, NotificationOptions
from gridrows.client.ports import SELECTION_CHANGE_EVENT
from gridrows.domain.messages import escape_html, substitute_items
from gridrows.domain.model import MessageType, Status

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gridrows.client.ports import EventBus, GridRegion, ItemStore, Notifier
    from gridrows.domain.actions import ClientActionConfig
    from gridrows.domain.model import ResultEnvelope

log = getLogger(__name__)


@dataclass(slots=True)
class ResponseHandler:
    grid: GridRegion
    items: ItemStore
    notifier: Notifier
    config: ClientActionConfig
    events: EventBus | None = None
    notification_options: NotificationOptions = field(default_factory=NotificationOptions)

    def handle(
        self,
        envelope: ResultEnvelope,
        *,
        original_selection: Sequence[object] | None = None,
    ) -> bool:
        """Reconcile client state with ``envelope`` and return the cancellation flag."""

        message = self._prepare(envelope.message)
        title = self._prepare(envelope.message_title)

        if envelope.status is Status.SUCCESS:
            cancel = envelope.cancel_actions
            self._apply_items(envelope)
            self._refresh(original_selection)
            if message:
                self._notify(envelope.message_type or MessageType.SUCCESS, message, title)
        elif envelope.status is Status.NOOP:
            cancel = envelope.cancel_actions
            if message:
                self._notify(envelope.message_type or MessageType.WARNING, message, title)
        else:
            cancel = True
            if message:
                self._notify(MessageType.ERROR, message, title)

        if envelope.event_name and self.events is not None:
            log.debug("Triggering event %s", envelope.event_name)
            self.events.trigger(envelope.event_name, envelope)

        return cancel

    def _prepare(self, text: str | None) -> str | None:
        if not text:
            return text
        if self.config.perform_substitutions:
            text = substitute_items(text, self.items)
        if self.config.escape_message:
            text = escape_html(text)
        return text

    def _apply_items(self, envelope: ResultEnvelope) -> None:
        for item in envelope.items_to_return:
            self.items.set(item.name, item.value)

    def _refresh(self, original_selection: Sequence[object] | None) -> None:
        if self.config.refresh_selection and original_selection:
            self.grid.fetch_records(original_selection)

        if self.config.refresh_grid:
            # clearing now would race the reload; wait for the grid to report it
            if self.config.remove_selection:
                self.grid.once(SELECTION_CHANGE_EVENT, self._clear_selection)
            self.grid.refresh()
        elif self.config.remove_selection:
            self._clear_selection()

    def _clear_selection(self) -> None:
        self.grid.set_selected_records(())

    def _notify(self, message_type: MessageType, message: str, title: str | None) -> None:
        self.notifier.notify(
            Notification(
                type=message_type,
                message=message,
                title=title,
                options=self.notification_options,
            )
        )
