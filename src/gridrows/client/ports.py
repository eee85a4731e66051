"""Protocols for the host components the client cooperates with."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from gridrows.client.notifications import Notification
    from gridrows.domain.model import ResultEnvelope

SELECTION_CHANGE_EVENT: Final[str] = "interactivegridselectionchange"


class GridRegion(Protocol):
    """The data grid whose rows are processed."""

    def selected_records(self) -> Sequence[object]: ...

    def primary_key(self, record: object) -> Sequence[object]: ...

    def fetch_records(self, records: Sequence[object]) -> None: ...

    def refresh(self) -> None: ...

    def once(self, event: str, callback: Callable[[], None]) -> None:
        """Run ``callback`` the next time ``event`` fires, then forget it."""
        ...

    def set_selected_records(self, records: Sequence[object]) -> None: ...


class ItemStore(Protocol):
    def get(self, name: str, /) -> str | None: ...

    def set(self, name: str, value: str | None) -> None: ...


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class EventBus(Protocol):
    def trigger(self, event_name: str, data: ResultEnvelope) -> None: ...


class ServerTransport(Protocol):
    async def process(
        self,
        action_id: str,
        *,
        chunks: Sequence[str] = (),
        items: Mapping[str, str | None] | None = None,
    ) -> ResultEnvelope: ...
