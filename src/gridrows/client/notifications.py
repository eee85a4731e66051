"""Notification payloads handed to the toast renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from gridrows.domain.model import MessageType


@dataclass(slots=True)
class NotificationOptions:
    """Renderer options; adjustable by an init hook before the action runs."""

    dismiss: tuple[str, ...] = ("onClick", "onButton")
    dismiss_after: int = 0
    newest_on_top: bool = True
    prevent_duplicates: bool = False
    escape_html: bool = False
    position: str = "top-right"
    clear_all: bool = False


@dataclass(frozen=True, slots=True)
class Notification:
    type: MessageType
    message: str
    title: str | None = None
    options: NotificationOptions = field(default_factory=NotificationOptions)
