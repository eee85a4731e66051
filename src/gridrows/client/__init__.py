"""Client side of row processing: request dispatch and response handling."""

from __future__ import annotations

from .actions import ActionOutcome, ActionSequence
from .dispatcher import ClientEnvironment, process_rows
from .errors import TransportError
from .handler import ResponseHandler
from .notifications import Notification, NotificationOptions
from .ports import (
    SELECTION_CHANGE_EVENT,
    EventBus,
    GridRegion,
    ItemStore,
    Notifier,
    ServerTransport,
)

__all__ = [
    "SELECTION_CHANGE_EVENT",
    "ActionOutcome",
    "ActionSequence",
    "ClientEnvironment",
    "EventBus",
    "GridRegion",
    "ItemStore",
    "Notification",
    "NotificationOptions",
    "Notifier",
    "ResponseHandler",
    "ServerTransport",
    "TransportError",
    "process_rows",
]
