"""Core value types shared by the server and the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from gridrows.domain.errors import FragmentError

if TYPE_CHECKING:
    from collections.abc import Mapping

type IdentifierTuple = tuple[str | None, ...]


class ProcessMode(StrEnum):
    SELECTION = "selection"
    FILTERED = "filtered"


class Status(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    NOOP = "noop"


class MessageType(StrEnum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"
    DANGER = "danger"

    @classmethod
    def resolve(cls, value: str | None, *, default: MessageType | None = None) -> MessageType:
        """Map a free-form category onto a notification type.

        Unknown or missing values fall back to ``default`` (success), and ``danger``
        is shown as ``error``.
        """

        fallback = default or cls.SUCCESS
        if not value:
            return fallback
        try:
            resolved = cls(value.strip().lower())
        except ValueError:
            return fallback
        return cls.ERROR if resolved is cls.DANGER else resolved


class CancelDirective(StrEnum):
    """Whether the caller's remaining actions should run after processing."""

    CONTINUE = "continue"
    CANCEL = "cancel"
    STOP = "stop"

    @property
    def cancels(self) -> bool:
        return self is not CancelDirective.CONTINUE

    @classmethod
    def parse(cls, value: str | bool | CancelDirective | None) -> CancelDirective:
        if isinstance(value, CancelDirective):
            return value
        if isinstance(value, bool):
            return cls.CANCEL if value else cls.CONTINUE
        if value is None:
            return cls.CONTINUE
        token = value.strip().upper()
        if token in _CANCEL_TOKENS:
            return _CANCEL_TOKENS[token]
        return cls.CONTINUE


_CANCEL_TOKENS: dict[str, CancelDirective] = {
    "CANCEL": CancelDirective.CANCEL,
    "STOP": CancelDirective.STOP,
    "TRUE": CancelDirective.CANCEL,
}


@dataclass(slots=True)
class RowSignals:
    """Out-of-band values a mutation fragment may set while a request runs."""

    message: str | None = None
    message_title: str | None = None
    message_type: str | None = None
    cancel_actions: CancelDirective = CancelDirective.CONTINUE
    event_name: str | None = None

    def cancel(self, directive: str | bool | CancelDirective = CancelDirective.CANCEL) -> None:
        self.cancel_actions = CancelDirective.parse(directive)


@dataclass(frozen=True, slots=True)
class ErrorIdentity:
    """Code and text of the failure that aborted a request."""

    code: str
    text: str

    @property
    def full_text(self) -> str:
        return f"{self.code}: {self.text}"

    @property
    def text_without_code(self) -> str:
        # everything after the first colon of the full text
        _, _, rest = self.full_text.partition(":")
        return rest.strip()

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorIdentity:
        if isinstance(exc, FragmentError):
            return cls(code=exc.code, text=exc.message)
        # driver errors wrapped by the database layer expose the original as ``orig``
        orig = getattr(exc, "orig", None)
        if isinstance(orig, BaseException):
            return cls(code=type(orig).__name__, text=str(orig))
        return cls(code=type(exc).__name__, text=str(exc))


@dataclass(frozen=True, slots=True)
class ReturnedItem:
    name: str
    value: str | None


@dataclass(frozen=True, slots=True)
class ResultEnvelope:
    """The single structured outcome returned for one processing request."""

    status: Status
    message: str | None = None
    message_title: str | None = None
    message_type: MessageType | None = None
    items_to_return: tuple[ReturnedItem, ...] = field(default_factory=tuple)
    cancel_actions: bool = False
    event_name: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is Status.SUCCESS

    def returned_values(self) -> Mapping[str, str | None]:
        return {item.name: item.value for item in self.items_to_return}
