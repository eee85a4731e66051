"""Server-side action definitions and the client configuration rendered from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final

from gridrows.config.errors import ConfigurationError
from gridrows.domain.errors import UnknownActionError
from gridrows.domain.messages import DEFAULT_ERROR_MESSAGE, escape_html
from gridrows.domain.model import ProcessMode

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from gridrows.domain.ports import Dataset
    from gridrows.domain.processing import MutationFragment

DISMISS_AFTER_CHOICES: Final[frozenset[int]] = frozenset({0, 5, 10})
DEFAULT_DISMISS_AFTER_SECONDS: Final[int] = 5


class ExtraOption(StrEnum):
    REFRESH_SELECTION = "refresh-selection"
    REFRESH_GRID = "refresh-grid"
    CLIENT_SUBSTITUTIONS = "client-substitutions"
    ESCAPE_MESSAGE = "escape-message"
    REMOVE_SELECTION = "remove-selection-after-process"


DEFAULT_OPTIONS: Final[frozenset[ExtraOption]] = frozenset({ExtraOption.ESCAPE_MESSAGE})


def parse_options(value: str | Iterable[str] | None) -> frozenset[ExtraOption]:
    """Parse a colon-separated option string (or iterable of option names)."""

    if value is None:
        return frozenset()
    tokens = value.split(":") if isinstance(value, str) else list(value)
    options: set[ExtraOption] = set()
    for token in tokens:
        name = token.strip()
        if not name:
            continue
        try:
            options.add(ExtraOption(name))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown extra option: {name}") from exc
    return frozenset(options)


def _split_items(value: str | Iterable[str]) -> tuple[str, ...]:
    names = value.split(",") if isinstance(value, str) else value
    return tuple(name.strip().upper() for name in names if name.strip())


@dataclass(frozen=True, slots=True)
class ProcessRowsAction:
    """Everything the server needs to process rows for one configured action."""

    dataset: Dataset
    fragment: MutationFragment
    mode: ProcessMode = ProcessMode.SELECTION
    items_to_submit: tuple[str, ...] = ()
    items_to_return: tuple[str, ...] = ()
    success_message: str | None = None
    error_message: str = DEFAULT_ERROR_MESSAGE
    options: frozenset[ExtraOption] = DEFAULT_OPTIONS
    dismiss_after_seconds: int = DEFAULT_DISMISS_AFTER_SECONDS
    zero_selection_message: str | None = None
    warn_on_empty_selection: bool = False

    def __post_init__(self) -> None:
        if self.dismiss_after_seconds not in DISMISS_AFTER_CHOICES:
            choices = ", ".join(str(choice) for choice in sorted(DISMISS_AFTER_CHOICES))
            raise ConfigurationError(
                f"dismiss_after_seconds must be one of {choices}, got {self.dismiss_after_seconds}"
            )
        object.__setattr__(self, "items_to_submit", _split_items(self.items_to_submit))
        object.__setattr__(self, "items_to_return", _split_items(self.items_to_return))

    def has_option(self, option: ExtraOption) -> bool:
        return option in self.options

    @property
    def substitute_on_client(self) -> bool:
        return self.has_option(ExtraOption.CLIENT_SUBSTITUTIONS)

    @property
    def escape_message(self) -> bool:
        return self.has_option(ExtraOption.ESCAPE_MESSAGE)


@dataclass(slots=True)
class ClientActionConfig:
    """Settings the client needs to run an action; mutable so init hooks can adjust it."""

    ajax_id: str
    mode: ProcessMode = ProcessMode.SELECTION
    items_to_submit: list[str] = field(default_factory=list)
    refresh_selection: bool = False
    refresh_grid: bool = False
    perform_substitutions: bool = False
    escape_message: bool = False
    remove_selection: bool = False
    dismiss_after: int = DEFAULT_DISMISS_AFTER_SECONDS * 1000
    zero_selection_message: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "ajaxId": self.ajax_id,
            "mode": self.mode.value,
            "itemsToSubmit": list(self.items_to_submit),
            "refreshSelection": self.refresh_selection,
            "refreshGrid": self.refresh_grid,
            "performSubstitutions": self.perform_substitutions,
            "escapeMessage": self.escape_message,
            "removeSelection": self.remove_selection,
            "dismissAfter": self.dismiss_after,
            "zeroSelectionMessage": self.zero_selection_message,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ClientActionConfig:
        return cls(
            ajax_id=str(payload["ajaxId"]),
            mode=ProcessMode(payload.get("mode", ProcessMode.SELECTION)),
            items_to_submit=list(payload.get("itemsToSubmit") or []),
            refresh_selection=bool(payload.get("refreshSelection")),
            refresh_grid=bool(payload.get("refreshGrid")),
            perform_substitutions=bool(payload.get("performSubstitutions")),
            escape_message=bool(payload.get("escapeMessage")),
            remove_selection=bool(payload.get("removeSelection")),
            dismiss_after=int(payload.get("dismissAfter") or 0),
            zero_selection_message=payload.get("zeroSelectionMessage"),
        )


def _zero_selection_message(action: ProcessRowsAction) -> str | None:
    message = action.zero_selection_message
    if not (action.warn_on_empty_selection and message):
        return None
    if action.escape_message and not action.substitute_on_client:
        return escape_html(message)
    return message


def render_client_config(action_id: str, action: ProcessRowsAction) -> ClientActionConfig:
    # Escaping happens wherever the final substitution happens, so the client only
    # escapes when it also substitutes.
    return ClientActionConfig(
        ajax_id=action_id,
        mode=action.mode,
        items_to_submit=list(action.items_to_submit),
        refresh_selection=action.has_option(ExtraOption.REFRESH_SELECTION),
        refresh_grid=action.has_option(ExtraOption.REFRESH_GRID),
        perform_substitutions=action.substitute_on_client,
        escape_message=action.escape_message and action.substitute_on_client,
        remove_selection=action.has_option(ExtraOption.REMOVE_SELECTION),
        dismiss_after=action.dismiss_after_seconds * 1000,
        zero_selection_message=_zero_selection_message(action),
    )


class ActionRegistry:
    """Actions addressable by id."""

    def __init__(self, actions: Mapping[str, ProcessRowsAction] | None = None) -> None:
        self._actions: dict[str, ProcessRowsAction] = dict(actions or {})

    def register(self, action_id: str, action: ProcessRowsAction) -> None:
        if action_id in self._actions:
            raise ConfigurationError(f"Action already registered: {action_id}")
        self._actions[action_id] = action

    def get(self, action_id: str) -> ProcessRowsAction:
        try:
            return self._actions[action_id]
        except KeyError:
            raise UnknownActionError(action_id) from None

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._actions

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)
