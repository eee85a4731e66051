from __future__ import annotations

import pytest

from gridrows.config import ConfigurationError
from gridrows.domain import (
    ActionRegistry,
    ClientActionConfig,
    ExtraOption,
    ProcessMode,
    ProcessRowsAction,
    UnknownActionError,
    parse_options,
    render_client_config,
)
from gridrows.domain.messages import DEFAULT_ERROR_MESSAGE
from tests.helpers.emp import emp_dataset, raise_salary


def _action(**overrides: object) -> ProcessRowsAction:
    return ProcessRowsAction(dataset=emp_dataset(), fragment=raise_salary(100), **overrides)  # pyright: ignore[reportArgumentType]


def test_parse_options_accepts_colon_separated_string() -> None:
    options = parse_options("refresh-grid::remove-selection-after-process")

    assert options == {ExtraOption.REFRESH_GRID, ExtraOption.REMOVE_SELECTION}


def test_parse_options_accepts_iterables_and_none() -> None:
    assert parse_options(["escape-message"]) == {ExtraOption.ESCAPE_MESSAGE}
    assert parse_options(None) == frozenset()


def test_parse_options_rejects_unknown_names() -> None:
    with pytest.raises(ConfigurationError, match="sparkles"):
        parse_options("refresh-grid:sparkles")


def test_action_defaults() -> None:
    action = _action()

    assert action.mode is ProcessMode.SELECTION
    assert action.error_message == DEFAULT_ERROR_MESSAGE
    assert action.escape_message
    assert not action.substitute_on_client
    assert action.dismiss_after_seconds == 5


def test_action_normalises_item_names() -> None:
    action = _action(items_to_submit="p1_pct, P1_Dept", items_to_return=["p1_total"])

    assert action.items_to_submit == ("P1_PCT", "P1_DEPT")
    assert action.items_to_return == ("P1_TOTAL",)


@pytest.mark.parametrize("seconds", [-1, 3, 60])
def test_action_rejects_unsupported_dismiss_delay(seconds: int) -> None:
    with pytest.raises(ConfigurationError, match="dismiss_after_seconds"):
        _action(dismiss_after_seconds=seconds)


def test_render_client_config_maps_options() -> None:
    action = _action(
        mode=ProcessMode.FILTERED,
        items_to_submit="P1_PCT",
        options=parse_options("refresh-selection:refresh-grid:remove-selection-after-process"),
        dismiss_after_seconds=10,
    )

    config = render_client_config("raise-salaries", action)

    assert config == ClientActionConfig(
        ajax_id="raise-salaries",
        mode=ProcessMode.FILTERED,
        items_to_submit=["P1_PCT"],
        refresh_selection=True,
        refresh_grid=True,
        perform_substitutions=False,
        escape_message=False,
        remove_selection=True,
        dismiss_after=10_000,
    )


def test_render_client_config_escapes_only_with_client_substitution() -> None:
    server_side = render_client_config("a", _action())
    client_side = render_client_config(
        "b",
        _action(options=parse_options("client-substitutions:escape-message")),
    )
    client_raw = render_client_config("c", _action(options=parse_options("client-substitutions")))

    assert (server_side.perform_substitutions, server_side.escape_message) == (False, False)
    assert (client_side.perform_substitutions, client_side.escape_message) == (True, True)
    assert (client_raw.perform_substitutions, client_raw.escape_message) == (True, False)


def test_render_client_config_sends_zero_selection_message_only_when_warning() -> None:
    silent = render_client_config("a", _action(zero_selection_message="Pick rows"))
    warning = render_client_config(
        "b",
        _action(zero_selection_message="Pick rows", warn_on_empty_selection=True),
    )

    assert silent.zero_selection_message is None
    assert warning.zero_selection_message == "Pick rows"


def test_client_config_payload_uses_camel_case_keys() -> None:
    config = render_client_config("raise-salaries", _action(dismiss_after_seconds=0))

    payload = config.to_payload()

    assert payload["ajaxId"] == "raise-salaries"
    assert payload["dismissAfter"] == 0
    assert payload["escapeMessage"] is False
    assert ClientActionConfig.from_payload(payload) == config


def test_registry_lookup_and_duplicates() -> None:
    registry = ActionRegistry()
    action = _action()
    registry.register("raise", action)

    assert registry.get("raise") is action
    assert "raise" in registry
    assert list(registry) == ["raise"]
    assert len(registry) == 1
    with pytest.raises(ConfigurationError):
        registry.register("raise", action)
    with pytest.raises(UnknownActionError):
        registry.get("missing")


def test_render_client_config_escapes_zero_selection_message_for_display() -> None:
    escaped = render_client_config(
        "a",
        _action(zero_selection_message="<img src=x>", warn_on_empty_selection=True),
    )
    deferred = render_client_config(
        "b",
        _action(
            zero_selection_message="<img src=x>",
            warn_on_empty_selection=True,
            options=parse_options("client-substitutions:escape-message"),
        ),
    )
    raw = render_client_config(
        "c",
        _action(
            zero_selection_message="<img src=x>",
            warn_on_empty_selection=True,
            options=parse_options(""),
        ),
    )

    assert escaped.zero_selection_message == "&lt;img src=x&gt;"
    assert deferred.zero_selection_message == "<img src=x>"
    assert deferred.escape_message is True
    assert raw.zero_selection_message == "<img src=x>"
