"""Message templating: item substitution, error tokens and HTML escaping."""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from gridrows.domain.model import ErrorIdentity

SQLCODE_TOKEN: Final[str] = "#SQLCODE#"
SQLERRM_TOKEN: Final[str] = "#SQLERRM#"
SQLERRM_TEXT_TOKEN: Final[str] = "#SQLERRM_TEXT#"

DEFAULT_ERROR_MESSAGE: Final[str] = SQLERRM_TOKEN

_ITEM_PATTERN = r"&(?P<item>[A-Za-z][A-Za-z0-9_$#]*)\."
_ITEM_REFERENCE = re.compile(_ITEM_PATTERN)
_MESSAGE_REFERENCE = re.compile(_ITEM_PATTERN + r"|#(?P<token>SQLCODE|SQLERRM_TEXT|SQLERRM)#")


class ItemLookup(Protocol):
    def get(self, name: str, /) -> object | None: ...


def substitute_items(template: str, items: ItemLookup) -> str:
    """Replace ``&NAME.`` references with item values in a single pass.

    Names are matched case-insensitively against upper-cased item names first.
    Unknown items resolve to an empty string; substituted values are never rescanned.
    """

    return _ITEM_REFERENCE.sub(lambda match: _item_value(match.group("item"), items), template)


def _item_value(name: str, items: ItemLookup) -> str:
    value = items.get(name)
    if value is None and name.upper() != name:
        value = items.get(name.upper())
    return "" if value is None else str(value)


def escape_html(value: str) -> str:
    return html.escape(value, quote=True)


def substitute_error_message(
    template: str,
    error: ErrorIdentity,
    *,
    items: ItemLookup | None,
    escape: bool,
) -> str:
    """Resolve error tokens and, unless ``items`` is None, item references in one pass.

    Only the error values are escaped (when asked); resolved item values are never
    rescanned for tokens.
    """

    values = {
        "SQLCODE": error.code,
        "SQLERRM": error.full_text,
        "SQLERRM_TEXT": error.text_without_code,
    }

    def replace(match: re.Match[str]) -> str:
        token = match.group("token")
        if token is not None:
            value = values[token]
            return escape_html(value) if escape else value
        if items is None:
            return match.group(0)
        return _item_value(match.group("item"), items)

    return _MESSAGE_REFERENCE.sub(replace, template)
