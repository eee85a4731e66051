"""Selection payload codec and the ephemeral materialized selection.

The client sends the identifiers of its selected records as a JSON document of the
shape ``{"recordKeys": [["7839"], ["7698"]]}`` (one inner list per record, one value
per identifier column). Large documents are split into chunks so each transport
parameter stays below a size limit; the server joins the chunks before parsing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)

from gridrows.config.errors import ConfigurationError
from gridrows.config.processing import DEFAULT_CHUNK_SIZE
from gridrows.domain.errors import SelectionPayloadError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from gridrows.domain.model import IdentifierTuple

RECORD_KEYS: Final[str] = "recordKeys"
MAX_IDENTIFIER_COLUMNS: Final[int] = 50

# booleans, objects and nested lists are not identifier values
type KeyValue = StrictStr | StrictInt | StrictFloat | None


class SelectionDocument(BaseModel):
    """Wire shape of a selection payload."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    record_keys: list[list[KeyValue]] = Field(alias=RECORD_KEYS)


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def encode_selection(tuples: Iterable[Sequence[object]]) -> str:
    """Serialize identifier tuples into the JSON selection document."""

    keys = [[_as_text(value) for value in values] for values in tuples]
    return SelectionDocument(record_keys=keys).model_dump_json(by_alias=True)


def chunk_payload(payload: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    return [payload[start : start + chunk_size] for start in range(0, len(payload), chunk_size)]


def encode_selection_chunks(
    tuples: Iterable[Sequence[object]],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[str]:
    return chunk_payload(encode_selection(tuples), chunk_size)


def decode_selection(chunks: Sequence[str] | str) -> list[IdentifierTuple]:
    """Rebuild identifier tuples from one or more payload chunks, preserving order."""

    payload = chunks if isinstance(chunks, str) else "".join(chunks)
    if not payload.strip():
        return []
    try:
        document = SelectionDocument.model_validate_json(payload)
    except ValidationError as exc:
        raise SelectionPayloadError(f"Invalid selection payload: {exc}") from exc
    return [tuple(_as_text(value) for value in record) for record in document.record_keys]


def collection_column(position: int) -> str:
    """Name of the store column holding identifier column ``position`` (1-based)."""

    return f"c{position:03d}"


@dataclass(slots=True)
class MaterializedSelection:
    """Server-side copy of a selection, one entry per identifier tuple.

    Entries are keyed by a sequence id starting at 1. Each entry holds exactly
    ``column_count`` values; shorter tuples are padded with ``None`` and surplus
    values are dropped.
    """

    column_count: int
    selection_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    entries: dict[int, IdentifierTuple] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        tuples: Iterable[Sequence[str | None]],
        column_count: int,
    ) -> MaterializedSelection:
        if column_count < 1:
            raise ConfigurationError("A selection needs at least one identifier column")
        if column_count > MAX_IDENTIFIER_COLUMNS:
            raise ConfigurationError(
                f"At most {MAX_IDENTIFIER_COLUMNS} identifier columns are supported, "
                f"got {column_count}"
            )
        selection = cls(column_count=column_count)
        for values in tuples:
            selection.add(values)
        return selection

    def add(self, values: Sequence[str | None]) -> int:
        aligned = tuple(values[: self.column_count])
        aligned += (None,) * (self.column_count - len(aligned))
        seq_id = len(self.entries) + 1
        self.entries[seq_id] = aligned
        return seq_id

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(collection_column(position) for position in range(1, self.column_count + 1))

    def rows(self) -> list[dict[str, object]]:
        """Entries as flat records ready for bulk insertion into the store."""

        names = self.column_names
        return [
            {
                "selection_id": self.selection_id,
                "seq_id": seq_id,
                **dict(zip(names, values, strict=True)),
            }
            for seq_id, values in self.entries.items()
        ]

    def __len__(self) -> int:
        return len(self.entries)
