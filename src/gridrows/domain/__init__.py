"""Domain logic for processing selected or filtered dataset rows."""

from __future__ import annotations

from .actions import (
    ActionRegistry,
    ClientActionConfig,
    ExtraOption,
    ProcessRowsAction,
    parse_options,
    render_client_config,
)
from .errors import (
    FragmentError,
    MissingIdentifierColumnsError,
    SelectionPayloadError,
    UnknownActionError,
)
from .model import (
    CancelDirective,
    ErrorIdentity,
    IdentifierTuple,
    MessageType,
    ProcessMode,
    ResultEnvelope,
    ReturnedItem,
    RowSignals,
    Status,
)
from .processing import MutationFragment, ProcessOutcome, RowContext, process_rows
from .selection import MaterializedSelection, decode_selection, encode_selection_chunks
from .service import ProcessRequest, handle_process_request

__all__ = [
    "ActionRegistry",
    "CancelDirective",
    "ClientActionConfig",
    "ErrorIdentity",
    "ExtraOption",
    "FragmentError",
    "IdentifierTuple",
    "MaterializedSelection",
    "MessageType",
    "MissingIdentifierColumnsError",
    "MutationFragment",
    "ProcessMode",
    "ProcessOutcome",
    "ProcessRequest",
    "ProcessRowsAction",
    "ResultEnvelope",
    "ReturnedItem",
    "RowContext",
    "RowSignals",
    "SelectionPayloadError",
    "Status",
    "UnknownActionError",
    "decode_selection",
    "encode_selection_chunks",
    "handle_process_request",
    "parse_options",
    "process_rows",
    "render_client_config",
]
