"""Pydantic models for the wire format exchanged between client and server."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gridrows.domain.model import MessageType, ResultEnvelope, ReturnedItem, Status


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProcessRowsPayload(WireModel):
    """Request body: selection chunks (``f01``) and submitted item values."""

    f01: list[str] = Field(default_factory=list)
    page_items: dict[str, str | None] = Field(default_factory=dict)


class ReturnedItemPayload(WireModel):
    name: str
    value: str | None = None


class ResultEnvelopePayload(WireModel):
    status: Status
    message: str | None = None
    message_title: str | None = None
    message_type: str | None = None
    items_to_return: list[ReturnedItemPayload] = Field(default_factory=list)
    cancel_actions: bool = False
    event_name: str | None = None

    @classmethod
    def from_envelope(cls, envelope: ResultEnvelope) -> ResultEnvelopePayload:
        return cls(
            status=envelope.status,
            message=envelope.message,
            message_title=envelope.message_title,
            message_type=envelope.message_type.value if envelope.message_type else None,
            items_to_return=[
                ReturnedItemPayload(name=item.name, value=item.value)
                for item in envelope.items_to_return
            ],
            cancel_actions=envelope.cancel_actions,
            event_name=envelope.event_name,
        )

    def to_envelope(self) -> ResultEnvelope:
        # unknown categories are kept out of the envelope; the client falls back on status
        message_type = MessageType.resolve(self.message_type) if self.message_type else None
        return ResultEnvelope(
            status=self.status,
            message=self.message,
            message_title=self.message_title,
            message_type=message_type,
            items_to_return=tuple(
                ReturnedItem(name=item.name, value=item.value) for item in self.items_to_return
            ),
            cancel_actions=self.cancel_actions,
            event_name=self.event_name,
        )


class ClientConfigPayload(WireModel):
    ajax_id: str
    mode: str
    items_to_submit: list[str] = Field(default_factory=list)
    refresh_selection: bool = False
    refresh_grid: bool = False
    perform_substitutions: bool = False
    escape_message: bool = False
    remove_selection: bool = False
    dismiss_after: int = 0
    zero_selection_message: str | None = None
