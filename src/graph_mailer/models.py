# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pydantic models for the Graph ``sendMail`` request body.

Field names are snake_case in Python and camelCase on the wire. Use
:meth:`SendMailRequest.to_payload` to obtain the JSON body.
"""

from __future__ import annotations

import base64
from collections.abc import Iterable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

FILE_ATTACHMENT_ODATA_TYPE = "#microsoft.graph.fileAttachment"


class GraphModel(BaseModel):
    """Base for Graph payload models (camelCase aliases, immutable)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class EmailAddress(GraphModel):
    address: str


class Recipient(GraphModel):
    email_address: EmailAddress

    @classmethod
    def of(cls, address: str) -> Recipient:
        return cls(email_address=EmailAddress(address=address))


class ItemBody(GraphModel):
    content_type: Literal["html", "text"] = "html"
    content: str = ""


class FileAttachment(GraphModel):
    """Attachment embedded in the message as raw bytes.

    ``content_bytes`` is base64-encoded on serialization.
    """

    odata_type: Annotated[
        Literal["#microsoft.graph.fileAttachment"],
        Field(default=FILE_ATTACHMENT_ODATA_TYPE, alias="@odata.type"),
    ]
    name: str
    content_bytes: bytes
    content_type: str

    @field_serializer("content_bytes")
    def _encode_content(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


def recipient_list(addresses: Iterable[str]) -> list[Recipient]:
    """Wrap plain addresses into Graph recipients."""
    return [Recipient.of(address) for address in addresses]


class Message(GraphModel):
    """Outbound message.

    The recipient collections are always serialized, even when empty.
    ``attachments`` is omitted from the payload when None.
    """

    subject: str
    body: ItemBody
    to_recipients: list[Recipient]
    cc_recipients: list[Recipient] = Field(default_factory=list)
    bcc_recipients: list[Recipient] = Field(default_factory=list)
    attachments: list[FileAttachment] | None = None


class SendMailRequest(GraphModel):
    message: Message
    save_to_sent_items: bool = True

    def to_payload(self) -> dict:
        """JSON-ready body for ``POST /users/{id}/sendMail``."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
