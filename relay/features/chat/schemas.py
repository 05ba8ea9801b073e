from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from relay.features.attachments import AttachmentPayload

MAX_MESSAGE_LENGTH = 1000


class ChatRequest(BaseModel):
    message: str | None = None
    # Raw records; each is validated by the attachments service so a bad record
    # yields a specific message instead of a generic schema error.
    files: list[Any] | None = None


class ChatReply(BaseModel):
    reply: str


class ChatError(BaseModel):
    error: str


class ValidatedChat(BaseModel):
    message: str | None
    attachments: list[AttachmentPayload]
